"""
Tests for the recipes HTTP API.
"""

from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from recipes_api.api.app import create_app
from recipes_api.handlers import RecipeHandler
from recipes_api.repositories import MongoRecipeRepository
from recipes_api.services import RecipeService


def create(client, body):
    response = client.post("/recipes", json=body)
    assert response.status_code == 200
    return response.json()


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Recipes API"
    assert data["endpoints"]["recipes"] == "/recipes"


def test_list_empty(client):
    """An empty store lists as an empty array."""
    response = client.get("/recipes")
    assert response.status_code == 200
    assert response.json() == []


def test_round_trip(client, tea):
    """A created recipe comes back from list and tag search unchanged."""
    created = create(client, tea)
    assert created["id"]
    assert created["published_at"]
    for field in ("name", "instructions", "ingredients", "tags"):
        assert created[field] == tea[field]

    listed = client.get("/recipes").json()
    assert listed == [created]

    found = client.get("/recipes/search", params={"tag": "drink"}).json()
    assert found == [created]


def test_create_ignores_client_id(client, store, tea):
    """The identifier is always server-assigned."""
    created = create(client, {**tea, "id": "client-chosen"})
    assert created["id"] != "client-chosen"
    assert [recipe.id for recipe in store.find_all()] == [created["id"]]


def test_create_missing_fields_default_to_empty(client):
    """Binding is structural: absent fields are empty, not errors."""
    created = create(client, {"name": "Toast"})
    assert created["name"] == "Toast"
    assert created["instructions"] == []
    assert created["ingredients"] == []
    assert created["tags"] == []


def test_create_malformed_json(client, store):
    """Malformed JSON answers 500 with a message and stores nothing."""
    response = client.post(
        "/recipes",
        content=b'{"name": "Tea", ',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 500
    assert response.json()["error"]
    assert store.count() == 0


def test_create_wrong_types(client, store):
    """A body of the wrong shape is rejected before the store."""
    response = client.post("/recipes", json={"name": "Tea", "tags": "drink"})
    assert response.status_code == 500
    assert "tags" in response.json()["error"]
    assert store.count() == 0


def test_create_non_object_body(client, store):
    """A JSON array is not a recipe."""
    response = client.post("/recipes", json=["Tea"])
    assert response.status_code == 500
    assert response.json()["error"]
    assert store.count() == 0


@pytest.mark.parametrize(
    "content",
    [b"{not json", b'{"name": 42}'],
)
def test_strict_mode_answers_400(strict_client, store, content):
    """With strict client errors, bad bodies are 400 instead of 500."""
    response = strict_client.post(
        "/recipes",
        content=content,
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"]
    assert store.count() == 0


def test_update_overwrites_fields(client, tea):
    """Update replaces the editable fields but keeps id and timestamp."""
    created = create(client, tea)

    body = {
        "name": "Green tea",
        "instructions": ["Heat water to 80C", "Steep two minutes"],
        "ingredients": ["water", "green tea"],
        "tags": ["drink", "green"],
    }
    response = client.put(f"/recipes/{created['id']}", json=body)
    assert response.status_code == 200
    assert response.json() == {"message": "Recipe has been updated"}

    (updated,) = client.get("/recipes").json()
    assert updated["id"] == created["id"]
    assert updated["published_at"] == created["published_at"]
    for field, value in body.items():
        assert updated[field] == value


def test_update_unknown_id_still_succeeds(client):
    """Update is not existence-checked."""
    response = client.put("/recipes/65f1c0ffee0000000000beef", json={"name": "Ghost"})
    assert response.status_code == 200
    assert response.json() == {"message": "Recipe has been updated"}


def test_update_malformed_id_changes_nothing(client, store, tea):
    """A malformed id matches no record, and the request still succeeds."""
    created = create(client, tea)
    response = client.put("/recipes/not-an-id", json={"name": "Coffee"})
    assert response.status_code == 200
    assert [recipe.name for recipe in store.find_all()] == ["Tea"]
    assert store.find_all()[0].id == created["id"]


def test_update_malformed_body(client, tea):
    """A bad body on update is rejected like on create."""
    created = create(client, tea)
    response = client.put(f"/recipes/{created['id']}", json={"instructions": "stir"})
    assert response.status_code == 500
    assert response.json()["error"]
    assert client.get("/recipes").json() == [created]


def test_delete(client, tea):
    """Deleted recipes disappear from list and search."""
    created = create(client, tea)
    response = client.delete(f"/recipes/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Recipe has been deleted"}
    assert client.get("/recipes").json() == []
    assert client.get("/recipes/search", params={"tag": "drink"}).json() == []


def test_delete_unknown_id_still_succeeds(client):
    """Delete reports success whether or not anything matched."""
    response = client.delete("/recipes/not-an-id")
    assert response.status_code == 200
    assert response.json() == {"message": "Recipe has been deleted"}


def test_search_by_tag(client):
    """Search returns exactly the tagged recipes, in store order."""
    cake = create(client, {"name": "Cake", "tags": ["dessert", "baked"]})
    create(client, {"name": "Soup", "tags": ["starter"]})
    pie = create(client, {"name": "Pie", "tags": ["baked", "dessert"]})
    create(client, {"name": "Dessert wine", "tags": ["desserts"]})

    response = client.get("/recipes/search", params={"tag": "dessert"})
    assert response.status_code == 200
    assert [recipe["id"] for recipe in response.json()] == [cake["id"], pie["id"]]


def test_search_no_match(client, tea):
    """No match is an empty array, not an error."""
    create(client, tea)
    response = client.get("/recipes/search", params={"tag": "dessert"})
    assert response.status_code == 200
    assert response.json() == []


def test_search_without_tag(client, tea):
    """A missing tag searches for the empty tag."""
    create(client, tea)
    response = client.get("/recipes/search")
    assert response.status_code == 200
    assert response.json() == []


def test_list_served_from_cache(client, store, tea):
    """The second list is answered by the cache."""
    create(client, tea)
    first = client.get("/recipes").json()
    second = client.get("/recipes").json()
    assert first == second
    assert store.find_all_calls == 1


@pytest.mark.parametrize("write", ["create", "update", "delete"])
def test_writes_invalidate_cached_list(client, store, tea, write):
    """After any write the next list reflects the store."""
    created = create(client, tea)
    client.get("/recipes")

    if write == "create":
        client.post("/recipes", json={"name": "Coffee"})
    elif write == "update":
        client.put(f"/recipes/{created['id']}", json={"name": "Coffee"})
    else:
        client.delete(f"/recipes/{created['id']}")

    listed = client.get("/recipes").json()
    assert [recipe["name"] for recipe in listed] == [recipe.name for recipe in store.find_all()]


def test_uncached_list_reads_store(uncached_client, store, tea):
    """With caching disabled every list goes to the store."""
    create(uncached_client, tea)
    uncached_client.get("/recipes")
    uncached_client.get("/recipes")
    assert store.find_all_calls == 2


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/recipes"),
        ("get", "/recipes/search?tag=drink"),
        ("delete", "/recipes/65f1c0ffee0000000000beef"),
    ],
)
def test_store_failure_is_500(client, store, method, path):
    """Backend errors surface as 500 with the backend's message."""
    store.fail = True
    response = client.request(method, path)
    assert response.status_code == 500
    assert response.json() == {"error": "connection refused"}


def test_create_store_failure_is_500(client, store, tea):
    """A failed insert is a server error."""
    store.fail = True
    response = client.post("/recipes", json=tea)
    assert response.status_code == 500
    assert response.json() == {"error": "connection refused"}


def test_cache_read_failure_is_500(client, cache):
    """A cache backend error is not a miss."""
    cache.fail_reads = True
    response = client.get("/recipes")
    assert response.status_code == 500
    assert response.json() == {"error": "cache read timed out"}


def test_cache_write_failure_is_not_fatal(client, cache, tea):
    """The list is returned even when it cannot be cached."""
    created = create(client, tea)
    cache.fail_writes = True
    response = client.get("/recipes")
    assert response.status_code == 200
    assert response.json() == [created]
    assert cache.snapshot is None


def test_unknown_route_uses_error_body(client):
    """Framework errors use the same error body."""
    response = client.get("/nope")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "store_healthy": True, "cache_healthy": True}


def test_health_store_down(client, store):
    """An unreachable store makes the service unhealthy."""
    store.fail = True
    response = client.get("/health")
    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["store_healthy"] is False


def test_health_without_cache(uncached_client):
    """Cache health is null when caching is disabled."""
    data = uncached_client.get("/health").json()
    assert data == {"status": "healthy", "store_healthy": True, "cache_healthy": None}


def test_health_cache_down(client, cache):
    """An unreachable cache also answers 503."""
    cache.fail_reads = True
    response = client.get("/health")
    assert response.status_code == 503
    assert response.json()["cache_healthy"] is False


def test_unexpected_error_keeps_error_body(service, store, monkeypatch):
    """Errors the handlers do not map still answer 500 with an error body."""

    def broken_search(tag):
        raise RuntimeError("cursor id not valid")

    monkeypatch.setattr(store, "find_by_tag", broken_search)
    app = create_app(RecipeHandler(recipe_service=service))
    client = TestClient(app, raise_server_exceptions=False)

    response = client.get("/recipes/search", params={"tag": "x"})
    assert response.status_code == 500
    assert response.headers["content-type"] == "application/json"
    assert response.json() == {"error": "cursor id not valid"}


def test_irregular_documents_are_served(cache):
    """Documents with odd field types still list and search cleanly."""
    odd_id = ObjectId()
    collection = MagicMock()
    collection.find.return_value = [
        {"_id": odd_id, "name": odd_id, "instructions": None, "tags": ["x"]},
    ]
    store = MongoRecipeRepository(collection=collection, client=MagicMock())
    service = RecipeService.create(store=store, cache=cache)
    client = TestClient(create_app(RecipeHandler(recipe_service=service)))

    found = client.get("/recipes/search", params={"tag": "x"})
    assert found.status_code == 200
    (recipe,) = found.json()
    assert recipe["id"] == str(odd_id)
    assert recipe["name"] == str(odd_id)
    assert recipe["instructions"] == []

    listed = client.get("/recipes")
    assert listed.status_code == 200
    assert listed.json() == found.json()
    assert cache.snapshot is not None
