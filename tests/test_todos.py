"""Test the /todos endpoints."""

import json
from collections.abc import Callable
from datetime import datetime, timedelta

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tododeck.api.errors import JSONAPI_CONTENT_TYPE
from tododeck.models.category import Category
from tododeck.models.todo import Todo
from tododeck.models.user import User


def _names(response) -> list[str]:
    return [item["attributes"]["name"] for item in response.json()["data"]]


def _post(client: TestClient, headers: dict[str, str], body: dict):
    return client.post("/todos", content=json.dumps(body), headers=headers)


def test_list_requires_token(client: TestClient) -> None:
    """Missing credentials give a bodiless 401."""
    response = client.get("/todos", params={"filter[status]": "available"})

    assert response.status_code == 401
    assert response.content == b""


def test_list_rejects_garbage_token(client: TestClient) -> None:
    response = client.get("/todos", headers={"Authorization": "Bearer nonsense"})

    assert response.status_code == 401
    assert response.content == b""


def test_list_available(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
    now: datetime,
) -> None:
    make_todo(name="Available")
    make_todo(name="Past deferred", deferred_until=now - timedelta(days=1))
    make_todo(name="Tomorrow", deferred_until=now + timedelta(hours=20))
    make_todo(name="Future", deferred_until=now + timedelta(days=2))
    make_todo(name="Completed", completed_at=now)
    make_todo(name="Deleted", deleted_at=now)

    response = client.get("/todos", params={"filter[status]": "available"}, headers=headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith(JSONAPI_CONTENT_TYPE)
    body = response.json()
    assert "errors" not in body
    assert "included" not in body
    assert "meta" not in body
    assert _names(response) == ["Available", "Past deferred"]


def test_list_tomorrow_and_future(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
    now: datetime,
) -> None:
    make_todo(name="Available")
    make_todo(name="Tomorrow", deferred_until=now + timedelta(hours=20))
    make_todo(name="Future", deferred_until=now + timedelta(days=2))

    tomorrow = client.get("/todos", params={"filter[status]": "tomorrow"}, headers=headers)
    future = client.get("/todos", params={"filter[status]": "future"}, headers=headers)

    assert _names(tomorrow) == ["Tomorrow"]
    assert sorted(_names(future)) == ["Future", "Tomorrow"]


def test_list_union_of_statuses(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
    now: datetime,
) -> None:
    make_todo(name="Available")
    make_todo(name="Tomorrow", deferred_until=now + timedelta(hours=20))
    make_todo(name="Future", deferred_until=now + timedelta(days=2))

    response = client.get(
        "/todos", params={"filter[status]": "available,tomorrow"}, headers=headers
    )

    assert sorted(_names(response)) == ["Available", "Tomorrow"]
    assert "meta" not in response.json()


def test_list_without_filter_returns_all_of_mine(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
    other_user: User,
    now: datetime,
) -> None:
    make_todo(name="Mine")
    make_todo(name="Mine, done", completed_at=now)
    make_todo(owner=other_user, name="Theirs")

    response = client.get("/todos", headers=headers)

    assert _names(response) == ["Mine", "Mine, done"]


def test_list_returns_empty_array(client: TestClient, headers: dict[str, str]) -> None:
    response = client.get("/todos", params={"filter[status]": "available"}, headers=headers)

    assert response.json() == {"data": []}


def test_list_search_sort_and_include(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
    make_category: Callable[..., Category],
    now: datetime,
) -> None:
    category = make_category(name="Errands")
    make_todo(name="B Buy groceries", category_id=category.id, deferred_until=now + timedelta(days=3))
    make_todo(name="A Buy milk", deferred_until=now + timedelta(days=3))
    make_todo(name="Call dentist", deferred_until=now + timedelta(days=3))

    response = client.get(
        "/todos",
        params={
            "filter[status]": "future",
            "filter[search]": "buy",
            "sort": "name",
            "include": "category",
        },
        headers=headers,
    )

    body = response.json()
    assert _names(response) == ["A Buy milk", "B Buy groceries"]
    assert body["included"] == [
        {
            "type": "categories",
            "id": str(category.id),
            "attributes": {"name": "Errands", "sort-order": category.sort_order},
        }
    ]
    assert body["data"][0]["relationships"]["category"]["data"] is None
    assert body["data"][1]["relationships"]["category"]["data"] == {
        "type": "categories",
        "id": str(category.id),
    }


def test_list_sort_descending(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
) -> None:
    make_todo(name="Alpha")
    make_todo(name="Beta")

    response = client.get("/todos", params={"sort": "-name"}, headers=headers)

    assert _names(response) == ["Beta", "Alpha"]


def test_include_lists_each_category_once(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
    make_category: Callable[..., Category],
) -> None:
    work = make_category(name="Work")
    home = make_category(name="Home")
    make_todo(category_id=work.id)
    make_todo(category_id=work.id)
    make_todo(category_id=home.id)
    make_todo()

    response = client.get("/todos", params={"include": "category"}, headers=headers)

    included_ids = [item["id"] for item in response.json()["included"]]
    assert included_ids == [str(work.id), str(home.id)]


def test_include_without_categories_is_omitted(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
) -> None:
    make_todo()

    response = client.get("/todos", params={"include": "category"}, headers=headers)

    body = response.json()
    assert "included" not in body
    assert len(body["data"]) == 1


def test_completed_listing_is_paginated(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
    now: datetime,
) -> None:
    for i in range(15):
        make_todo(completed_at=now - timedelta(minutes=i))

    def page(number: int) -> dict:
        return client.get(
            "/todos",
            params={"filter[status]": "completed", "sort": "-completedAt", "page[number]": number},
            headers=headers,
        ).json()

    first, second, beyond = page(1), page(2), page(99)

    assert first["meta"] == {"page-count": 2}
    assert len(first["data"]) == 10
    assert len(second["data"]) == 5
    first_ids = {item["id"] for item in first["data"]}
    second_ids = {item["id"] for item in second["data"]}
    assert first_ids.isdisjoint(second_ids)
    assert beyond["data"] == []
    assert beyond["meta"] == {"page-count": 2}


def test_deleted_listing_defaults_to_first_page(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
    now: datetime,
) -> None:
    for _ in range(12):
        make_todo(deleted_at=now)

    response = client.get("/todos", params={"filter[status]": "deleted"}, headers=headers)

    assert len(response.json()["data"]) == 10
    assert response.json()["meta"] == {"page-count": 2}


def test_invalid_page_number_is_rejected(client: TestClient, headers: dict[str, str]) -> None:
    response = client.get(
        "/todos", params={"filter[status]": "completed", "page[number]": "two"}, headers=headers
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "400"
    assert response.json()["errors"][0]["title"] == "Invalid query parameter"


def test_show_todo(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
    make_category: Callable[..., Category],
    now: datetime,
) -> None:
    category = make_category(name="Work")
    todo = make_todo(
        name="Test Todo",
        notes="Some notes",
        completed_at=now,
        deferred_until=now + timedelta(days=1),
        category_id=category.id,
    )

    response = client.get(f"/todos/{todo.id}", params={"include": "category"}, headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["id"] == str(todo.id)
    attributes = body["data"]["attributes"]
    assert attributes["name"] == "Test Todo"
    assert attributes["notes"] == "Some notes"
    assert attributes["completed-at"] is not None
    assert attributes["deferred-until"] is not None
    assert attributes["deleted-at"] is None
    assert "completed_at" not in attributes
    assert [item["id"] for item in body["included"]] == [str(category.id)]


def test_show_todo_of_another_user_is_not_found(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
    other_user: User,
) -> None:
    theirs = make_todo(owner=other_user)

    response = client.get(f"/todos/{theirs.id}", headers=headers)
    missing = client.get("/todos/999999", headers=headers)
    malformed = client.get("/todos/not-an-id", headers=headers)

    assert response.status_code == 404
    assert response.json() == {"errors": [{"code": "404", "title": "Record not found"}]}
    assert missing.status_code == 404
    assert malformed.status_code == 404


def test_create_todo_round_trip(client: TestClient, headers: dict[str, str]) -> None:
    response = _post(
        client,
        headers,
        {
            "data": {
                "type": "todos",
                "attributes": {
                    "name": "New Todo",
                    "notes": "Remember this",
                    "deferred-until": "2030-01-02T03:04:05.678Z",
                },
            }
        },
    )

    assert response.status_code == 201
    created = response.json()["data"]
    assert created["relationships"]["category"]["data"] is None

    fetched = client.get(f"/todos/{created['id']}", headers=headers).json()["data"]
    assert fetched["attributes"] == created["attributes"]
    assert fetched["attributes"]["name"] == "New Todo"
    assert fetched["attributes"]["notes"] == "Remember this"
    assert fetched["attributes"]["deferred-until"] == "2030-01-02T03:04:05.678Z"
    assert fetched["attributes"]["completed-at"] is None
    assert fetched["attributes"]["created-at"] is not None


def test_create_todo_with_category(
    client: TestClient,
    headers: dict[str, str],
    make_category: Callable[..., Category],
) -> None:
    category = make_category()

    response = _post(
        client,
        headers,
        {
            "data": {
                "type": "todos",
                "attributes": {"name": "Filed"},
                "relationships": {
                    "category": {"data": {"type": "categories", "id": str(category.id)}}
                },
            }
        },
    )

    assert response.status_code == 201
    assert response.json()["data"]["relationships"]["category"]["data"]["id"] == str(category.id)


def test_create_todo_with_foreign_category_fails(
    client: TestClient,
    headers: dict[str, str],
    make_category: Callable[..., Category],
    other_user: User,
) -> None:
    theirs = make_category(owner=other_user)

    response = _post(
        client,
        headers,
        {
            "data": {
                "type": "todos",
                "attributes": {"name": "Sneaky"},
                "relationships": {"category": {"data": {"type": "categories", "id": str(theirs.id)}}},
            }
        },
    )

    assert response.status_code == 422
    assert response.json()["errors"][0]["title"] == "Category must exist"


def test_create_todo_validation(client: TestClient, headers: dict[str, str], db: Session) -> None:
    missing = _post(client, headers, {"data": {"type": "todos", "attributes": {"notes": "x"}}})
    blank = _post(client, headers, {"data": {"type": "todos", "attributes": {"name": "  "}}})

    assert missing.status_code == 422
    assert missing.json() == {
        "errors": [{"code": "422", "title": "Name can't be blank", "detail": "Name can't be blank"}]
    }
    assert blank.status_code == 422
    assert db.query(Todo).count() == 0


def test_create_todo_envelope_errors(client: TestClient, headers: dict[str, str]) -> None:
    no_data = _post(client, headers, {"name": "x"})
    no_type = _post(client, headers, {"data": {"attributes": {"name": "x"}}})
    wrong_type = _post(client, headers, {"data": {"type": "categories", "attributes": {"name": "x"}}})
    malformed = client.post("/todos", content="{oops", headers=headers)

    assert no_data.status_code == 400
    assert no_data.json()["errors"][0]["title"] == "Missing data key"
    assert no_type.status_code == 400
    assert wrong_type.status_code == 400
    assert wrong_type.json()["errors"][0]["title"] == "Invalid or missing type"
    assert malformed.status_code == 400
    assert malformed.json()["errors"][0]["title"] == "Invalid JSON"


def test_create_todo_requires_token(client: TestClient) -> None:
    response = client.post(
        "/todos",
        content=json.dumps({"data": {"type": "todos", "attributes": {"name": "x"}}}),
        headers={"Content-Type": JSONAPI_CONTENT_TYPE},
    )

    assert response.status_code == 401
    assert response.content == b""


def test_update_todo(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
    make_category: Callable[..., Category],
) -> None:
    category = make_category()
    todo = make_todo(name="Old", notes="Keep me", category_id=category.id)

    response = client.patch(
        f"/todos/{todo.id}",
        content=json.dumps(
            {
                "data": {
                    "type": "todos",
                    "id": str(todo.id),
                    "attributes": {"name": "New", "completed-at": "2026-10-18T10:00:00Z"},
                    "relationships": {"category": {"data": None}},
                }
            }
        ),
        headers=headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["attributes"]["name"] == "New"
    assert data["attributes"]["notes"] == "Keep me"
    assert data["attributes"]["completed-at"] == "2026-10-18T10:00:00.000Z"
    assert data["relationships"]["category"]["data"] is None


def test_update_todo_errors(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
    other_user: User,
) -> None:
    todo = make_todo()
    theirs = make_todo(owner=other_user, name="Theirs")

    def patch(todo_id: int, body: dict):
        return client.patch(f"/todos/{todo_id}", content=json.dumps(body), headers=headers)

    mismatch = patch(todo.id, {"data": {"type": "todos", "id": "0", "attributes": {}}})
    blank = patch(todo.id, {"data": {"type": "todos", "id": str(todo.id), "attributes": {"name": ""}}})
    foreign = patch(
        theirs.id,
        {"data": {"type": "todos", "id": str(theirs.id), "attributes": {"name": "Hacked"}}},
    )

    assert mismatch.status_code == 400
    assert mismatch.json()["errors"][0]["title"] == "ID mismatch"
    assert blank.status_code == 422
    assert foreign.status_code == 404


def test_soft_delete_via_update(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
) -> None:
    todo = make_todo(name="Archive me")

    client.patch(
        f"/todos/{todo.id}",
        content=json.dumps(
            {
                "data": {
                    "type": "todos",
                    "id": str(todo.id),
                    "attributes": {"deleted-at": "2026-10-18T10:00:00Z"},
                }
            }
        ),
        headers=headers,
    )
    response = client.get("/todos", params={"filter[status]": "deleted"}, headers=headers)

    assert _names(response) == ["Archive me"]


def test_delete_todo(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
    other_user: User,
    db: Session,
) -> None:
    todo = make_todo()
    theirs = make_todo(owner=other_user)

    response = client.delete(f"/todos/{todo.id}", headers=headers)
    foreign = client.delete(f"/todos/{theirs.id}", headers=headers)

    assert response.status_code == 204
    assert response.content == b""
    assert client.get(f"/todos/{todo.id}", headers=headers).status_code == 404
    assert foreign.status_code == 404
    db.expire_all()
    assert db.query(Todo).filter(Todo.id == theirs.id).count() == 1


def test_show_uncategorized_todo_omits_included(
    client: TestClient,
    headers: dict[str, str],
    make_todo: Callable[..., Todo],
) -> None:
    todo = make_todo()

    response = client.get(f"/todos/{todo.id}", params={"include": "category"}, headers=headers)

    assert response.status_code == 200
    assert "included" not in response.json()
