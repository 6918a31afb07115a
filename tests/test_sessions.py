import uuid

from conftest import OTHER_USER_ID, USER_ID, at
from app.models import CounselingCategory
from app.schemas.counseling import SessionStatus


async def create_session(client, category_id, **payload):
    body = {"categoryId": category_id, "title": "Work stress", **payload}
    response = await client.post("/api/counseling/sessions", json=body)
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_session(client, default_categories):
    session = await create_session(
        client,
        default_categories["Career"],
        initialResponses={
            "career-situation": {
                "questionId": "career-situation",
                "answer": "Too many meetings",
                "timestamp": "2025-01-01T10:00:00Z",
            },
            "career-focus": {
                "questionId": "career-focus",
                "answer": ["Burnout"],
                "timestamp": "2025-01-01T10:01:00Z",
            },
        },
    )

    assert session["userId"] == USER_ID
    assert session["categoryId"] == default_categories["Career"]
    assert session["status"] == "active"
    assert session["metadata"] == {"messageCount": 0}
    assert session["summary"] is None
    assert session["initialResponses"]["career-focus"]["answer"] == ["Burnout"]


async def test_create_session_requires_visible_category(client, insert, default_categories):
    foreign = await insert(CounselingCategory(name="Theirs", is_custom=True, user_id=OTHER_USER_ID))

    for category_id in (str(uuid.uuid4()), foreign.id):
        response = await client.post(
            "/api/counseling/sessions",
            json={"categoryId": category_id, "title": "Nope"},
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CATEGORY_NOT_FOUND"


async def test_create_session_validates_payload(client, default_categories):
    response = await client.post(
        "/api/counseling/sessions",
        json={"categoryId": default_categories["Career"], "title": ""},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"

    response = await client.post(
        "/api/counseling/sessions",
        json={"categoryId": "not-a-uuid", "title": "Title"},
    )
    assert response.status_code == 400


async def test_get_session_of_other_user_returns_404(client, current_user, default_categories):
    session = await create_session(client, default_categories["Career"])

    current_user["uid"] = OTHER_USER_ID
    response = await client.get(f"/api/counseling/sessions/{session['id']}")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "SESSION_NOT_FOUND"


async def test_get_session_with_malformed_id_returns_400(client):
    response = await client.get("/api/counseling/sessions/not-a-uuid")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


async def test_update_session_changes_only_provided_fields(client, default_categories):
    session = await create_session(client, default_categories["Career"])
    url = f"/api/counseling/sessions/{session['id']}"

    response = await client.patch(url, json={"summary": "Talked about deadlines"})
    assert response.status_code == 200
    updated = response.json()
    assert updated["summary"] == "Talked about deadlines"
    assert updated["title"] == "Work stress"
    assert updated["status"] == "active"

    updated = (await client.patch(url, json={"title": "Deadlines", "status": "completed"})).json()
    assert updated["title"] == "Deadlines"
    assert updated["status"] == "completed"
    assert updated["summary"] == "Talked about deadlines"

    updated = (await client.patch(url, json={"summary": None})).json()
    assert updated["summary"] is None
    assert updated["title"] == "Deadlines"


async def test_update_session_merges_metadata(client, default_categories):
    session = await create_session(client, default_categories["Career"])
    url = f"/api/counseling/sessions/{session['id']}"

    updated = (await client.patch(url, json={"metadata": {"tags": ["work"]}})).json()
    assert updated["metadata"] == {"messageCount": 0, "tags": ["work"]}

    updated = (await client.patch(url, json={"metadata": {"tags": ["work", "sleep"]}})).json()
    assert updated["metadata"] == {"messageCount": 0, "tags": ["work", "sleep"]}


async def test_update_session_sets_thumbnail(client, default_categories):
    session = await create_session(client, default_categories["Career"])

    response = await client.patch(
        f"/api/counseling/sessions/{session['id']}",
        json={"thumbnail": "https://cdn.example.com/thumbs/1.png"},
    )

    assert response.status_code == 200
    assert response.json()["thumbnail"] == "https://cdn.example.com/thumbs/1.png"


async def test_update_session_rejects_invalid_fields(client, default_categories):
    session = await create_session(client, default_categories["Career"])
    url = f"/api/counseling/sessions/{session['id']}"

    assert (await client.patch(url, json={"status": "deleted"})).status_code == 400
    assert (await client.patch(url, json={"summary": "x" * 1001})).status_code == 400
    assert (await client.patch(url, json={"thumbnail": "not a url"})).status_code == 400
    assert (await client.patch(url, json={"metadata": {"messageCount": -1}})).status_code == 400


async def test_update_session_of_other_user_returns_404(client, current_user, default_categories):
    session = await create_session(client, default_categories["Career"])

    current_user["uid"] = OTHER_USER_ID
    response = await client.patch(f"/api/counseling/sessions/{session['id']}", json={"title": "Mine"})

    assert response.status_code == 404


async def test_delete_session_archives_and_is_idempotent(client, current_user, default_categories):
    session = await create_session(client, default_categories["Career"])
    url = f"/api/counseling/sessions/{session['id']}"

    for _ in range(2):
        response = await client.delete(url)
        assert response.status_code == 200
        assert response.json() == {"success": True}

    assert (await client.get(url)).json()["status"] == "archived"

    active = (await client.get("/api/counseling/sessions", params={"status": "active"})).json()
    assert active["data"] == []
    assert active["pagination"]["total"] == 0
    archived = (await client.get("/api/counseling/sessions", params={"status": "archived"})).json()
    assert [s["id"] for s in archived["data"]] == [session["id"]]

    current_user["uid"] = OTHER_USER_ID
    response = await client.delete(url)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "SESSION_NOT_FOUND"


async def test_list_sessions_paginates_by_last_activity(client, insert, make_session):
    oldest, newest, middle = await insert(
        make_session(title="oldest", last_activity_at=at(1)),
        make_session(title="newest", last_activity_at=at(3)),
        make_session(title="middle", last_activity_at=at(2)),
    )

    first = (await client.get("/api/counseling/sessions", params={"limit": 2})).json()
    assert [s["title"] for s in first["data"]] == ["newest", "middle"]
    assert first["pagination"] == {"total": 3, "limit": 2, "offset": 0, "hasMore": True}

    second = (await client.get("/api/counseling/sessions", params={"limit": 2, "offset": 2})).json()
    assert [s["id"] for s in second["data"]] == [oldest.id]
    assert second["pagination"] == {"total": 3, "limit": 2, "offset": 2, "hasMore": False}


async def test_list_sessions_filters(client, insert, make_session, default_categories):
    await insert(
        make_session(title="career active"),
        make_session(title="career done", status=SessionStatus.completed),
        make_session(title="family done", status=SessionStatus.completed, category_id=default_categories["Family"]),
        make_session(title="someone else", user_id=OTHER_USER_ID),
    )

    body = (await client.get("/api/counseling/sessions", params={"status": "completed"})).json()
    assert sorted(s["title"] for s in body["data"]) == ["career done", "family done"]
    assert body["pagination"]["total"] == 2

    body = (await client.get(
        "/api/counseling/sessions",
        params={"status": "completed", "categoryId": default_categories["Family"]},
    )).json()
    assert [s["title"] for s in body["data"]] == ["family done"]

    body = (await client.get("/api/counseling/sessions")).json()
    assert body["pagination"]["total"] == 3
    assert all(s["userId"] == USER_ID for s in body["data"])


async def test_list_sessions_rejects_bad_query(client):
    for params in ({"limit": 0}, {"limit": 101}, {"offset": -1}, {"status": "deleted"}, {"categoryId": "x"}):
        response = await client.get("/api/counseling/sessions", params=params)
        assert response.status_code == 400, params
        assert response.json()["error"]["code"] == "INVALID_REQUEST"


async def test_invalid_stored_session_is_skipped_in_listing(client, insert, make_session):
    broken = await insert(make_session(title="broken", session_meta={"messageCount": -5}))
    await insert(make_session(title="fine"))

    body = (await client.get("/api/counseling/sessions")).json()
    assert [s["title"] for s in body["data"]] == ["fine"]

    response = await client.get(f"/api/counseling/sessions/{broken.id}")
    assert response.status_code == 500
    assert response.json()["error"]["code"] == "SESSION_VALIDATION_ERROR"


async def test_thumbnail_is_stored_as_sent(client, default_categories):
    session = await create_session(client, default_categories["Career"])

    response = await client.patch(
        f"/api/counseling/sessions/{session['id']}",
        json={"thumbnail": "https://cdn.example.com"},
    )

    assert response.status_code == 200
    assert response.json()["thumbnail"] == "https://cdn.example.com"
