"""Notification routes — listing and read-state over HTTP."""


async def _sign_up(client) -> dict:
    res = await client.post("/api/v1/auth/sign-up", json={
        "email": "fresh@example.com", "password": "pw", "full_name": "Fresh User",
    })
    assert res.status_code == 201
    return res.json()


async def test_notifications_need_session(client):
    assert (await client.get("/api/v1/notifications")).status_code == 401


async def test_welcome_notification_listed_unread(client):
    await _sign_up(client)
    body = (await client.get("/api/v1/notifications")).json()

    assert body["unread_count"] == 1
    welcome = body["notifications"][0]
    assert welcome["title"] == "Welcome!"
    assert welcome["kind"] == "success"
    assert "Fresh User" in welcome["message"]


async def test_mark_read_twice(client):
    await _sign_up(client)
    notification_id = (await client.get("/api/v1/notifications")).json()["notifications"][0]["id"]

    for _ in range(2):
        res = await client.post(f"/api/v1/notifications/{notification_id}/read")
        assert res.status_code == 200
        assert res.json()["is_read"] is True

    body = (await client.get("/api/v1/notifications")).json()
    assert body["unread_count"] == 0
    assert len(body["notifications"]) == 1


async def test_mark_read_of_other_account_is_404(client):
    await _sign_up(client)
    notification_id = (await client.get("/api/v1/notifications")).json()["notifications"][0]["id"]

    await client.post("/api/v1/auth/sign-in", json={
        "email": "user@example.com", "password": "user123",
    })
    res = await client.post(f"/api/v1/notifications/{notification_id}/read")
    assert res.status_code == 404
    assert (await client.get("/api/v1/notifications")).json()["notifications"] == []
