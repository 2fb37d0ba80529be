import pytest


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_register_and_login(client):
    response = await client.post("/api/auth/register", json={
        "name": "Dana",
        "email": "Dana@Example.com",
        "password": "secret123",
    })
    assert response.status_code == 201
    body = response.json()
    assert body["user"]["email"] == "dana@example.com"
    assert body["user"]["connections"] == []
    assert body["access_token"]

    duplicate = await client.post("/api/auth/register", json={
        "name": "Dana Again",
        "email": "dana@example.com",
        "password": "secret123",
    })
    assert duplicate.status_code == 400
    assert duplicate.json()["error_code"] == "USER_ALREADY_EXISTS"

    login = await client.post("/api/auth/login", data={"username": "dana@example.com", "password": "secret123"})
    assert login.status_code == 200

    profile = await client.get(
        "/api/users/profile",
        headers={"Authorization": f"Bearer {login.json()['access_token']}"}
    )
    assert profile.status_code == 200
    assert profile.json()["name"] == "Dana"


@pytest.mark.asyncio
async def test_login_with_wrong_password(client, alice):
    response = await client.post("/api/auth/login", data={"username": alice.email, "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json()["error_code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_register_validates_password_length(client):
    response = await client.post("/api/auth/register", json={
        "name": "Eve",
        "email": "eve@example.com",
        "password": "123",
    })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_requests_require_a_token(client):
    response = await client.get("/api/connections")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_profile(client, alice, headers_for):
    response = await client.put("/api/users/profile", headers=headers_for(alice), json={
        "bio": "Backend engineer",
        "skills": ["python", "sql"],
        "experience": [{"title": "Engineer", "company": "Acme", "current": True}],
    })
    assert response.status_code == 200
    body = response.json()
    assert body["bio"] == "Backend engineer"
    assert body["skills"] == ["python", "sql"]
    assert body["experience"][0]["company"] == "Acme"
    assert body["name"] == "Alice"


@pytest.mark.asyncio
async def test_user_directory(client, alice, bob, headers_for):
    response = await client.get("/api/users", headers=headers_for(alice))
    assert response.status_code == 200
    assert {u["id"] for u in response.json()} == {alice.id, bob.id}

    missing = await client.get("/api/users/missing-user", headers=headers_for(alice))
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_connection_flow_end_to_end(client, alice, bob, headers_for):
    sent = await client.post("/api/connections/request", headers=headers_for(alice), json={"recipient_id": bob.id})
    assert sent.status_code == 201
    connection_id = sent.json()["id"]

    requests = await client.get("/api/connections/requests", headers=headers_for(bob))
    assert [(r["id"], r["status"]) for r in requests.json()] == [(connection_id, "pending")]

    outgoing = await client.get("/api/connections/sent", headers=headers_for(alice))
    assert [r["id"] for r in outgoing.json()] == [connection_id]

    accepted = await client.put(f"/api/connections/accept/{connection_id}", headers=headers_for(bob))
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "accepted"

    alice_profile = await client.get("/api/users/profile", headers=headers_for(alice))
    bob_profile = await client.get("/api/users/profile", headers=headers_for(bob))
    assert alice_profile.json()["connections"] == [bob.id]
    assert bob_profile.json()["connections"] == [alice.id]

    notifications = await client.get("/api/notifications", headers=headers_for(alice))
    assert [n["type"] for n in notifications.json()] == ["connection_accepted"]
    assert notifications.json()[0]["sender"]["id"] == bob.id

    connections = await client.get("/api/connections", headers=headers_for(alice))
    assert [c["id"] for c in connections.json()] == [connection_id]

    removed = await client.delete(f"/api/connections/{connection_id}", headers=headers_for(bob))
    assert removed.status_code == 204

    alice_profile = await client.get("/api/users/profile", headers=headers_for(alice))
    assert alice_profile.json()["connections"] == []


@pytest.mark.asyncio
async def test_connection_error_statuses(client, alice, bob, carol, headers_for):
    to_self = await client.post("/api/connections/request", headers=headers_for(alice), json={"recipient_id": alice.id})
    assert to_self.status_code == 400

    missing = await client.post("/api/connections/request", headers=headers_for(alice), json={"recipient_id": "nobody"})
    assert missing.status_code == 404

    sent = await client.post("/api/connections/request", headers=headers_for(alice), json={"recipient_id": bob.id})
    reverse = await client.post("/api/connections/request", headers=headers_for(bob), json={"recipient_id": alice.id})
    assert reverse.status_code == 409
    assert reverse.json()["error_code"] == "CONNECTION_ALREADY_EXISTS"

    connection_id = sent.json()["id"]
    outsider = await client.put(f"/api/connections/accept/{connection_id}", headers=headers_for(carol))
    assert outsider.status_code == 403

    rejected = await client.put(f"/api/connections/reject/{connection_id}", headers=headers_for(bob))
    assert rejected.status_code == 204

    gone = await client.put(f"/api/connections/accept/{connection_id}", headers=headers_for(bob))
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_messaging_endpoints(client, alice, bob, headers_for):
    for text in ("hi", "are you there?"):
        response = await client.post("/api/messages", headers=headers_for(alice), json={
            "recipient_id": bob.id,
            "content": text,
        })
        assert response.status_code == 201

    unread = await client.get("/api/messages/unread-count", headers=headers_for(bob))
    assert unread.json() == {"count": 2}

    notif_count = await client.get("/api/notifications/unread-count", headers=headers_for(bob))
    assert notif_count.json() == {"count": 1}

    conversations = await client.get("/api/messages/conversations", headers=headers_for(bob))
    assert [u["id"] for u in conversations.json()] == [alice.id]

    thread = await client.get(f"/api/messages/{alice.id}", headers=headers_for(bob))
    assert [m["content"] for m in thread.json()] == ["hi", "are you there?"]
    assert all(m["read"] is False for m in thread.json())

    unread = await client.get("/api/messages/unread-count", headers=headers_for(bob))
    assert unread.json() == {"count": 0}

    to_self = await client.post("/api/messages", headers=headers_for(alice), json={
        "recipient_id": alice.id,
        "content": "me",
    })
    assert to_self.status_code == 400

    empty = await client.post("/api/messages", headers=headers_for(alice), json={
        "recipient_id": bob.id,
        "content": "",
    })
    assert empty.status_code == 422


@pytest.mark.asyncio
async def test_notification_endpoints(client, alice, bob, carol, headers_for):
    await client.post("/api/connections/request", headers=headers_for(alice), json={"recipient_id": bob.id})
    await client.post("/api/connections/request", headers=headers_for(carol), json={"recipient_id": bob.id})

    notifications = (await client.get("/api/notifications", headers=headers_for(bob))).json()
    assert len(notifications) == 2
    first_id = notifications[0]["id"]

    forbidden = await client.put(f"/api/notifications/{first_id}/read", headers=headers_for(alice))
    assert forbidden.status_code == 403

    marked = await client.put(f"/api/notifications/{first_id}/read", headers=headers_for(bob))
    assert marked.status_code == 200
    assert marked.json()["read"] is True

    read_all = await client.put("/api/notifications/read-all", headers=headers_for(bob))
    assert read_all.json() == {"updated": 1}

    deleted = await client.delete(f"/api/notifications/{first_id}", headers=headers_for(bob))
    assert deleted.status_code == 204

    missing = await client.delete(f"/api/notifications/{first_id}", headers=headers_for(bob))
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "NOTIFICATION_NOT_FOUND"


@pytest.mark.asyncio
async def test_post_endpoints(client, alice, bob, headers_for):
    created = await client.post("/api/posts", headers=headers_for(alice), json={"content": "Hello network"})
    assert created.status_code == 201
    post_id = created.json()["id"]

    liked = await client.put(f"/api/posts/{post_id}/like", headers=headers_for(bob))
    assert liked.json() == {"id": post_id, "likes": [bob.id]}
    unliked = await client.put(f"/api/posts/{post_id}/like", headers=headers_for(bob))
    assert unliked.json() == {"id": post_id, "likes": []}

    forbidden = await client.put(f"/api/posts/{post_id}", headers=headers_for(bob), json={"content": "mine now"})
    assert forbidden.status_code == 403

    comment = await client.post("/api/comments", headers=headers_for(bob), json={"post_id": post_id, "text": "Welcome"})
    assert comment.status_code == 201
    assert comment.json()["author"]["id"] == bob.id

    comments = await client.get(f"/api/comments/post/{post_id}", headers=headers_for(alice))
    assert [c["text"] for c in comments.json()] == ["Welcome"]

    fetched = await client.get(f"/api/posts/{post_id}", headers=headers_for(bob))
    assert fetched.json()["comments"] == [comment.json()["id"]]

    deleted = await client.delete(f"/api/posts/{post_id}", headers=headers_for(alice))
    assert deleted.status_code == 204

    gone = await client.get(f"/api/posts/{post_id}", headers=headers_for(alice))
    assert gone.status_code == 404

    orphan = await client.post("/api/comments", headers=headers_for(bob), json={"post_id": post_id, "text": "late"})
    assert orphan.status_code == 404
