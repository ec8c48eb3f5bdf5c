import pytest

from campus_social.services import notify as notify_service


@pytest.mark.asyncio
async def test_follow_like_and_comment_notify_the_owner(client, make_user, make_post):
    alice = await make_user("Alice Shah")
    bob = await make_user("Bob Mehta")
    post = await make_post(alice)

    await client.post(f"/api/users/{alice['id']}/follow", headers=bob["headers"])
    await client.post(f"/api/posts/{post['id']}/like", headers=bob["headers"])
    await client.post(f"/api/posts/{post['id']}/comments", json={"content": "nice"}, headers=bob["headers"])

    res = await client.get("/api/notifications", headers=alice["headers"])
    body = res.json()
    assert [n["type"] for n in body["notifications"]] == ["comment", "like", "follow"]
    assert body["unreadCount"] == 3
    assert body["notifications"][0]["sender"]["name"] == "Bob Mehta"


@pytest.mark.asyncio
async def test_own_actions_do_not_notify(client, make_user, make_post):
    alice = await make_user()
    post = await make_post(alice)
    await client.post(f"/api/posts/{post['id']}/like", headers=alice["headers"])

    body = (await client.get("/api/notifications", headers=alice["headers"])).json()
    assert body["notifications"] == []
    assert body["unreadCount"] == 0


@pytest.mark.asyncio
async def test_mark_read_is_scoped_to_recipient(client, make_user):
    alice = await make_user()
    bob = await make_user()
    await client.post(f"/api/users/{alice['id']}/follow", headers=bob["headers"])

    note = (await client.get("/api/notifications", headers=alice["headers"])).json()["notifications"][0]

    other = await client.post(f"/api/notifications/{note['id']}/read", headers=bob["headers"])
    assert other.status_code == 404

    res = await client.post(f"/api/notifications/{note['id']}/read", headers=alice["headers"])
    assert res.json()["updated"] == 1

    unread = (await client.get("/api/notifications?unreadOnly=true", headers=alice["headers"])).json()
    assert unread["notifications"] == []
    assert unread["unreadCount"] == 0


@pytest.mark.asyncio
async def test_mark_all_read(client, make_user, make_post):
    alice = await make_user()
    bob = await make_user()
    post = await make_post(alice)
    await client.post(f"/api/users/{alice['id']}/follow", headers=bob["headers"])
    await client.post(f"/api/posts/{post['id']}/like", headers=bob["headers"])

    res = await client.post("/api/notifications/read-all", headers=alice["headers"])
    assert res.json() == {"message": "All notifications marked as read", "updated": 2}


class _RecordingDelivery(notify_service.NotificationDelivery):
    def __init__(self):
        self.seen = []

    async def deliver(self, notification):
        self.seen.append(notification["type"])


@pytest.mark.asyncio
async def test_delivery_runs_in_background(client, make_user):
    alice = await make_user()
    bob = await make_user()
    recorder = _RecordingDelivery()
    notify_service.set_delivery(recorder)
    try:
        await client.post(f"/api/users/{alice['id']}/follow", headers=bob["headers"])
        await notify_service.drain()
    finally:
        notify_service.set_delivery(notify_service.LogDelivery())
    assert recorder.seen == ["follow"]
