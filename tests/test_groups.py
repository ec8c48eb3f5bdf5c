import pytest


async def _group(client, user, **fields):
    payload = {"name": "Robotics Club", "description": "We build bots", "category": "hobby"}
    payload.update(fields)
    res = await client.post("/api/groups", json=payload, headers=user["headers"])
    assert res.status_code == 201, res.text
    return res.json()["group"]


@pytest.mark.asyncio
async def test_creator_is_first_member(client, make_user):
    alice = await make_user()
    group = await _group(client, alice)
    assert group["membersCount"] == 1
    assert group["isMember"] is True


@pytest.mark.asyncio
async def test_join_and_leave(client, make_user):
    alice = await make_user()
    bob = await make_user()
    group = await _group(client, alice)

    res = await client.post(f"/api/groups/{group['id']}/join", headers=bob["headers"])
    assert res.json() == {"message": "Joined group", "membersCount": 2, "isMember": True}

    mine = (await client.get(f"/api/groups/user/{bob['id']}")).json()["groups"]
    assert [g["id"] for g in mine] == [group["id"]]

    res = await client.post(f"/api/groups/{group['id']}/join", headers=bob["headers"])
    assert res.json() == {"message": "Left group", "membersCount": 1, "isMember": False}


@pytest.mark.asyncio
async def test_creator_cannot_leave(client, make_user):
    alice = await make_user()
    group = await _group(client, alice)
    res = await client.post(f"/api/groups/{group['id']}/join", headers=alice["headers"])
    assert res.status_code == 400
    assert res.json()["message"] == "Group creator cannot leave the group"


@pytest.mark.asyncio
async def test_private_group_needs_invitation_and_is_unlisted(client, make_user):
    alice = await make_user()
    bob = await make_user()
    secret = await _group(client, alice, name="Secret Society", privacy="private")
    open_group = await _group(client, alice, name="Open Mic")

    res = await client.post(f"/api/groups/{secret['id']}/join", headers=bob["headers"])
    assert res.status_code == 400
    assert res.json()["message"] == "This group requires an invitation"

    listed = [g["id"] for g in (await client.get("/api/groups")).json()["groups"]]
    assert open_group["id"] in listed
    assert secret["id"] not in listed


@pytest.mark.asyncio
async def test_delete_group(client, make_user):
    alice = await make_user()
    bob = await make_user()
    group = await _group(client, alice)

    assert (await client.delete(f"/api/groups/{group['id']}", headers=bob["headers"])).status_code == 403
    res = await client.delete(f"/api/groups/{group['id']}", headers=alice["headers"])
    assert res.json()["message"] == "Group deleted successfully"
    assert (await client.get(f"/api/groups/{group['id']}")).status_code == 404
