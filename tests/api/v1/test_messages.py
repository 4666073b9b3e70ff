"""
Integration tests for Message API endpoints.
Tests API routes and HTTP interactions.
"""
import pytest
from uuid import uuid4

from app.services.group_service import GroupService


@pytest.fixture
async def hikers(db_session, alice, bob, test_group, make_friends):
    """Weekend Hikers with Alice (admin) and Bob (member)."""
    await make_friends(alice, bob)
    await GroupService(db_session).add_member(alice.id, test_group["id"], bob.id)
    return test_group


@pytest.mark.asyncio
class TestMessageAPI:
    """Test cases for Message API endpoints."""

    async def test_send_message_unauthorized(self, unauth_client):
        """Test sending a message without authentication."""
        response = await unauth_client.post(
            "/api/v1/messages/",
            json={"content": "Test message", "recipient_id": uuid4().hex}
        )

        assert response.status_code == 401

    async def test_send_and_read_group_feed(self, as_user, alice, bob, hikers):
        async with as_user(alice) as client:
            sent = await client.post(
                "/api/v1/messages/",
                json={"content": "Saturday 9am", "group_id": hikers["id"]}
            )
        assert sent.status_code == 201
        assert sent.json()["type"] == "text"
        assert sent.json()["author"] == {"id": alice.id, "name": "ali"}

        async with as_user(bob) as client:
            reply = await client.post(
                "/api/v1/messages/",
                json={"content": "In!", "group_id": hikers["id"], "reply_to_id": sent.json()["id"]}
            )
            feed = await client.get(f"/api/v1/groups/{hikers['id']}/messages")

        assert reply.status_code == 201
        assert reply.json()["type"] == "reply"
        assert reply.json()["replyTo"]["content"] == "Saturday 9am"
        assert [m["content"] for m in feed.json()] == ["Saturday 9am", "In!"]

    async def test_feed_limit_is_clamped(self, as_user, alice, hikers):
        async with as_user(alice) as client:
            for i in range(3):
                await client.post("/api/v1/messages/", json={"content": f"m{i}", "group_id": hikers["id"]})

            zero = await client.get(f"/api/v1/groups/{hikers['id']}/messages", params={"limit": 0})
            huge = await client.get(f"/api/v1/groups/{hikers['id']}/messages", params={"limit": 1000})

        assert [m["content"] for m in zero.json()] == ["m2"]
        assert len(huge.json()) == 3

    async def test_non_member_feed_forbidden(self, as_user, dave, hikers):
        async with as_user(dave) as client:
            response = await client.get(f"/api/v1/groups/{hikers['id']}/messages")

        assert response.status_code == 403

    async def test_both_targets_rejected(self, as_user, alice, bob, hikers):
        async with as_user(alice) as client:
            response = await client.post(
                "/api/v1/messages/",
                json={"content": "Hi", "group_id": hikers["id"], "recipient_id": bob.id}
            )

        assert response.status_code == 400

    async def test_direct_messages_respect_blocks(self, as_user, alice, bob):
        async with as_user(bob) as client:
            await client.post("/api/v1/friends/blocks", json={"target_user_id": alice.id})

        async with as_user(alice) as client:
            response = await client.post(
                "/api/v1/messages/",
                json={"content": "Hello?", "recipient_id": bob.id}
            )

        assert response.status_code == 403

    async def test_direct_feed(self, as_user, alice, bob):
        async with as_user(alice) as client:
            await client.post("/api/v1/messages/", json={"content": "ping", "recipient_id": bob.id})

        async with as_user(bob) as client:
            await client.post("/api/v1/messages/", json={"content": "pong", "recipient_id": alice.id})
            feed = await client.get(f"/api/v1/messages/direct/{alice.id}")

        assert feed.status_code == 200
        assert [m["content"] for m in feed.json()] == ["ping", "pong"]
        assert feed.json()[0]["recipientId"] == bob.id

    async def test_file_message(self, as_user, alice, hikers):
        async with as_user(alice) as client:
            ok = await client.post(
                "/api/v1/messages/file",
                json={
                    "file_key": "uploads/a/1_map.png",
                    "file_name": "map.png",
                    "file_type": "image/png",
                    "group_id": hikers["id"]
                }
            )
            rejected = await client.post(
                "/api/v1/messages/file",
                json={
                    "file_key": "uploads/a/1_run.exe",
                    "file_name": "run.exe",
                    "file_type": "application/octet-stream",
                    "group_id": hikers["id"]
                }
            )

        assert ok.status_code == 201
        assert ok.json()["type"] == "file"
        assert ok.json()["fileUrl"] == "https://files.test/uploads/a/1_map.png"
        assert rejected.status_code == 400

    async def test_edit_and_delete(self, as_user, alice, bob, hikers):
        async with as_user(alice) as client:
            sent = await client.post("/api/v1/messages/", json={"content": "draft", "group_id": hikers["id"]})
            message_id = sent.json()["id"]

            edited = await client.put(f"/api/v1/messages/{message_id}", json={"content": "final"})
            assert edited.status_code == 200
            assert edited.json()["content"] == "final"
            assert edited.json()["editedAt"] is not None

        async with as_user(bob) as client:
            stolen = await client.delete(f"/api/v1/messages/{message_id}")
            assert stolen.status_code == 403

        async with as_user(alice) as client:
            deleted = await client.delete(f"/api/v1/messages/{message_id}")
            feed = await client.get(f"/api/v1/groups/{hikers['id']}/messages")

        assert deleted.status_code == 200
        assert deleted.json()["isDeleted"] is True
        assert deleted.json()["content"] is None
        assert feed.json()[0]["isDeleted"] is True

    async def test_edit_unknown_message(self, as_user, alice):
        async with as_user(alice) as client:
            response = await client.put(f"/api/v1/messages/{uuid4().hex}", json={"content": "x"})

        assert response.status_code == 404

    async def test_feed_default_limit_is_fifty(self, as_user, alice, hikers):
        async with as_user(alice) as client:
            for i in range(51):
                await client.post("/api/v1/messages/", json={"content": f"m{i}", "group_id": hikers["id"]})

            feed = await client.get(f"/api/v1/groups/{hikers['id']}/messages")

        assert len(feed.json()) == 50
        assert feed.json()[0]["content"] == "m1"
        assert feed.json()[-1]["content"] == "m50"
