"""
Unit tests for RelationshipService.
Tests friend requests, reciprocal friendship and one-directional blocks.
"""
import pytest
from uuid import uuid4
from fastapi import HTTPException

from app.models.relationship import RelationshipType, RelationshipStatus
from app.repositories.relationship_repo import RelationshipRepository
from app.services.relationship_service import RelationshipService


@pytest.mark.asyncio
class TestFriendRequests:
    """Test cases for sending and answering friend requests."""

    async def test_send_friend_request_creates_pending_edge(self, db_session, alice, bob):
        service = RelationshipService(db_session)

        edge = await service.send_friend_request(alice.id, bob.id)

        assert edge["user_id"] == alice.id
        assert edge["target_user_id"] == bob.id
        assert edge["type"] == RelationshipType.FRIEND
        assert edge["status"] == RelationshipStatus.PENDING
        assert not await service.is_friend(alice.id, bob.id)

    async def test_send_friend_request_to_self(self, db_session, alice):
        service = RelationshipService(db_session)

        with pytest.raises(HTTPException) as exc_info:
            await service.send_friend_request(alice.id, alice.id)

        assert exc_info.value.status_code == 400

    async def test_send_friend_request_unknown_user(self, db_session, alice):
        service = RelationshipService(db_session)

        with pytest.raises(HTTPException) as exc_info:
            await service.send_friend_request(alice.id, uuid4().hex)

        assert exc_info.value.status_code == 404

    async def test_duplicate_pending_request_rejected(self, db_session, alice, bob):
        service = RelationshipService(db_session)
        await service.send_friend_request(alice.id, bob.id)

        with pytest.raises(HTTPException) as exc_info:
            await service.send_friend_request(alice.id, bob.id)

        assert exc_info.value.status_code == 409

    async def test_request_to_existing_friend_rejected(self, db_session, alice, bob, make_friends):
        await make_friends(alice, bob)
        service = RelationshipService(db_session)

        with pytest.raises(HTTPException) as exc_info:
            await service.send_friend_request(bob.id, alice.id)

        assert exc_info.value.status_code == 409

    async def test_accept_creates_reciprocal_friendship(self, db_session, alice, bob):
        service = RelationshipService(db_session)
        request = await service.send_friend_request(alice.id, bob.id)

        edge = await service.respond_to_friend_request(bob.id, request["id"], accept=True)

        assert edge["status"] == RelationshipStatus.ACCEPTED
        assert await service.is_friend(alice.id, bob.id)
        assert await service.is_friend(bob.id, alice.id)

    async def test_reject_is_terminal_and_allows_new_request(self, db_session, alice, bob):
        service = RelationshipService(db_session)
        request = await service.send_friend_request(alice.id, bob.id)

        edge = await service.respond_to_friend_request(bob.id, request["id"], accept=False)

        assert edge["status"] == RelationshipStatus.REJECTED
        assert not await service.is_friend(alice.id, bob.id)
        assert not await service.is_friend(bob.id, alice.id)

        with pytest.raises(HTTPException) as exc_info:
            await service.respond_to_friend_request(bob.id, request["id"], accept=True)
        assert exc_info.value.status_code == 400

        again = await service.send_friend_request(alice.id, bob.id)
        assert again["status"] == RelationshipStatus.PENDING

    async def test_only_target_can_respond(self, db_session, alice, bob, carol):
        service = RelationshipService(db_session)
        request = await service.send_friend_request(alice.id, bob.id)

        for outsider in (alice, carol):
            with pytest.raises(HTTPException) as exc_info:
                await service.respond_to_friend_request(outsider.id, request["id"], accept=True)
            assert exc_info.value.status_code == 403

        assert not await service.is_friend(alice.id, bob.id)

    async def test_respond_to_unknown_request(self, db_session, bob):
        service = RelationshipService(db_session)

        with pytest.raises(HTTPException) as exc_info:
            await service.respond_to_friend_request(bob.id, uuid4().hex, accept=True)

        assert exc_info.value.status_code == 404

    async def test_crossed_requests_collapse_into_one_friendship(self, db_session, alice, bob):
        service = RelationshipService(db_session)
        from_alice = await service.send_friend_request(alice.id, bob.id)
        await service.send_friend_request(bob.id, alice.id)

        await service.respond_to_friend_request(bob.id, from_alice["id"], accept=True)

        repo = RelationshipRepository(db_session)
        alice_edges = await repo.list_outgoing(alice.id, RelationshipType.FRIEND)
        bob_edges = await repo.list_outgoing(bob.id, RelationshipType.FRIEND)
        assert [e.status for e in alice_edges] == [RelationshipStatus.ACCEPTED]
        assert [e.status for e in bob_edges] == [RelationshipStatus.ACCEPTED]

    async def test_mutations_notify_both_users(self, db_session, alice, bob, mock_websocket_manager):
        service = RelationshipService(db_session)

        await service.send_friend_request(alice.id, bob.id)

        mock_websocket_manager.notify_relationships_changed.assert_awaited_once()
        notified = set(mock_websocket_manager.notify_relationships_changed.await_args.args[0])
        assert notified == {alice.id, bob.id}

    async def test_broadcast_failure_does_not_fail_mutation(
        self,
        db_session,
        alice,
        bob,
        mock_websocket_manager
    ):
        mock_websocket_manager.notify_relationships_changed.side_effect = RuntimeError("socket down")
        service = RelationshipService(db_session)

        edge = await service.send_friend_request(alice.id, bob.id)

        assert edge["status"] == RelationshipStatus.PENDING


@pytest.mark.asyncio
class TestBlocking:
    """Test cases for one-directional blocks."""

    async def test_block_replaces_only_blockers_edge(self, db_session, alice, bob, make_friends):
        await make_friends(alice, bob)
        service = RelationshipService(db_session)

        edge = await service.block_user(alice.id, bob.id)

        assert edge["type"] == RelationshipType.BLOCKED
        assert await service.is_blocked_by(alice.id, bob.id)
        assert not await service.is_blocked_by(bob.id, alice.id)
        assert not await service.is_friend(alice.id, bob.id)
        # The reverse edge is untouched
        assert await service.is_friend(bob.id, alice.id)

    async def test_block_cancels_pending_request(self, db_session, alice, bob):
        service = RelationshipService(db_session)
        await service.send_friend_request(alice.id, bob.id)

        await service.block_user(alice.id, bob.id)

        assert await service.list_pending_requests(bob.id) == []

    async def test_block_twice_keeps_single_edge(self, db_session, alice, bob):
        service = RelationshipService(db_session)

        await service.block_user(alice.id, bob.id)
        await service.block_user(alice.id, bob.id)

        edges = await RelationshipRepository(db_session).list_outgoing(alice.id, RelationshipType.BLOCKED)
        assert len(edges) == 1

    async def test_block_self(self, db_session, alice):
        service = RelationshipService(db_session)

        with pytest.raises(HTTPException) as exc_info:
            await service.block_user(alice.id, alice.id)

        assert exc_info.value.status_code == 400


@pytest.mark.asyncio
class TestRelationshipLists:
    """Test cases for friend, request and block listings."""

    async def test_list_friends_uses_nickname(self, db_session, alice, bob, carol, make_friends):
        await make_friends(bob, alice)
        await make_friends(bob, carol)
        service = RelationshipService(db_session)

        friends = await service.list_friends(bob.id)

        assert {f["id"] for f in friends} == {alice.id, carol.id}
        by_id = {f["id"]: f for f in friends}
        assert by_id[alice.id]["nickname"] == "ali"
        assert by_id[alice.id]["name"] == "Alice Anders"

    async def test_list_pending_requests_includes_requester(self, db_session, alice, bob):
        service = RelationshipService(db_session)
        request = await service.send_friend_request(alice.id, bob.id)

        pending = await service.list_pending_requests(bob.id)

        assert len(pending) == 1
        assert pending[0]["id"] == request["id"]
        assert pending[0]["user"]["id"] == alice.id
        assert await service.list_pending_requests(alice.id) == []

    async def test_accepted_request_leaves_pending_list(self, db_session, alice, bob):
        service = RelationshipService(db_session)
        request = await service.send_friend_request(alice.id, bob.id)
        await service.respond_to_friend_request(bob.id, request["id"], accept=True)

        assert await service.list_pending_requests(bob.id) == []

    async def test_list_blocked_users(self, db_session, alice, bob, carol):
        service = RelationshipService(db_session)
        await service.block_user(alice.id, bob.id)

        blocked = await service.list_blocked_users(alice.id)

        assert [u["id"] for u in blocked] == [bob.id]
        assert await service.list_blocked_users(bob.id) == []
