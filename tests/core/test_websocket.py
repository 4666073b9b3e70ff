"""
Tests for the Socket.IO change notifier.
The server's emit is patched; no sockets are opened.
"""
import pytest

from app.core.websocket import ConnectionManager, group_room, user_room


@pytest.fixture
def manager(mocker):
    manager = ConnectionManager()
    mocker.patch.object(manager.sio, "emit", new=mocker.AsyncMock())
    return manager


@pytest.mark.asyncio
class TestNotifications:
    """Events are routed to the rooms that subscribe to each read."""

    async def test_group_feed_goes_to_group_room(self, manager):
        await manager.notify_group_messages_changed("g1", "m1", "created")

        event, payload = manager.sio.emit.await_args.args
        assert event == "messages_changed"
        assert payload["group_id"] == "g1"
        assert payload["action"] == "created"
        assert payload["at"].endswith("Z")
        assert manager.sio.emit.await_args.kwargs["room"] == group_room("g1")

    async def test_direct_feed_goes_to_both_users(self, manager):
        await manager.notify_direct_messages_changed("u1", "u2", "m1", "edited")

        rooms = [c.kwargs["room"] for c in manager.sio.emit.await_args_list]
        others = [c.args[1]["other_user_id"] for c in manager.sio.emit.await_args_list]
        assert rooms == [user_room("u1"), user_room("u2")]
        assert others == ["u2", "u1"]

    async def test_relationship_change_deduplicates_users(self, manager):
        await manager.notify_relationships_changed(["u1", "u2", "u1"])

        rooms = {c.kwargs["room"] for c in manager.sio.emit.await_args_list}
        assert manager.sio.emit.await_count == 2
        assert rooms == {user_room("u1"), user_room("u2")}

    async def test_groups_changed_carries_group_id(self, manager):
        await manager.notify_groups_changed("g1", ["u1"])

        event, payload = manager.sio.emit.await_args.args
        assert event == "groups_changed"
        assert payload["group_id"] == "g1"


@pytest.mark.asyncio
class TestGroupRoomEviction:
    """Sockets of a former member stop receiving the group feed."""

    async def test_every_socket_of_user_leaves_room(self, manager, mocker):
        mocker.patch.object(manager.sio, "leave_room", new=mocker.AsyncMock())
        manager.user_sessions["u1"] = {"sid-a", "sid-b"}
        manager.user_sessions["u2"] = {"sid-c"}

        await manager.evict_from_group("g1", "u1")

        left = {c.args for c in manager.sio.leave_room.await_args_list}
        assert left == {("sid-a", group_room("g1")), ("sid-b", group_room("g1"))}

    async def test_offline_user_is_a_noop(self, manager, mocker):
        mocker.patch.object(manager.sio, "leave_room", new=mocker.AsyncMock())

        await manager.evict_from_group("g1", "nobody")

        manager.sio.leave_room.assert_not_awaited()
