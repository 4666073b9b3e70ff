"""
WebSocket manager for live queries.

Clients subscribe over Socket.IO and receive change notifications keyed by
the same parameters as the read endpoints (group id or user id). A
notification carries no computed state: clients re-run the read endpoint,
so the point-in-time fetch and the subscription share one code path.
"""
import logging
from typing import Dict, Iterable, Optional, Set, Any

import socketio

from app.config import settings
from app.utils.datetime_utils import to_iso_utc, utc_now

logger = logging.getLogger(__name__)


def user_room(user_id: str) -> str:
    return f"user:{user_id}"


def group_room(group_id: str) -> str:
    return f"group:{group_id}"


class ConnectionManager:
    """
    WebSocket connection manager using Socket.IO.

    Every connection joins its user's room on connect; group rooms are
    joined explicitly after a membership check.
    """

    def __init__(self):
        """Initialize the connection manager."""
        self.sio = socketio.AsyncServer(
            async_mode='asgi',
            cors_allowed_origins=settings.get_allowed_origins_list() or "*",
            logger=False,
            engineio_logger=False,
            ping_timeout=settings.ws_heartbeat_interval,
            ping_interval=settings.ws_heartbeat_interval // 2,
        )

        # Track connections: {sid: user_id}
        self.connections: Dict[str, str] = {}

        # Track user sessions: {user_id: set of sids}
        self.user_sessions: Dict[str, Set[str]] = {}

        self._setup_handlers()

    def _setup_handlers(self):
        """Setup Socket.IO event handlers."""

        @self.sio.event
        async def connect(sid, environ, auth):
            """Authenticate with the bearer token passed in the handshake."""
            token = auth.get('token') if auth else None
            if not token:
                logger.warning(f"Connection rejected - no token: {sid}")
                return False

            user_id = await self._resolve_user_id(token)
            if not user_id:
                logger.warning(f"Connection rejected - unknown or invalid identity: {sid}")
                return False

            self.connections[sid] = user_id
            self.user_sessions.setdefault(user_id, set()).add(sid)
            await self.sio.enter_room(sid, user_room(user_id))

            logger.info(f"Client connected: {sid} (user: {user_id})")
            return True

        @self.sio.event
        async def disconnect(sid):
            """Forget the connection."""
            user_id = self.connections.pop(sid, None)
            if user_id and user_id in self.user_sessions:
                self.user_sessions[user_id].discard(sid)
                if not self.user_sessions[user_id]:
                    del self.user_sessions[user_id]
            logger.info(f"Client disconnected: {sid} (user: {user_id})")

        @self.sio.event
        async def join_group(sid, data):
            """
            Subscribe to a group's message feed.

            Expected data: {'group_id': '...'}
            """
            user_id = self.connections.get(sid)
            group_id = (data or {}).get('group_id')

            if not user_id or not group_id:
                await self.sio.emit('error', {'message': 'Invalid subscription'}, to=sid)
                return

            if not await self._is_group_member(group_id, user_id):
                logger.warning(f"User {user_id} tried to join group room {group_id} without membership")
                await self.sio.emit('error', {'message': 'Not a member of this group'}, to=sid)
                return

            await self.sio.enter_room(sid, group_room(group_id))
            await self.sio.emit('joined_group', {'group_id': group_id}, to=sid)

        @self.sio.event
        async def leave_group(sid, data):
            """Unsubscribe from a group's message feed."""
            group_id = (data or {}).get('group_id')
            if group_id:
                await self.sio.leave_room(sid, group_room(group_id))

    async def _resolve_user_id(self, token: str) -> Optional[str]:
        from app.core.database import AsyncSessionLocal
        from app.core.exceptions import UnauthenticatedError
        from app.core.security import decode_token
        from app.repositories.user_repo import UserRepository

        try:
            claims = decode_token(token)
        except UnauthenticatedError:
            return None

        async with AsyncSessionLocal() as db:
            user = await UserRepository(db).get_by_external_id(claims["subject"])
            return user.id if user else None

    async def _is_group_member(self, group_id: str, user_id: str) -> bool:
        from app.core.database import AsyncSessionLocal
        from app.repositories.group_repo import GroupMemberRepository

        async with AsyncSessionLocal() as db:
            return await GroupMemberRepository(db).is_member(group_id, user_id)

    async def evict_from_group(self, group_id: str, user_id: str) -> None:
        """Drop every socket of a user that is no longer a member from the group room."""
        for sid in list(self.user_sessions.get(user_id, ())):
            await self.sio.leave_room(sid, group_room(group_id))
        logger.info(f"User {user_id} evicted from group room {group_id}")

    async def _emit(self, event: str, data: Dict[str, Any], room: str) -> None:
        await self.sio.emit(event, {**data, "at": to_iso_utc(utc_now())}, room=room)

    async def notify_group_messages_changed(self, group_id: str, message_id: str, action: str) -> None:
        """Tell subscribers of a group feed to refetch it."""
        await self._emit(
            'messages_changed',
            {'group_id': group_id, 'message_id': message_id, 'action': action},
            room=group_room(group_id)
        )

    async def notify_direct_messages_changed(
        self,
        author_id: str,
        recipient_id: str,
        message_id: str,
        action: str
    ) -> None:
        """Tell both sides of a direct pair to refetch their feed."""
        for user_id, other_user_id in ((author_id, recipient_id), (recipient_id, author_id)):
            await self._emit(
                'messages_changed',
                {'other_user_id': other_user_id, 'message_id': message_id, 'action': action},
                room=user_room(user_id)
            )

    async def notify_relationships_changed(self, user_ids: Iterable[str]) -> None:
        """Tell users their friend/request/block lists changed."""
        for user_id in set(user_ids):
            await self._emit('relationships_changed', {'user_id': user_id}, room=user_room(user_id))

    async def notify_groups_changed(self, group_id: str, user_ids: Iterable[str]) -> None:
        """Tell users their group list or a group roster changed."""
        for user_id in set(user_ids):
            await self._emit('groups_changed', {'group_id': group_id}, room=user_room(user_id))

    def get_asgi_app(self, fastapi_app):
        """
        Wrap the FastAPI app so Socket.IO serves /socket.io/* and FastAPI the rest.

        Args:
            fastapi_app: FastAPI application instance

        Returns:
            Combined ASGI app
        """
        return socketio.ASGIApp(self.sio, fastapi_app)


# Global connection manager instance
connection_manager = ConnectionManager()
