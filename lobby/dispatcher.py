"""
Fanout dispatcher for lobby events.

Wraps the Socket.IO server with the delivery modes the lobby protocol
needs. Every lobby is a Socket.IO room named by its code. Delivery is
at-most-once: events to connections that are gone are simply dropped.
"""

import logging
from typing import Any, Callable, Dict, Optional
from flask_socketio import SocketIO, join_room, leave_room

logger = logging.getLogger(__name__)

class FanoutDispatcher:
    """Delivers protocol events to lobby members."""

    def __init__(self, socketio: SocketIO, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def attach(self, player_id: str, code: str) -> None:
        """Subscribe a connection to its lobby's room."""
        join_room(code, sid=player_id, namespace=self.namespace)

    def detach(self, player_id: str, code: str) -> None:
        leave_room(code, sid=player_id, namespace=self.namespace)

    def broadcast_all(self, code: str, event: str, payload: Dict[str, Any]) -> None:
        """Deliver to every member, the originator included."""
        self.socketio.emit(event, payload, to=code, namespace=self.namespace)

    def broadcast_others(self, code: str, event: str, payload: Dict[str, Any], sender_id: str) -> None:
        """Deliver to every member except the originator."""
        self.socketio.emit(event, payload, to=code, skip_sid=sender_id, namespace=self.namespace)

    def send_to(self, player_id: str, event: str, payload: Dict[str, Any]) -> None:
        """Deliver to a single connection."""
        self.socketio.emit(event, payload, to=player_id, namespace=self.namespace)

    def broadcast_all_later(self, code: str, event: str,
                            build_payload: Callable[[], Optional[Dict[str, Any]]],
                            delay: float) -> None:
        """
        Deliver to every member after a delay.

        Fire-and-forget: the task cannot be cancelled once scheduled. The
        payload is built when the delay elapses; if the builder returns
        None (for example because the lobby no longer exists) nothing is
        sent.

        Args:
            code: Lobby code / room
            event: Event name
            build_payload: Called at fire time to produce the payload
            delay: Seconds to wait
        """
        def _runner():
            self.socketio.sleep(delay)
            payload = build_payload()
            if payload is None:
                logger.info(f"[timer-abort] {event} for lobby {code}: lobby gone")
                return
            self.broadcast_all(code, event, payload)
            logger.info(f"[timer-fire] {event} sent to lobby {code}")

        logger.info(f"[timer-set] {event} for lobby {code} in {delay}s")
        self.socketio.start_background_task(_runner)
