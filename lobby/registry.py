"""
Session registry for the lobby server.

Owns the set of live lobbies and their codes. Handles code generation,
creation and destruction. Contains no membership or game logic.
"""

import logging
from typing import Dict, Optional
from datetime import datetime
from .models import LobbyData, PlayerData
from utils.helpers import generate_lobby_code

logger = logging.getLogger(__name__)

class SessionRegistry:
    """
    Process-scoped store of live lobbies keyed by code.

    A lobby exists only while it has members; the membership manager
    destroys it the moment the last member departs.
    """

    def __init__(self):
        self.sessions: Dict[str, LobbyData] = {}  # code -> LobbyData
        logger.debug("Session registry initialized")

    def generate_code(self) -> str:
        """
        Draw a 6-digit code that no live lobby uses.

        Retries until a free code is found. The code space holds 900000
        codes so collisions are rare for any realistic lobby count.
        """
        code = generate_lobby_code()
        while code in self.sessions:
            logger.debug(f"Lobby code collision on {code}, redrawing")
            code = generate_lobby_code()
        return code

    def create_session(self, player_id: str, name: str) -> LobbyData:
        """
        Create a lobby with the caller as its first and only member.

        Args:
            player_id: Connection id of the creator
            name: Creator's display name

        Returns:
            The new lobby
        """
        code = self.generate_code()
        now = datetime.now()
        lobby = LobbyData(
            code=code,
            created_at=now,
            players=[PlayerData(player_id=player_id, name=name, joined_at=now)]
        )
        self.sessions[code] = lobby
        logger.info(f"Lobby {code} created by {name}")
        return lobby

    def destroy_session(self, code: str) -> None:
        """Remove a lobby. Does nothing if it is already gone."""
        if self.sessions.pop(code, None) is not None:
            logger.info(f"Lobby {code} deleted")

    def lookup(self, code: Optional[str]) -> Optional[LobbyData]:
        """Get lobby data by code."""
        if code is None:
            return None
        return self.sessions.get(str(code))

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    def clear(self) -> None:
        """Drop every lobby (process shutdown)."""
        count = len(self.sessions)
        self.sessions.clear()
        if count:
            logger.info(f"Dropped {count} lobbies on shutdown")
