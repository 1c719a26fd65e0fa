"""
Membership management for lobbies.

Handles players joining and leaving, the connection -> lobby index and
the two-player capacity limit. Contains no agreement or relay logic.
"""

import logging
from typing import Dict, Optional, Tuple
from dataclasses import dataclass
from datetime import datetime
from .models import LobbyData, PlayerData
from .registry import SessionRegistry
from utils.constants import ERROR_CODES

logger = logging.getLogger(__name__)

@dataclass
class Departure:
    """Outcome of a player leaving or disconnecting."""
    code: str
    player: PlayerData
    lobby: Optional[LobbyData]  # None when the lobby was destroyed

    @property
    def lobby_destroyed(self) -> bool:
        return self.lobby is None

class MembershipManager:
    """
    Maps connections to lobbies and enforces capacity.

    A connection belongs to at most one lobby. Its connection id doubles
    as the player's id for every per-player structure in that lobby.
    """

    def __init__(self, registry: SessionRegistry):
        self.registry = registry
        self.connections: Dict[str, str] = {}  # player_id -> lobby_code
        logger.debug("Membership manager initialized")

    def create(self, player_id: str, name: str) -> LobbyData:
        """
        Create a lobby owned by this connection.

        Args:
            player_id: Connection id of the creator
            name: Creator's display name

        Returns:
            The new lobby
        """
        lobby = self.registry.create_session(player_id, name)
        self.connections[player_id] = lobby.code
        return lobby

    def join(self, code: Optional[str], player_id: str,
             name: str) -> Tuple[bool, Optional[str], Optional[LobbyData]]:
        """
        Add a player to an existing lobby.

        Args:
            code: Code of the lobby to join
            player_id: Connection id of the joining player
            name: Display name

        Returns:
            tuple: (success, error_code, lobby_data)
        """
        lobby = self.registry.lookup(code)
        if not lobby:
            logger.info(f"Join rejected: lobby {code} not found")
            return False, ERROR_CODES['NOT_FOUND'], None

        if lobby.is_full:
            logger.info(f"Join rejected: lobby {code} is full")
            return False, ERROR_CODES['FULL'], None

        lobby.players.append(PlayerData(player_id=player_id, name=name, joined_at=datetime.now()))
        self.connections[player_id] = lobby.code

        logger.info(f"{name} joined lobby {lobby.code}")
        return True, None, lobby

    def leave(self, player_id: str, code: Optional[str] = None) -> Optional[Departure]:
        """
        Remove a player from their lobby.

        Removal is by identity, so the remaining member keeps its relative
        order. Destroys the lobby when it becomes empty. Calling this twice
        for the same connection is harmless: the second call returns None.

        Args:
            player_id: Connection id of the departing player
            code: Lobby code the client believes it is in; a mismatch
                discards the request

        Returns:
            Departure describing what happened, or None if nothing changed
        """
        lobby_code = self.connections.get(player_id)
        if lobby_code is None:
            return None

        if code is not None and str(code) != lobby_code:
            logger.warning(f"Leave for {code} ignored: connection is in lobby {lobby_code}")
            return None

        del self.connections[player_id]

        lobby = self.registry.lookup(lobby_code)
        if not lobby:
            return None

        player = lobby.get_player(player_id)
        if not player:
            return None

        lobby.players = [p for p in lobby.players if p.player_id != player_id]
        logger.info(f"{player.name} left lobby {lobby_code}")

        if lobby.is_empty:
            self.registry.destroy_session(lobby_code)
            return Departure(code=lobby_code, player=player, lobby=None)

        return Departure(code=lobby_code, player=player, lobby=lobby)

    def on_disconnect(self, player_id: str) -> Optional[Departure]:
        """Connection dropped without an explicit leave."""
        return self.leave(player_id)

    def resolve(self, player_id: str,
                code: Optional[str] = None) -> Optional[Tuple[LobbyData, PlayerData]]:
        """
        Resolve a connection to its lobby and player.

        Returns None when the connection is not in a lobby, when the code
        in the message does not match the connection's lobby, or when the
        lobby is gone. Callers drop such messages silently.
        """
        lobby_code = self.connections.get(player_id)
        if lobby_code is None:
            logger.debug(f"Connection {player_id} is not in any lobby")
            return None

        if code is not None and str(code) != lobby_code:
            logger.warning(f"Lobby code mismatch for {player_id}: got {code}, member of {lobby_code}")
            return None

        lobby = self.registry.lookup(lobby_code)
        if not lobby:
            logger.warning(f"Lobby {lobby_code} not found for {player_id}")
            return None

        player = lobby.get_player(player_id)
        if not player:
            return None

        return lobby, player

    def lobby_code_of(self, player_id: str) -> Optional[str]:
        return self.connections.get(player_id)

    @property
    def connection_count(self) -> int:
        return len(self.connections)
