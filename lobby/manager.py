"""
Main lobby management system.

Coordinates the session registry, membership, agreement gates and state
relay. Each method covers one multi-step protocol flow and returns the
data the socket layer needs to notify clients; nothing here emits.
"""

import logging
from typing import Any, Dict, Optional, Tuple
from .models import LobbyData, PlayerData
from .registry import SessionRegistry
from .membership import MembershipManager, Departure
from .quorum import QuorumGate, Gate
from .relay import StateRelay
from .slots import Slot, slot_of, player_in_slot, opposite, parse_slot
from utils.constants import ERROR_CODES

logger = logging.getLogger(__name__)

class LobbyManager:
    """Main lobby management coordinator."""

    def __init__(self):
        self.registry = SessionRegistry()
        self.membership = MembershipManager(self.registry)
        self.gates = QuorumGate()
        self.relay = StateRelay()

    # -- membership -----------------------------------------------------

    def create_lobby(self, player_id: str, name: str) -> Tuple[LobbyData, Optional[Departure]]:
        """
        Create a lobby for a connection.

        A connection already sitting in another lobby leaves it first.

        Returns:
            tuple: (lobby_data, departure_from_previous_lobby)
        """
        departure = self.membership.leave(player_id)
        lobby = self.membership.create(player_id, name)
        return lobby, departure

    def join_lobby(self, code: Optional[str], player_id: str,
                   name: str) -> Tuple[bool, Optional[str], Optional[LobbyData], Optional[Departure]]:
        """
        Add a connection to an existing lobby.

        Returns:
            tuple: (success, error_code, lobby_data, departure_from_previous_lobby)
        """
        code = str(code) if code is not None else None
        previous = self.membership.lobby_code_of(player_id)
        if previous is not None and previous == code:
            lobby = self.registry.lookup(code)
            return True, None, lobby, None

        target = self.registry.lookup(code)
        if not target:
            return False, ERROR_CODES['NOT_FOUND'], None, None
        if target.is_full:
            return False, ERROR_CODES['FULL'], None, None

        departure = self.membership.leave(player_id) if previous is not None else None
        success, error_code, lobby = self.membership.join(code, player_id, name)
        return success, error_code, lobby, departure

    def leave_lobby(self, player_id: str, code: Optional[str] = None) -> Optional[Departure]:
        return self.membership.leave(player_id, code)

    def disconnect(self, player_id: str) -> Optional[Departure]:
        return self.membership.on_disconnect(player_id)

    def resolve(self, player_id: str,
                code: Optional[str] = None) -> Optional[Tuple[LobbyData, PlayerData]]:
        return self.membership.resolve(player_id, code)

    # -- payload helpers --------------------------------------------------

    def players_payload(self, lobby: LobbyData):
        return lobby.players_payload(Gate.READY.value)

    def lobby_payload(self, lobby: LobbyData, my_id: Optional[str] = None) -> Dict[str, Any]:
        payload = {
            'id': lobby.code,
            'players': self.players_payload(lobby)
        }
        if my_id is not None:
            payload['myId'] = my_id
        return payload

    # -- ready -> start ---------------------------------------------------

    def set_ready(self, lobby: LobbyData, player: PlayerData, ready: Any) -> bool:
        """
        Record a lobby ready flag.

        Returns:
            True when both players are ready and the delayed start should
            be scheduled. The lobby is locked at that point so the start
            is scheduled once.
        """
        return self.gates.set_flag(lobby, Gate.READY, player.player_id, ready)

    def start_payload(self, code: str) -> Optional[Dict[str, Any]]:
        """
        Build the startGame payload when the delay elapses.

        Reads the lobby as it is at fire time: current members and their
        current ready flags. Returns None when the lobby no longer exists.
        """
        lobby = self.registry.lookup(code)
        if not lobby:
            return None
        return {
            'lobbyCode': code,
            'players': self.players_payload(lobby)
        }

    def enter_setup(self, lobby: LobbyData) -> None:
        lobby.setup_locked = True
        logger.info(f"Lobby {lobby.code} set to game setup mode")

    def start_game(self, lobby: LobbyData, player: PlayerData,
                   game_config: Any) -> Tuple[bool, Optional[str], Optional[Dict[str, Any]]]:
        """
        Start the multiplayer game on the host's request.

        Returns:
            tuple: (success, error_code, multiplayerGameStarted payload)
        """
        if slot_of(lobby, player.player_id) is not Slot.FIRST:
            logger.info(f"Start rejected in lobby {lobby.code}: {player.name} is not the host")
            return False, ERROR_CODES['NOT_HOST'], None

        if not self.relay.both_selected(lobby):
            logger.info(f"Start rejected in lobby {lobby.code}: army selection incomplete")
            return False, ERROR_CODES['INCOMPLETE'], None

        self.relay.reset_snapshot(lobby, game_config)
        logger.info(f"Multiplayer game started in lobby {lobby.code}")
        return True, None, {
            'lobbyCode': lobby.code,
            'gameConfig': game_config,
            'players': self.players_payload(lobby)
        }

    # -- end of game ------------------------------------------------------

    def surrender(self, lobby: LobbyData, surrendering: Any, game_state: Any) -> Dict[str, Any]:
        """Work out the winner of a surrender and record the final state."""
        surrendering_slot = parse_slot(surrendering)
        if surrendering_slot is Slot.UNASSIGNED:
            # anything but player1 concedes to player1
            winner_slot = Slot.FIRST
        else:
            winner_slot = opposite(surrendering_slot)
        winner = player_in_slot(lobby, winner_slot)

        if game_state is not None:
            self.relay.replace_snapshot(lobby, game_state=game_state)

        logger.info(f"{surrendering} surrendered in lobby {lobby.code}")
        return {
            'surrenderingPlayer': surrendering,
            'winner': winner_slot.value,
            'winnerName': winner.name if winner else None,
            'gameState': game_state
        }

    def accept_victory(self, lobby: LobbyData, player: PlayerData,
                       accepted: Any) -> Tuple[bool, Dict[str, Any]]:
        """
        Record a victory acceptance.

        Returns:
            tuple: (all_accepted, payload). The payload is victoryAccepted
            when everyone accepted, otherwise victoryAcceptanceUpdate.
        """
        if self.gates.set_flag(lobby, Gate.VICTORY, player.player_id, accepted):
            logger.info(f"All players accepted victory in lobby {lobby.code}")
            return True, {'lobbyCode': lobby.code, 'allAccepted': True}

        return False, {
            'lobbyCode': lobby.code,
            'playerId': player.player_id,
            'accepted': bool(accepted),
            'acceptances': self.gates.projected(lobby, Gate.VICTORY)
        }

    def request_new_game(self, lobby: LobbyData, player: PlayerData) -> Tuple[bool, Dict[str, Any]]:
        """
        Record a new game request.

        When every member has asked, army selections are cleared and the
        pair goes back to army selection.

        Returns:
            tuple: (started, payload). newGameStarted or newGameRequested.
        """
        if self.gates.set_flag(lobby, Gate.NEW_GAME, player.player_id, True):
            self.relay.clear_army_selections(lobby)
            logger.info(f"New game started in lobby {lobby.code}")
            return True, {'lobbyCode': lobby.code}

        logger.info(f"{player.name} requested a new game in lobby {lobby.code}")
        return False, {
            'lobbyCode': lobby.code,
            'requestingPlayer': player.name,
            'pendingRequests': self.gates.pending_count(lobby, Gate.NEW_GAME),
            'totalPlayers': lobby.player_count
        }

    # -- process lifecycle ------------------------------------------------

    def get_status(self) -> Dict[str, Any]:
        return {
            'sessionCount': self.registry.session_count,
            'connectionCount': self.membership.connection_count
        }

    def shutdown(self) -> None:
        self.membership.connections.clear()
        self.registry.clear()
