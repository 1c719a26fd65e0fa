"""
Shared state relay for lobbies.

Stores the last known army selections, replicated game snapshot and
player settings of a lobby. Payloads are opaque: the relay never looks
inside game state, it only keeps the latest value of each field.
"""

import logging
from typing import Any, Dict, List
from .models import LobbyData, ReplicatedState
from .slots import project
from utils.constants import SELECTION_ACTIONS

logger = logging.getLogger(__name__)

SNAPSHOT_FIELDS = ('game_state', 'zones', 'zone_detail')

class StateRelay:
    """Mutates and serves the relayed state of a lobby."""

    def update_army_selection(self, lobby: LobbyData, player_id: str,
                              army_id: Any, action: str = SELECTION_ACTIONS['ADD']) -> Dict[str, Any]:
        """
        Add or remove an army from a player's selection.

        Any action other than 'remove' is treated as 'add'. Adding an army
        already selected and removing one that is not selected are no-ops.
        The per-slot "has any selection" status is recomputed afterwards.

        Args:
            lobby: Lobby being updated
            player_id: Player whose selection changes
            army_id: Army identifier
            action: 'add' or 'remove'

        Returns:
            dict with projected 'armySelections' and 'selectionStatus'
        """
        selections = lobby.army_selections.setdefault(player_id, [])

        if action == SELECTION_ACTIONS['REMOVE']:
            if army_id in selections:
                selections.remove(army_id)
                logger.info(f"Player {player_id} removed army {army_id} in lobby {lobby.code}")
            else:
                logger.debug(f"Army {army_id} not in {player_id}'s selections")
        elif army_id not in selections:
            selections.append(army_id)
            logger.info(f"Player {player_id} selected army {army_id} in lobby {lobby.code}")
        else:
            logger.debug(f"Army {army_id} already selected by {player_id}")

        for pid in lobby.player_ids:
            lobby.selection_status[pid] = bool(lobby.army_selections.get(pid))

        return {
            'armySelections': self.army_selections(lobby),
            'selectionStatus': self.selection_status(lobby)
        }

    def set_selection_status(self, lobby: LobbyData, player_id: str, selected: Any) -> Dict[str, bool]:
        lobby.selection_status[player_id] = bool(selected)
        return self.selection_status(lobby)

    def army_selections(self, lobby: LobbyData) -> Dict[str, List[Any]]:
        return project(lobby, lobby.army_selections, list)

    def selection_status(self, lobby: LobbyData) -> Dict[str, bool]:
        return project(lobby, lobby.selection_status, bool)

    def both_selected(self, lobby: LobbyData) -> bool:
        """Both slots are filled and both report a selection."""
        if lobby.player_count < 2:
            return False
        status = self.selection_status(lobby)
        return all(status.values())

    def clear_army_selections(self, lobby: LobbyData) -> None:
        lobby.army_selections = {}
        lobby.selection_status = {}
        logger.info(f"Army selections cleared in lobby {lobby.code}")

    def replace_snapshot(self, lobby: LobbyData, **fields: Any) -> ReplicatedState:
        """
        Merge the given fields into the replicated snapshot.

        Only game_state, zones and zone_detail are accepted; fields that are
        not passed keep their previous value.
        """
        for name, value in fields.items():
            if name not in SNAPSHOT_FIELDS:
                raise ValueError(f"Unknown snapshot field: {name}")
            setattr(lobby.replicated, name, value)
        return lobby.replicated

    def apply_turn_change(self, lobby: LobbyData, current_player: Any, command_points: Any) -> None:
        """Write turn data into the cached game state, if one exists."""
        game_state = lobby.replicated.game_state
        if isinstance(game_state, dict):
            game_state['currentPlayer'] = current_player
            game_state['commandPoints'] = command_points

    def get_snapshot(self, lobby: LobbyData) -> Dict[str, Any]:
        """Current cached state for a resyncing client. Does not mutate."""
        state = lobby.replicated
        return {
            'gameState': state.game_state,
            'zones': state.zones,
            'currentZoneDetail': state.zone_detail,
            'gameConfig': lobby.game_config
        }

    def reset_snapshot(self, lobby: LobbyData, game_config: Any = None) -> None:
        """Start a fresh game: store its config and forget the old state."""
        lobby.game_config = game_config
        lobby.replicated = ReplicatedState()

    def update_player_setting(self, lobby: LobbyData, field: Any, value: Any) -> Dict[str, Any]:
        lobby.player_settings[str(field)] = value
        return dict(lobby.player_settings)
