"""
Slot mapping for two-player lobbies.

Clients address players as "player1" and "player2". A player's slot is
derived from the current member order every time it is needed, so when
the first member leaves the remaining player becomes player1.
"""

from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional
from .models import LobbyData, PlayerData
from utils.constants import SLOT_NAMES

class Slot(Enum):
    FIRST = SLOT_NAMES['FIRST']
    SECOND = SLOT_NAMES['SECOND']
    UNASSIGNED = None

def slot_of(lobby: LobbyData, player_id: str) -> Slot:
    """Slot of a player given the lobby's current order."""
    ids = lobby.player_ids
    if len(ids) > 0 and ids[0] == player_id:
        return Slot.FIRST
    if len(ids) > 1 and ids[1] == player_id:
        return Slot.SECOND
    return Slot.UNASSIGNED

def player_in_slot(lobby: LobbyData, slot: Slot) -> Optional[PlayerData]:
    index = {Slot.FIRST: 0, Slot.SECOND: 1}.get(slot)
    if index is None or index >= len(lobby.players):
        return None
    return lobby.players[index]

def opposite(slot: Slot) -> Slot:
    if slot is Slot.FIRST:
        return Slot.SECOND
    if slot is Slot.SECOND:
        return Slot.FIRST
    return Slot.UNASSIGNED

def parse_slot(value: Any) -> Slot:
    """Map a wire slot name ('player1'/'player2') to a Slot."""
    for slot in (Slot.FIRST, Slot.SECOND):
        if value == slot.value:
            return slot
    return Slot.UNASSIGNED

def project(lobby: LobbyData, mapping: Mapping[str, Any],
            default: Callable[[], Any] = bool) -> Dict[str, Any]:
    """
    Convert a player-id keyed mapping into the two-slot client shape.

    Args:
        lobby: Lobby whose current order defines the slots
        mapping: Values keyed by player id
        default: Factory for slots with no value (bool -> False, list -> [])

    Returns:
        {'player1': ..., 'player2': ...}
    """
    projected = {}
    for slot in (Slot.FIRST, Slot.SECOND):
        player = player_in_slot(lobby, slot)
        value = mapping.get(player.player_id) if player else None
        projected[slot.value] = value if value is not None else default()
    return projected
