"""
Data models for lobby management.

These are pure data structures shared by the registry, membership,
quorum and relay components. They hold session state but contain no
protocol logic.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from datetime import datetime
from utils.constants import MAX_PLAYERS_PER_LOBBY

@dataclass
class PlayerData:
    """Represents a player in a lobby."""
    player_id: str
    name: str
    joined_at: Optional[datetime] = None

    def to_dict(self, ready: bool = False) -> Dict[str, Any]:
        """Convert to the wire shape clients expect."""
        return {
            'id': self.player_id,
            'name': self.name,
            'ready': ready
        }

@dataclass
class GateState:
    """Per-player agreement flags for one named gate."""
    flags: Dict[str, bool] = field(default_factory=dict)

@dataclass
class ReplicatedState:
    """Last known shared game state, opaque to the server."""
    game_state: Any = None
    zones: Any = None
    zone_detail: Any = None

@dataclass
class LobbyData:
    """Represents a lobby's current state."""
    code: str
    created_at: datetime
    max_players: int = MAX_PLAYERS_PER_LOBBY
    players: List[PlayerData] = field(default_factory=list)
    setup_locked: bool = False
    gates: Dict[str, GateState] = field(default_factory=dict)
    army_selections: Dict[str, List[str]] = field(default_factory=dict)
    selection_status: Dict[str, bool] = field(default_factory=dict)
    replicated: ReplicatedState = field(default_factory=ReplicatedState)
    game_config: Any = None
    player_settings: Dict[str, Any] = field(default_factory=dict)

    @property
    def player_count(self) -> int:
        """Number of current members."""
        return len(self.players)

    @property
    def is_full(self) -> bool:
        """Check if lobby is at max capacity."""
        return self.player_count >= self.max_players

    @property
    def is_empty(self) -> bool:
        return not self.players

    @property
    def player_ids(self) -> List[str]:
        """Member ids in join order."""
        return [p.player_id for p in self.players]

    def get_player(self, player_id: str) -> Optional[PlayerData]:
        """Find player by connection id."""
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def gate(self, name: str) -> GateState:
        """Get (or lazily create) the state of a named gate."""
        if name not in self.gates:
            self.gates[name] = GateState()
        return self.gates[name]

    def players_payload(self, ready_gate: str) -> List[Dict[str, Any]]:
        """Serialize members with their flag from the given gate."""
        flags = self.gate(ready_gate).flags
        return [p.to_dict(ready=bool(flags.get(p.player_id, False))) for p in self.players]

