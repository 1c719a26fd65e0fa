"""
Two-party agreement gates.

Every agreement protocol in a lobby (ready to start, setup ready, legacy
ready, victory acceptance, new game request) is the same primitive: a map
of player id -> flag that is satisfied once every current member agrees.
This module implements it once, parametrized by a per-gate policy.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional
from .models import LobbyData
from .slots import project
from utils.constants import MAX_PLAYERS_PER_LOBBY

logger = logging.getLogger(__name__)

class Gate(str, Enum):
    READY = 'ready'
    SETUP_READY = 'setup_ready'
    LEGACY_READY = 'legacy_ready'
    VICTORY = 'victory'
    NEW_GAME = 'new_game'

@dataclass(frozen=True)
class GatePolicy:
    """
    How a gate evaluates and what happens when it fires.

    exact_parties: member count required for satisfaction, or None when
        any non-empty membership may agree (solo-testable paths).
    one_shot: clear all flags right after firing.
    locks_setup: fire only while the lobby is unlocked, then lock it.
    """
    exact_parties: Optional[int] = MAX_PLAYERS_PER_LOBBY
    one_shot: bool = False
    locks_setup: bool = False

GATE_POLICIES: Dict[Gate, GatePolicy] = {
    Gate.READY: GatePolicy(exact_parties=MAX_PLAYERS_PER_LOBBY, locks_setup=True),
    Gate.SETUP_READY: GatePolicy(exact_parties=MAX_PLAYERS_PER_LOBBY),
    Gate.LEGACY_READY: GatePolicy(exact_parties=None, one_shot=True),
    Gate.VICTORY: GatePolicy(exact_parties=None, one_shot=True),
    Gate.NEW_GAME: GatePolicy(exact_parties=None, one_shot=True),
}

class QuorumGate:
    """Evaluates and mutates the named gates of a lobby."""

    def __init__(self, policies: Optional[Dict[Gate, GatePolicy]] = None):
        self.policies = dict(policies or GATE_POLICIES)

    def set_flag(self, lobby: LobbyData, gate: Gate, player_id: str, value: bool) -> bool:
        """
        Record a player's flag and evaluate the gate.

        Args:
            lobby: Lobby owning the gate
            gate: Which gate
            player_id: Voting player
            value: The player's flag

        Returns:
            True when the gate fired on this call
        """
        policy = self.policies[gate]
        was_satisfied = self.evaluate(lobby, gate)
        lobby.gate(gate.value).flags[player_id] = bool(value)

        if not self.evaluate(lobby, gate):
            return False

        # One-shot and locking gates cannot refire on their own; plain
        # gates fire only on the pending -> satisfied edge.
        if was_satisfied and not (policy.one_shot or policy.locks_setup):
            return False

        if policy.locks_setup:
            if lobby.setup_locked:
                logger.debug(f"Gate {gate.value} satisfied in locked lobby {lobby.code}, not firing")
                return False
            lobby.setup_locked = True

        logger.info(f"Gate {gate.value} fired in lobby {lobby.code}")
        if policy.one_shot:
            self.clear(lobby, gate)
        return True

    def evaluate(self, lobby: LobbyData, gate: Gate) -> bool:
        """
        Satisfied iff there are members, the party count fits the gate's
        policy and every current member's flag is true. Departed players
        are never required to have voted.
        """
        members = lobby.player_ids
        if not members:
            return False

        policy = self.policies[gate]
        if policy.exact_parties is not None and len(members) != policy.exact_parties:
            return False

        flags = lobby.gate(gate.value).flags
        return all(flags.get(pid) is True for pid in members)

    def clear(self, lobby: LobbyData, gate: Gate) -> None:
        lobby.gate(gate.value).flags.clear()

    def flag(self, lobby: LobbyData, gate: Gate, player_id: str) -> bool:
        return bool(lobby.gate(gate.value).flags.get(player_id, False))

    def flags(self, lobby: LobbyData, gate: Gate) -> Dict[str, bool]:
        """Raw flags keyed by player id."""
        return dict(lobby.gate(gate.value).flags)

    def projected(self, lobby: LobbyData, gate: Gate) -> Dict[str, bool]:
        """Flags in the {'player1', 'player2'} client shape."""
        return project(lobby, lobby.gate(gate.value).flags, bool)

    def pending_count(self, lobby: LobbyData, gate: Gate) -> int:
        """Number of current members whose flag is true."""
        flags = lobby.gate(gate.value).flags
        return sum(1 for pid in lobby.player_ids if flags.get(pid) is True)
