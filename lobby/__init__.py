"""
Lobby Module for the lobby server.

Contains session coordination and state relay: lobby registry, membership,
agreement gates, slot mapping, relayed state and event fanout.
"""

from .models import LobbyData, PlayerData, GateState, ReplicatedState
from .registry import SessionRegistry
from .membership import MembershipManager, Departure
from .quorum import QuorumGate, Gate, GatePolicy, GATE_POLICIES
from .slots import Slot, slot_of, project
from .relay import StateRelay
from .dispatcher import FanoutDispatcher
from .manager import LobbyManager

__all__ = [
    # Data models
    'LobbyData',
    'PlayerData',
    'GateState',
    'ReplicatedState',
    'Departure',
    'Gate',
    'GatePolicy',
    'GATE_POLICIES',
    'Slot',

    # Components
    'SessionRegistry',
    'MembershipManager',
    'QuorumGate',
    'StateRelay',
    'FanoutDispatcher',
    'LobbyManager',

    # Slot helpers
    'slot_of',
    'project'
]
