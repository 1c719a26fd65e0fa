"""
Utilities module for the lobby server.

This module contains constants and helper functions used throughout
the application.
"""

from .constants import (
    MAX_PLAYERS_PER_LOBBY, LOBBY_CODE_DIGITS, SLOT_NAMES,
    SELECTION_ACTIONS, ERROR_CODES, ERROR_MESSAGES, TIMING
)
from .helpers import generate_lobby_code, payload_dict, display_name, error_payload

__all__ = [
    'MAX_PLAYERS_PER_LOBBY',
    'LOBBY_CODE_DIGITS',
    'SLOT_NAMES',
    'SELECTION_ACTIONS',
    'ERROR_CODES',
    'ERROR_MESSAGES',
    'TIMING',
    'generate_lobby_code',
    'payload_dict',
    'display_name',
    'error_payload'
]
