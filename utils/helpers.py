"""
Helper utilities for the lobby server.

This module contains small generation and payload helpers used by the
lobby managers and the socket handlers.
"""

import random
from typing import Any, Dict, Optional
from .constants import LOBBY_CODE_DIGITS, ERROR_MESSAGES

def generate_lobby_code(digits: int = LOBBY_CODE_DIGITS) -> str:
    """Generate a random numeric lobby code with no leading zero."""
    low = 10 ** (digits - 1)
    high = 10 ** digits - 1
    return str(random.randint(low, high))

def payload_dict(data: Any) -> Dict[str, Any]:
    """
    Normalize an inbound event payload.

    Socket.IO clients may send nothing, a string or a list; only mappings
    carry protocol fields, everything else is treated as an empty payload.
    """
    if isinstance(data, dict):
        return data
    return {}

def display_name(raw: Any, fallback: str = 'Player') -> str:
    """
    Coerce a client supplied display name to a string.

    Args:
        raw: Value sent by the client
        fallback: Name used when nothing usable was sent

    Returns:
        Stripped display name
    """
    if raw is None:
        return fallback
    name = str(raw).strip()
    return name or fallback

def error_payload(code: str, message: Optional[str] = None) -> Dict[str, str]:
    """Build the body of a lobbyError event."""
    return {
        'code': code,
        'message': message or ERROR_MESSAGES.get(code, code)
    }
