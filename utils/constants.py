"""
Protocol constants for the lobby server.

This module contains all constant values used throughout the server,
including lobby limits, slot names, error codes and timing defaults.
"""

# Lobby constants
MAX_PLAYERS_PER_LOBBY = 2
LOBBY_CODE_DIGITS = 6

# Canonical slot names presented to clients
SLOT_NAMES = {
    'FIRST': 'player1',
    'SECOND': 'player2'
}

# Army selection actions
SELECTION_ACTIONS = {
    'ADD': 'add',
    'REMOVE': 'remove'
}

# Error codes carried by lobbyError events
ERROR_CODES = {
    'NOT_FOUND': 'NotFound',
    'FULL': 'Full',
    'NOT_A_MEMBER': 'NotAMember',
    'NOT_HOST': 'NotHost',
    'INCOMPLETE': 'Incomplete'
}

ERROR_MESSAGES = {
    ERROR_CODES['NOT_FOUND']: 'Lobby not found',
    ERROR_CODES['FULL']: 'Lobby is full',
    ERROR_CODES['NOT_A_MEMBER']: 'Not a member of this lobby',
    ERROR_CODES['NOT_HOST']: 'Only the host can start the game',
    ERROR_CODES['INCOMPLETE']: 'Both players must select armies before starting the game'
}

# Timing configuration
TIMING = {
    'START_DELAY_SEC': 2.0  # ready -> startGame notification delay
}
