"""
Handlers Module for the lobby server.

Contains all web layer handlers (Socket.IO and API) with no lobby logic.
Handlers coordinate between the web layer and the lobby managers.
"""

from .socket_handlers import register_socket_handlers
from .api_handlers import register_api_handlers

__all__ = [
    'register_socket_handlers',
    'register_api_handlers'
]
