"""
Two-player lobby server.

Flask-SocketIO backend that pairs two players into a lobby by code,
tracks their agreement flags and relays shared game state between them.
This module is purely server setup and handler registration.
"""

import logging
from typing import Any, Dict, Optional
from flask import Flask
from flask_socketio import SocketIO
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from config import settings
from lobby import LobbyManager, FanoutDispatcher
from handlers import register_socket_handlers, register_api_handlers

# Configure logging
logging.basicConfig(
    level=getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

def create_app(config_overrides: Optional[Dict[str, Any]] = None):
    """
    Application factory that creates and configures the Flask app.

    Each call builds its own lobby manager, so lobby state lives exactly
    as long as the returned app.

    Args:
        config_overrides: Values that replace the environment settings

    Returns:
        tuple: (app, socketio)
    """
    config = settings.as_flask_config()
    config.update(config_overrides or {})

    # Flask configuration; the client's static files are served from the root
    app = Flask(__name__, static_folder=config['STATIC_DIR'], static_url_path='')
    app.config.update(config)

    cors_origins = str(config['CORS_ORIGINS']).split(',')
    CORS(app, origins=cors_origins)

    # ProxyFix for deployment behind reverse proxy
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)

    # SocketIO configuration
    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=config['ASYNC_MODE'],
        ping_timeout=config['PING_TIMEOUT'],
        ping_interval=config['PING_INTERVAL'],
        logger=bool(config['DEBUG']) and not config.get('TESTING'),
        engineio_logger=False
    )

    # Process-scoped lobby state
    logger.info("Initializing lobby manager...")
    lobby_manager = LobbyManager()
    dispatcher = FanoutDispatcher(socketio)
    app.extensions['lobby_manager'] = lobby_manager

    # Register handlers (pure routing layer)
    logger.info("Registering handlers...")
    register_socket_handlers(socketio, lobby_manager, dispatcher, float(config['START_DELAY_SEC']))
    register_api_handlers(app, lobby_manager)

    logger.info("Application initialization complete")
    return app, socketio

def main():
    """Main entry point for the server."""
    app, socketio = create_app()
    port = app.config['PORT']
    debug = bool(app.config['DEBUG'])

    logger.info(f"Multiplayer lobby server running on port {port}")
    logger.info(f"Debug mode: {debug}")
    logger.info(f"CORS origins: {app.config['CORS_ORIGINS']}")
    logger.info(f"Open http://localhost:{port}/ in your browser")

    try:
        socketio.run(app, debug=debug, port=port, host='0.0.0.0')
    finally:
        app.extensions['lobby_manager'].shutdown()

if __name__ == '__main__':
    main()
