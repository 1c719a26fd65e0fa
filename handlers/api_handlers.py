"""
API Route Handlers for the lobby server.

Pure routing layer: serves the game client document and a health check.
Contains no lobby logic.
"""

import os
import logging
from flask import jsonify, send_from_directory, current_app

logger = logging.getLogger(__name__)

def register_api_handlers(app, lobby_manager):
    """
    Register all HTTP route handlers.

    Args:
        app: Flask application instance
        lobby_manager: Lobby management instance
    """

    @app.route('/')
    def index():
        """Serve the main game document."""
        static_dir = current_app.config['STATIC_DIR']
        document = current_app.config['INDEX_DOCUMENT']
        if not os.path.isfile(os.path.join(static_dir, document)):
            logger.warning(f"Index document {document} not found in {static_dir}")
            return jsonify({'error': 'Not found'}), 404
        return send_from_directory(static_dir, document)

    @app.route('/health')
    def health_check():
        """Health check endpoint."""
        status = lobby_manager.get_status()
        return jsonify({
            'status': 'ok',
            'sessionCount': status['sessionCount'],
            'connectionCount': status['connectionCount']
        })

    # Error handlers
    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        return jsonify({'error': 'Internal server error'}), 500

    logger.info("API handlers registered successfully")
