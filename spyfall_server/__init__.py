"""
Spyfall Server Application Package

Server-authoritative Spyfall sessions over HTTP and Socket.IO, plus the
offline pass-and-play round functions and CLI.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use

    Returns:
        (Flask application, SocketIO instance) with all extensions initialized
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app, origins=app.config['CORS_ORIGINS'])
    socketio = SocketIO(app, cors_allowed_origins=app.config['CORS_ORIGINS'], logger=False, engineio_logger=False)

    # Register blueprints
    from .controllers.lobby_controller import lobby_bp

    app.register_blueprint(lobby_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio)

    # Register CLI commands
    from .cli import offline_game
    app.cli.add_command(offline_game)

    # Store socketio instance for use in other modules
    app.socketio = socketio

    return app, socketio
