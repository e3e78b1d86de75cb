"""
Spyfall Game Server - Main Entry Point

This is the main entry point for the Spyfall game server.
It initializes all services and starts the Flask-SocketIO application.
"""

from spyfall_server import create_app
from spyfall_server.config import Config, validate_location_catalog
from spyfall_server.services.game_service import initialize_game_service
from spyfall_server.services.lobby_service import initialize_lobby_service
from spyfall_server.services.token_service import initialize_token_service
from spyfall_server.utils.game_logger import game_logger


def initialize_services(config_class=Config):
    """Initialize the global game, lobby and token services."""
    game_service = initialize_game_service()
    lobby_service = initialize_lobby_service()
    token_service = initialize_token_service(
        config_class.JWT_SECRET, config_class.PLAYER_TOKEN_EXPIRATION_HOURS
    )
    return game_service, lobby_service, token_service


# Module-level app so `flask --app main offline-game` finds it
initialize_services()
app, socketio = create_app(Config)


def main():
    """Main function to validate configuration and start the server."""
    try:
        print("Validating location catalog...")
        validate_location_catalog()
        print("✓ Location catalog is valid")

        game_logger.logger.info("Spyfall Server Starting")

        print(f"\nStarting Spyfall Game Server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print("=" * 50)

        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Spyfall Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
