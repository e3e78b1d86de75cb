"""
Services Package

Contains all business logic and service classes.
"""

from .game_service import GameService, get_game_service
from .lobby_service import LobbyService, get_lobby_service
from .spyfall_game import SpyfallGame
from .token_service import PlayerTokenService, get_token_service

__all__ = [
    'GameService', 'get_game_service',
    'LobbyService', 'get_lobby_service',
    'SpyfallGame',
    'PlayerTokenService', 'get_token_service'
]
