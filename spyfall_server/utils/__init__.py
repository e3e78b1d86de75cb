"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import require_player, websocket_player_required
from .helpers import get_json_body, parse_max_players
from .game_logger import game_logger

__all__ = ['require_player', 'websocket_player_required', 'get_json_body', 'parse_max_players', 'game_logger']
