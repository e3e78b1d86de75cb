"""
Game Service

Owns one Spyfall game per lobby and serializes the actions applied to it.
"""

import threading
from typing import Dict, Optional, Union

from ..models.game import ActionResult, SpyfallAction
from ..models.player import Lobby
from .spyfall_game import SpyfallGame


class GameService:
    """
    Registry of active Spyfall games keyed by lobby code.

    This class handles:
    - Creating a game from a lobby's roster snapshot
    - Applying player actions one at a time per lobby
    - Player-specific state lookups without leaking other players' roles
    """

    def __init__(self):
        self.games: Dict[str, SpyfallGame] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, lobby_code: str) -> threading.Lock:
        with self._registry_lock:
            if lobby_code not in self._locks:
                self._locks[lobby_code] = threading.Lock()
            return self._locks[lobby_code]

    def create_game(self, lobby: Lobby) -> SpyfallGame:
        """
        Creates a new game for a lobby, replacing any previous one.

        Args:
            lobby: Lobby whose current players form the roster

        Returns:
            SpyfallGame: The new game instance
        """
        with self._lock_for(lobby.code):
            game = SpyfallGame(lobby.players, lobby_code=lobby.code)
            self.games[lobby.code] = game
            return game

    def get_game(self, lobby_code: str) -> Optional[SpyfallGame]:
        return self.games.get(lobby_code)

    def handle_action(self, lobby_code: str, action: Union[SpyfallAction, Dict]) -> ActionResult:
        """
        Applies one action to a lobby's game under that lobby's lock.

        Args:
            lobby_code: Lobby identifier
            action: Typed action or wire dict

        Returns:
            ActionResult from the game, or a failure if no game is running
        """
        game = self.games.get(lobby_code)
        if not game:
            return ActionResult(success=False, error='Game instance not found')

        with self._lock_for(lobby_code):
            return game.handle_action(action)

    def get_player_state(self, lobby_code: str, player_id: str) -> Optional[Dict]:
        """Get the game state as seen by one player."""
        game = self.games.get(lobby_code)
        if not game:
            return None

        with self._lock_for(lobby_code):
            return game.get_player_specific_state(player_id)

    def get_game_results(self, lobby_code: str) -> Optional[Dict]:
        game = self.games.get(lobby_code)
        if not game or not game.is_complete():
            return None
        return game.get_game_results()

    def end_game(self, lobby_code: str) -> Optional[Dict]:
        """
        Ends a lobby's game and drops it from the registry.

        Returns:
            The final results of the removed game, or None if there was none
        """
        game = self.games.get(lobby_code)
        if not game:
            return None

        with self._lock_for(lobby_code):
            results = game.get_game_results()

        self.delete_game(lobby_code)
        return results

    def delete_game(self, lobby_code: str) -> bool:
        """
        Removes a game session from memory.

        Returns:
            bool: True if game was deleted, False if not found
        """
        with self._registry_lock:
            self._locks.pop(lobby_code, None)
            return self.games.pop(lobby_code, None) is not None


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service() -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    _game_service = GameService()
    return _game_service
