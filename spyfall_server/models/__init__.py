"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import (
    GamePhase, Winner, Location, PlayerRole, Vote, LocationGuess, GameState,
    ReadyToVote, SubmitVote, GuessLocation, SpyfallAction, parse_action, ActionResult,
    OfflinePlayerRole, OfflineVote, OfflineGameResults
)
from .player import Player, Lobby

__all__ = [
    'GamePhase', 'Winner', 'Location', 'PlayerRole', 'Vote', 'LocationGuess', 'GameState',
    'ReadyToVote', 'SubmitVote', 'GuessLocation', 'SpyfallAction', 'parse_action', 'ActionResult',
    'OfflinePlayerRole', 'OfflineVote', 'OfflineGameResults',
    'Player', 'Lobby'
]
