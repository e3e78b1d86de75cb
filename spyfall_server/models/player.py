"""
Player Data Models

Contains the roster structures owned by the lobby layer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from .game import utc_now


@dataclass
class Player:
    """Player data model."""
    id: str
    name: str
    is_host: bool = False
    is_connected: bool = True
    joined_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'is_host': self.is_host,
            'is_connected': self.is_connected,
            'joined_at': self.joined_at.isoformat(),
        }


@dataclass
class Lobby:
    """A group of players waiting for, playing, or done with one game."""
    id: str
    code: str
    host_id: str
    max_players: int
    players: List[Player] = field(default_factory=list)
    status: str = "waiting"  # "waiting", "playing", "finished"
    created_at: datetime = field(default_factory=utc_now)

    def get_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'code': self.code,
            'host_id': self.host_id,
            'max_players': self.max_players,
            'status': self.status,
            'players': [player.to_dict() for player in self.players],
            'created_at': self.created_at.isoformat(),
        }
