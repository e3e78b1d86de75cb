"""
Lobby Service

Manages lobbies and their rosters. The roster of a lobby is handed to the
game service when the host starts a game.
"""

import random
import string
import uuid
from typing import Dict, Optional

from ..config.app_config import Config
from ..config.game_settings import MIN_PLAYERS, MAX_PLAYERS
from ..models.player import Lobby, Player


class LobbyService:
    """
    In-memory lobby manager.
    Uses plain dictionaries; callers run on a single Socket.IO worker.
    """

    def __init__(self, code_length: int = Config.LOBBY_CODE_LENGTH):
        self.code_length = code_length
        self.lobbies: Dict[str, Lobby] = {}
        # Track which lobby each player is in
        self.player_to_lobby: Dict[str, str] = {}  # player_id -> lobby code

    def _generate_lobby_code(self) -> str:
        alphabet = string.ascii_uppercase + string.digits
        while True:
            code = ''.join(random.choice(alphabet) for _ in range(self.code_length))
            if code not in self.lobbies:
                return code

    def create_lobby(self, host_name: str, max_players: int = Config.DEFAULT_MAX_PLAYERS) -> Dict:
        """Create a lobby with the caller as host."""
        host_name = (host_name or '').strip()
        if not host_name:
            return {'success': False, 'error': 'Player name is required'}

        if not MIN_PLAYERS <= max_players <= MAX_PLAYERS:
            return {
                'success': False,
                'error': f'Max players must be between {MIN_PLAYERS} and {MAX_PLAYERS}'
            }

        host = Player(id=str(uuid.uuid4()), name=host_name, is_host=True)
        lobby = Lobby(
            id=str(uuid.uuid4()),
            code=self._generate_lobby_code(),
            host_id=host.id,
            max_players=max_players,
            players=[host],
        )

        self.lobbies[lobby.code] = lobby
        self.player_to_lobby[host.id] = lobby.code

        return {'success': True, 'lobby': lobby, 'player': host}

    def join_lobby(self, lobby_code: str, player_name: str) -> Dict:
        """Join a player to a lobby between games."""
        lobby = self.lobbies.get((lobby_code or '').upper())
        if not lobby:
            return {'success': False, 'error': 'Lobby not found'}

        # A finished lobby takes new players for its next game
        if lobby.status == 'playing':
            return {'success': False, 'error': 'Game already in progress'}

        if len(lobby.players) >= lobby.max_players:
            return {'success': False, 'error': 'Lobby is full'}

        player_name = (player_name or '').strip()
        if not player_name:
            return {'success': False, 'error': 'Player name is required'}

        if any(p.name.lower() == player_name.lower() for p in lobby.players):
            return {'success': False, 'error': 'Player name already taken'}

        player = Player(id=str(uuid.uuid4()), name=player_name)
        lobby.players.append(player)
        self.player_to_lobby[player.id] = lobby.code

        return {'success': True, 'lobby': lobby, 'player': player}

    def leave_lobby(self, player_id: str) -> Dict:
        """Remove a player from their lobby, handing off host if needed."""
        if player_id not in self.player_to_lobby:
            return {'success': False, 'error': 'Player not found'}

        lobby_code = self.player_to_lobby.pop(player_id)
        lobby = self.lobbies[lobby_code]
        player = lobby.get_player(player_id)
        was_host = bool(player and player.is_host)

        lobby.players = [p for p in lobby.players if p.id != player_id]

        if not lobby.players:
            from .game_service import get_game_service

            del self.lobbies[lobby_code]
            game_service = get_game_service()
            if game_service:
                game_service.end_game(lobby_code)
            return {'success': True, 'lobby': None, 'was_host': was_host}

        if was_host:
            new_host = lobby.players[0]
            new_host.is_host = True
            lobby.host_id = new_host.id

        return {'success': True, 'lobby': lobby, 'was_host': was_host}

    def start_game(self, player_id: str) -> Dict:
        """Start the lobby's game. Only the host may start it."""
        from .game_service import get_game_service

        lobby = self.get_lobby_by_player(player_id)
        if not lobby:
            return {'success': False, 'error': 'Player not found'}

        if lobby.host_id != player_id:
            return {'success': False, 'error': 'Only the host can start the game'}

        if lobby.status == 'playing':
            return {'success': False, 'error': 'Game already in progress'}

        if len(lobby.players) < MIN_PLAYERS:
            return {'success': False, 'error': f'Minimum {MIN_PLAYERS} players required for Spyfall'}

        if len(lobby.players) > MAX_PLAYERS:
            return {'success': False, 'error': f'Maximum {MAX_PLAYERS} players allowed for Spyfall'}

        game_service = get_game_service()
        if not game_service:
            return {'success': False, 'error': 'Game service not available'}

        game_service.create_game(lobby)
        lobby.status = 'playing'

        return {'success': True, 'lobby': lobby}

    def finish_game(self, lobby_code: str) -> Optional[Lobby]:
        """Mark a lobby's game as finished so a new one can be started."""
        lobby = self.lobbies.get(lobby_code)
        if lobby:
            lobby.status = 'finished'
        return lobby

    def set_connected(self, player_id: str, is_connected: bool) -> Optional[Lobby]:
        lobby = self.get_lobby_by_player(player_id)
        if lobby:
            player = lobby.get_player(player_id)
            if player:
                player.is_connected = is_connected
        return lobby

    def get_lobby(self, lobby_code: str) -> Optional[Lobby]:
        return self.lobbies.get((lobby_code or '').upper())

    def get_lobby_by_player(self, player_id: str) -> Optional[Lobby]:
        lobby_code = self.player_to_lobby.get(player_id)
        return self.lobbies.get(lobby_code) if lobby_code else None


# Global service instance
_lobby_service = None


def get_lobby_service() -> Optional[LobbyService]:
    """Get the global lobby service instance."""
    return _lobby_service


def initialize_lobby_service() -> LobbyService:
    """Initialize the global lobby service instance."""
    global _lobby_service
    _lobby_service = LobbyService()
    return _lobby_service
