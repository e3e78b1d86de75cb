"""
WebSocket Event Handlers

Handles all WebSocket events for real-time Spyfall sessions.
"""

from flask import request
from flask_socketio import emit, join_room, leave_room
from ..models.game import parse_action
from ..services.game_service import get_game_service
from ..services.lobby_service import get_lobby_service
from ..utils.decorators import websocket_player_required
from ..utils.game_logger import game_logger

# Simple tracking of connected players
connected_players = {}  # player_id -> socket_id


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        emit('connected', {'message': 'Connected'})

    @socketio.on('disconnect')
    def handle_disconnect(*args):
        """Mark the player as disconnected; their seat in the game is kept."""
        player_id = next((pid for pid, sid in connected_players.items() if sid == request.sid), None)
        if not player_id:
            return

        del connected_players[player_id]

        lobby_service = get_lobby_service()
        if lobby_service:
            lobby = lobby_service.set_connected(player_id, False)
            if lobby:
                socketio.emit('lobby_updated', lobby.to_dict(), room=lobby.code)
                game_logger.logger.info(f"WebSocket: player {player_id} disconnected from lobby {lobby.code}")

    @socketio.on('join_game')
    @websocket_player_required
    def handle_join_game(data, player=None):
        """Join the lobby room and receive the caller's view of the game."""
        try:
            lobby_service = get_lobby_service()
            game_service = get_game_service()
            if not lobby_service or not game_service:
                emit('error', {'error': 'Lobby service unavailable'})
                return {'success': False, 'error': 'Lobby service unavailable'}

            player_id = player['player_id']
            lobby = lobby_service.get_lobby_by_player(player_id)
            if not lobby or lobby.code != player['lobby_code']:
                emit('error', {'error': 'Lobby not found'})
                return {'success': False, 'error': 'Lobby not found'}

            join_room(lobby.code)
            connected_players[player_id] = request.sid
            lobby_service.set_connected(player_id, True)

            game_logger.logger.info(f"WebSocket: {player['name']} joined lobby {lobby.code}")

            socketio.emit('lobby_updated', lobby.to_dict(), room=lobby.code)

            state = game_service.get_player_state(lobby.code, player_id)
            if state is not None:
                emit('game_state_update', {'success': True, 'state': state})

            return {'success': True, 'lobby': lobby.to_dict()}

        except Exception as e:
            return _handler_error(e, 'join_game', player['lobby_code'])

    @socketio.on('leave_game')
    @websocket_player_required
    def handle_leave_game(data, player=None):
        """Leave the lobby room and the lobby itself."""
        try:
            lobby_service = get_lobby_service()
            if not lobby_service:
                return {'success': False, 'error': 'Lobby service unavailable'}

            player_id = player['player_id']
            leave_room(player['lobby_code'])
            connected_players.pop(player_id, None)

            result = lobby_service.leave_lobby(player_id)
            if not result['success']:
                return {'success': False, 'error': result['error']}

            lobby = result['lobby']
            if lobby:
                socketio.emit('lobby_updated', lobby.to_dict(), room=lobby.code)

            game_logger.logger.info(f"WebSocket: {player['name']} left lobby {player['lobby_code']}")
            return {'success': True}

        except Exception as e:
            return _handler_error(e, 'leave_game', player['lobby_code'])

    @socketio.on('game_action')
    @websocket_player_required
    def handle_game_action(data, player=None):
        """Apply a Spyfall action for the caller and broadcast any state change."""
        lobby_code = player['lobby_code']
        try:
            game_service = get_game_service()
            if not game_service:
                emit('error', {'error': 'Game service unavailable'})
                return {'success': False, 'error': 'Game service unavailable'}

            game_logger.log_user_action(request, 'game_action', lobby_code, action_type=data.get('type'))

            action = parse_action(data, player_id=player['player_id'])
            if action is None:
                response = {'success': False, 'error': 'Invalid action type'}
            else:
                result = game_service.handle_action(lobby_code, action)
                response = {'success': result.success}
                if result.error:
                    response['error'] = result.error
                else:
                    publish_action_result(lobby_code, result, socketio)

            game_logger.log_server_response(request, 'game_action', response['success'], response, lobby_code)
            emit('action_result', response)
            return response

        except Exception as e:
            return _handler_error(e, 'game_action', lobby_code)


def _handler_error(error, action, lobby_code):
    """Log a failed socket handler and turn it into an error ack."""
    game_logger.log_error(request, error, action, lobby_code)
    response = {'success': False, 'error': str(error)}
    game_logger.log_server_response(request, action, False, response, lobby_code)
    emit('error', {'error': str(error)})
    return response


def publish_action_result(lobby_code, result, socketio, broadcast=False):
    """
    Send each connected player their own view of the game after a change,
    and announce the final results once the game is over.

    Args:
        lobby_code: Lobby whose game changed
        result: ActionResult of the applied action, or None
        socketio: SocketIO instance
        broadcast: Send states even when the result carries no update
    """
    game_service = get_game_service()
    if not game_service:
        return

    game = game_service.get_game(lobby_code)
    if not game:
        return

    has_update = result is not None and result.game_state_update is not None
    if not (broadcast or has_update):
        return

    for player_id in game.get_player_ids():
        socket_id = connected_players.get(player_id)
        if not socket_id:
            continue
        socketio.emit('game_state_update', {
            'success': True,
            'state': game_service.get_player_state(lobby_code, player_id)
        }, room=socket_id)

    if has_update and game.is_complete():
        lobby_service = get_lobby_service()
        lobby = lobby_service.finish_game(lobby_code) if lobby_service else None

        socketio.emit('game_ended', {
            'lobby_code': lobby_code,
            'round_results': game.get_round_results(),
            'game_results': game_service.get_game_results(lobby_code)
        }, room=lobby_code)
        if lobby:
            socketio.emit('lobby_updated', lobby.to_dict(), room=lobby_code)

        game_logger.logger.info(f"Spyfall game completed in lobby {lobby_code}")
