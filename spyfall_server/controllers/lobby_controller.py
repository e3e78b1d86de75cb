"""
Lobby Controller

Handles lobby management and Spyfall game HTTP endpoints.
"""

from flask import Blueprint, request, jsonify, current_app
from ..config.game_settings import get_catalog_statistics
from ..models.game import parse_action
from ..services.game_service import get_game_service
from ..services.lobby_service import get_lobby_service
from ..services.token_service import get_token_service
from ..utils.decorators import require_player
from ..utils.game_logger import game_logger
from ..utils.helpers import get_json_body, parse_max_players
from ..websocket.handlers import publish_action_result

lobby_bp = Blueprint('lobby', __name__)


def _service_unavailable(name):
    return jsonify({
        'success': False,
        'error': f'{name} service unavailable'
    }), 500


def _lobby_response(action, result, status_code):
    """Shared success payload for create/join: lobby, player and token."""
    lobby = result['lobby']
    player = result['player']
    token = get_token_service().issue_token(player.id, lobby.code, player.name)

    response_data = {
        'success': True,
        'lobby': lobby.to_dict(),
        'player_id': player.id,
        'player_token': token
    }
    game_logger.log_server_response(request, action, True, response_data, lobby.code)
    return jsonify(response_data), status_code


def _forbidden_for_other_lobby(lobby_code):
    """True when the token belongs to a different lobby than the URL."""
    return request.player['lobby_code'] != lobby_code.upper()


@lobby_bp.route('/health', methods=['GET'])
def health():
    """Report catalog and logging statistics."""
    return jsonify({
        'success': True,
        'catalog': get_catalog_statistics(),
        'logs': game_logger.get_log_stats()
    })


@lobby_bp.route('/lobbies', methods=['POST'])
def create_lobby():
    """Create a lobby; the caller becomes host."""
    try:
        lobby_service = get_lobby_service()
        if not lobby_service or not get_token_service():
            return _service_unavailable('Lobby')

        data = get_json_body()
        host_name = data.get('player_name')
        max_players = parse_max_players(data.get('max_players'), current_app.config['DEFAULT_MAX_PLAYERS'])
        if max_players is None:
            return jsonify({'success': False, 'error': 'Max players must be a number'}), 400

        game_logger.log_user_action(request, 'create_lobby', player_name=host_name, max_players=max_players)

        result = lobby_service.create_lobby(host_name, max_players)
        if not result['success']:
            game_logger.log_server_response(request, 'create_lobby', False, result)
            return jsonify(result), 400

        return _lobby_response('create_lobby', result, 201)

    except Exception as e:
        game_logger.log_error(request, e, 'create_lobby')
        error_response = {'success': False, 'error': str(e)}
        game_logger.log_server_response(request, 'create_lobby', False, error_response)
        return jsonify(error_response), 500


@lobby_bp.route('/lobbies/<lobby_code>/join', methods=['POST'])
def join_lobby(lobby_code):
    """Join a waiting lobby by code."""
    try:
        lobby_service = get_lobby_service()
        if not lobby_service or not get_token_service():
            return _service_unavailable('Lobby')

        data = get_json_body()
        player_name = data.get('player_name')

        game_logger.log_user_action(request, 'join_lobby', lobby_code, player_name=player_name)

        result = lobby_service.join_lobby(lobby_code, player_name)
        if not result['success']:
            status_code = 404 if result['error'] == 'Lobby not found' else 400
            game_logger.log_server_response(request, 'join_lobby', False, result, lobby_code)
            return jsonify(result), status_code

        current_app.socketio.emit('lobby_updated', result['lobby'].to_dict(), room=result['lobby'].code)
        return _lobby_response('join_lobby', result, 200)

    except Exception as e:
        game_logger.log_error(request, e, 'join_lobby', lobby_code)
        error_response = {'success': False, 'error': str(e)}
        game_logger.log_server_response(request, 'join_lobby', False, error_response, lobby_code)
        return jsonify(error_response), 500


@lobby_bp.route('/lobbies/<lobby_code>/leave', methods=['POST'])
@require_player
def leave_lobby(lobby_code):
    """Leave the lobby the caller's token belongs to."""
    try:
        lobby_service = get_lobby_service()
        if not lobby_service:
            return _service_unavailable('Lobby')

        if _forbidden_for_other_lobby(lobby_code):
            return jsonify({'success': False, 'error': 'Not a member of this lobby'}), 403

        game_logger.log_user_action(request, 'leave_lobby', lobby_code)

        result = lobby_service.leave_lobby(request.player['player_id'])
        if not result['success']:
            game_logger.log_server_response(request, 'leave_lobby', False, result, lobby_code)
            return jsonify(result), 404

        lobby = result['lobby']
        response_data = {
            'success': True,
            'lobby': lobby.to_dict() if lobby else None,
            'was_host': result['was_host']
        }
        if lobby:
            current_app.socketio.emit('lobby_updated', lobby.to_dict(), room=lobby.code)

        game_logger.log_server_response(request, 'leave_lobby', True, response_data, lobby_code)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'leave_lobby', lobby_code)
        return jsonify({'success': False, 'error': str(e)}), 500


@lobby_bp.route('/lobbies/<lobby_code>', methods=['GET'])
def get_lobby(lobby_code):
    """Get the public lobby roster and status."""
    lobby_service = get_lobby_service()
    if not lobby_service:
        return _service_unavailable('Lobby')

    lobby = lobby_service.get_lobby(lobby_code)
    if not lobby:
        return jsonify({'success': False, 'error': 'Lobby not found'}), 404

    return jsonify({'success': True, 'lobby': lobby.to_dict()})


@lobby_bp.route('/lobbies/<lobby_code>/start', methods=['POST'])
@require_player
def start_game(lobby_code):
    """Host starts a Spyfall game over the current roster."""
    try:
        lobby_service = get_lobby_service()
        game_service = get_game_service()
        if not lobby_service or not game_service:
            return _service_unavailable('Game')

        if _forbidden_for_other_lobby(lobby_code):
            return jsonify({'success': False, 'error': 'Not a member of this lobby'}), 403

        player_id = request.player['player_id']
        game_logger.log_user_action(request, 'start_game', lobby_code)

        result = lobby_service.start_game(player_id)
        if not result['success']:
            status_code = 403 if result['error'] == 'Only the host can start the game' else 400
            game_logger.log_server_response(request, 'start_game', False, result, lobby_code)
            return jsonify(result), status_code

        lobby = result['lobby']
        socketio = current_app.socketio
        socketio.emit('game_started', {'lobby_code': lobby.code}, room=lobby.code)
        socketio.emit('lobby_updated', lobby.to_dict(), room=lobby.code)
        publish_action_result(lobby.code, None, socketio, broadcast=True)

        response_data = {
            'success': True,
            'lobby': lobby.to_dict(),
            'state': game_service.get_player_state(lobby.code, player_id)
        }
        game_logger.log_server_response(request, 'start_game', True, response_data, lobby_code)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'start_game', lobby_code)
        return jsonify({'success': False, 'error': str(e)}), 500


@lobby_bp.route('/lobbies/<lobby_code>/game/state', methods=['GET'])
@require_player
def get_game_state(lobby_code):
    """Game state as seen by the calling player."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable('Game')

        if _forbidden_for_other_lobby(lobby_code):
            return jsonify({'success': False, 'error': 'Not a member of this lobby'}), 403

        game_logger.log_user_action(request, 'get_game_state', lobby_code)

        state = game_service.get_player_state(lobby_code.upper(), request.player['player_id'])
        if state is None:
            error_response = {'success': False, 'error': 'Game not found'}
            game_logger.log_server_response(request, 'get_game_state', False, error_response, lobby_code)
            return jsonify(error_response), 404

        response_data = {'success': True, 'state': state}
        game_logger.log_server_response(request, 'get_game_state', True, response_data, lobby_code)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'get_game_state', lobby_code)
        return jsonify({'success': False, 'error': str(e)}), 500


@lobby_bp.route('/lobbies/<lobby_code>/game/action', methods=['POST'])
@require_player
def game_action(lobby_code):
    """Submit a Spyfall action (ready_to_vote, submit_vote, guess_location)."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable('Game')

        if _forbidden_for_other_lobby(lobby_code):
            return jsonify({'success': False, 'error': 'Not a member of this lobby'}), 403

        data = get_json_body()
        code = lobby_code.upper()
        game_logger.log_user_action(request, 'game_action', code, action_type=data.get('type'))

        action = parse_action(data, player_id=request.player['player_id'])
        result = game_service.handle_action(code, action) if action else None
        if result is None:
            error_response = {'success': False, 'error': 'Invalid action type'}
            game_logger.log_server_response(request, 'game_action', False, error_response, code)
            return jsonify(error_response), 400

        if not result.success:
            error_response = result.to_dict()
            status_code = 404 if result.error == 'Game instance not found' else 400
            game_logger.log_server_response(request, 'game_action', False, error_response, code)
            return jsonify(error_response), status_code

        publish_action_result(code, result, current_app.socketio)

        response_data = result.to_dict()
        game_logger.log_server_response(request, 'game_action', True, response_data, code)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'game_action', lobby_code)
        return jsonify({'success': False, 'error': str(e)}), 500


@lobby_bp.route('/lobbies/<lobby_code>/game/results', methods=['GET'])
def get_game_results(lobby_code):
    """Final results of a finished game."""
    game_service = get_game_service()
    if not game_service:
        return _service_unavailable('Game')

    code = lobby_code.upper()
    game = game_service.get_game(code)
    if not game:
        return jsonify({'success': False, 'error': 'Game not found'}), 404

    if not game.is_complete():
        return jsonify({'success': False, 'error': 'Game is not finished'}), 400

    return jsonify({
        'success': True,
        'round_results': game.get_round_results(),
        'game_results': game.get_game_results()
    })
