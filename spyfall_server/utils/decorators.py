"""
Player Identification Decorators

Both decorators resolve a player token into
{'player_id', 'lobby_code', 'name'} and expose it as request.player.
"""

from functools import wraps
from typing import Dict, Optional
from flask import request, jsonify
from flask_socketio import emit


def _verify(token: Optional[str]) -> Dict:
    from ..services.token_service import get_token_service

    token_service = get_token_service()
    if not token_service:
        return {'success': False, 'error': 'Token service unavailable'}
    return token_service.verify_token(token)


def _bearer_token() -> Optional[str]:
    auth_header = request.headers.get('Authorization', '')
    scheme, _, token = auth_header.partition(' ')
    if scheme != 'Bearer' or not token:
        return None
    return token.strip()


def require_player(f):
    """HTTP endpoints: expects `Authorization: Bearer <player token>`."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = _bearer_token()
        if token is None:
            return jsonify({'success': False, 'error': 'Authorization token required'}), 401

        result = _verify(token)
        if not result['success']:
            status_code = 500 if result['error'] == 'Token service unavailable' else 401
            return jsonify({'success': False, 'error': result['error']}), status_code

        request.player = result['player']
        return f(*args, **kwargs)

    return decorated_function


def websocket_player_required(f):
    """
    Socket.IO events: expects a 'token' field in the event payload.

    Failures emit 'error' to the caller and are returned as the ack; the
    verified player is passed to the handler as the `player` keyword.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        data = args[0] if args else None
        if not isinstance(data, dict) or 'token' not in data:
            result = {'success': False, 'error': 'Authentication required'}
        else:
            result = _verify(data['token'])

        if not result['success']:
            emit('error', {'error': result['error']})
            return {'success': False, 'error': result['error']}

        request.player = result['player']
        kwargs['player'] = result['player']
        return f(*args, **kwargs)

    return decorated_function
