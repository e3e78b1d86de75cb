"""
Game Logger Module for the Spyfall Server

Writes one JSON document per log line for player actions, server responses,
engine game events and errors. While a game is running, logged payloads never
carry the location, the spy or anybody's role.
"""

import logging
import json
from collections import Counter
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path

from ..config.app_config import Config

# Keys that reveal the secret while a game is still running
SECRET_STATE_KEYS = ('location', 'spy_id', 'player_role', 'player_roles')

# Payload keys that may hold a game state
STATE_PAYLOAD_KEYS = ('state', 'game_state_update')

LOG_LINE_FORMAT = '%(asctime)s | %(levelname)s | %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class GameLogger:
    """
    Structured logger shared by the controllers, socket handlers and engine.

    Every entry has the shape
    {timestamp, event_type, action, user: {user_ip, session_id, player_id}, details}
    and event_type is one of USER_ACTION, SERVER_RESPONSE_SUCCESS,
    SERVER_RESPONSE_ERROR, GAME_EVENT or ERROR.
    """

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, str(level).upper(), logging.INFO)
        self.logger = self._setup_logger()

    def _log_file(self) -> Path:
        return self.log_dir / f"game_log_{datetime.now():%Y-%m-%d}.log"

    def _setup_logger(self) -> logging.Logger:
        logger = logging.getLogger('spyfall_game')
        logger.setLevel(self.level)
        logger.propagate = False

        # Re-creating the logger (tests, reloads) must not stack handlers
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        file_handler = logging.FileHandler(self._log_file(), encoding='utf-8')
        file_handler.setLevel(self.level)
        file_handler.setFormatter(logging.Formatter(LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT))

        # Console only surfaces warnings and errors
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)
        return logger

    @staticmethod
    def _get_user_identity(request) -> Dict[str, Optional[str]]:
        """Caller identity from a Flask or Socket.IO request."""
        player = getattr(request, 'player', None) or {}
        return {
            'user_ip': getattr(request, 'remote_addr', None) or 'unknown',
            'session_id': getattr(request, 'sid', None),
            'player_id': player.get('player_id'),
        }

    def _write(self, level: int, event_type: str, action: str,
               user_info: Dict[str, Optional[str]], details: Dict[str, Any]) -> None:
        entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'user': user_info,
            'details': details,
        }
        self.logger.log(level, json.dumps(entry, ensure_ascii=False, default=str))

    def log_user_action(self, request, action: str, lobby_code: Optional[str] = None, **kwargs):
        """
        Log an incoming player request.

        Args:
            request: Flask request object (HTTP or Socket.IO)
            action: Request name, e.g. 'create_lobby' or 'game_action'
            lobby_code: Lobby the request targets, if any
            **kwargs: Extra fields for the details block
        """
        details = {
            'lobby_code': lobby_code,
            'endpoint': getattr(request, 'endpoint', None),
            'method': getattr(request, 'method', None),
            **kwargs
        }
        self._write(logging.INFO, 'USER_ACTION', action, self._get_user_identity(request), details)

    def log_server_response(self, request, action: str, success: bool,
                            response_data: Dict[str, Any], lobby_code: Optional[str] = None, **kwargs):
        """Log what was sent back; failed responses are logged at ERROR."""
        details = {
            'lobby_code': lobby_code,
            'success': success,
            'response_size': len(str(response_data)),
            'response_data': self._sanitize_response_data(response_data),
            **kwargs
        }
        self._write(
            logging.INFO if success else logging.ERROR,
            'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR',
            action, self._get_user_identity(request), details
        )

    def log_game_event(self, lobby_code: Optional[str], event: str,
                       player_id: Optional[str] = None, **kwargs):
        """
        Log an engine event such as 'voting_started' or 'game_finished'.

        player_id is the acting player, or 'system' for transitions the
        engine makes on its own.
        """
        user_info = {'user_ip': None, 'session_id': None, 'player_id': player_id}
        self._write(logging.INFO, 'GAME_EVENT', event, user_info, {'lobby_code': lobby_code, **kwargs})

    def log_error(self, request, error: Exception, action: str, lobby_code: Optional[str] = None):
        details = {
            'lobby_code': lobby_code,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'action': action,
        }
        self._write(logging.ERROR, 'ERROR', action, self._get_user_identity(request), details)

    def _sanitize_response_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Strip the game secret from response logs until the game is finished."""
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}

        sanitized = dict(data)

        for key in STATE_PAYLOAD_KEYS:
            state = sanitized.get(key)
            if isinstance(state, dict) and state.get('phase') != 'finished':
                sanitized[key] = {k: v for k, v in state.items() if k not in SECRET_STATE_KEYS}

        if 'player_token' in sanitized:
            sanitized['player_token'] = '***'

        return sanitized

    def get_log_stats(self) -> Dict[str, Any]:
        """Counts for today's log file, including finished games by winner."""
        log_file = self._log_file()
        if not log_file.exists():
            return {'error': 'No log file found for today'}

        event_types = Counter()
        winners = Counter()

        try:
            with open(log_file, 'r', encoding='utf-8') as f:
                for line in f:
                    _, _, message = line.rstrip('\n').partition(' | ')
                    _, _, payload = message.partition(' | ')
                    try:
                        entry = json.loads(payload)
                    except ValueError:
                        continue

                    event_types[entry.get('event_type')] += 1
                    if entry.get('action') == 'game_finished':
                        winners[entry.get('details', {}).get('winner')] += 1
        except OSError as e:
            return {'error': f'Failed to get stats: {e}'}

        return {
            'log_file': str(log_file),
            'file_size_mb': round(log_file.stat().st_size / (1024 * 1024), 2),
            'total_entries': sum(event_types.values()),
            'user_actions': event_types['USER_ACTION'],
            'server_responses': event_types['SERVER_RESPONSE_SUCCESS'] + event_types['SERVER_RESPONSE_ERROR'],
            'game_events': event_types['GAME_EVENT'],
            'errors': event_types['ERROR'],
            'games_finished': sum(winners.values()),
            'spy_wins': winners['spy'],
            'non_spy_wins': winners['non_spies'],
        }


# Global logger instance
game_logger = GameLogger(Config.LOG_DIR, Config.LOG_LEVEL)
