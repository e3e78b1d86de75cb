import os
import tempfile

# Keep test logs out of the working tree; must run before the package is imported
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='spyfall-logs-'))

import pytest

from spyfall_server import create_app
from spyfall_server.config import TestingConfig
from spyfall_server.models.player import Player
from spyfall_server.services.game_service import initialize_game_service
from spyfall_server.services.lobby_service import initialize_lobby_service
from spyfall_server.services.token_service import initialize_token_service
from spyfall_server.websocket.handlers import connected_players


class FixedRng:
    """Deterministic stand-in for the random module: first location, first role, chosen spy."""

    def __init__(self, spy_index=0):
        self.spy_index = spy_index

    def choice(self, seq):
        return seq[0]

    def randrange(self, n):
        return self.spy_index

    def randint(self, a, b):
        return b


@pytest.fixture()
def services():
    game_service = initialize_game_service()
    lobby_service = initialize_lobby_service()
    token_service = initialize_token_service(TestingConfig.JWT_SECRET, 1)
    connected_players.clear()
    return game_service, lobby_service, token_service


@pytest.fixture()
def flask_app(services):
    application, _ = create_app(TestingConfig)
    yield application
    connected_players.clear()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app, client):
    sio = flask_app.socketio.test_client(flask_app, flask_test_client=client)
    yield sio
    if sio.is_connected():
        sio.disconnect()


@pytest.fixture()
def players():
    return [Player(id='host', name='Hana', is_host=True), Player(id='a', name='Arun'), Player(id='b', name='Bea')]


@pytest.fixture()
def fixed_rng():
    return FixedRng


@pytest.fixture()
def make_lobby(client):
    """Create a lobby over HTTP with the given player names; returns (code, [(player_id, token), ...])."""

    def _make(names=('Hana', 'Arun', 'Bea')):
        res = client.post('/api/lobbies', json={'player_name': names[0]})
        assert res.status_code == 201
        body = res.get_json()
        code = body['lobby']['code']
        members = [(body['player_id'], body['player_token'])]

        for name in names[1:]:
            res = client.post(f'/api/lobbies/{code}/join', json={'player_name': name})
            assert res.status_code == 200
            body = res.get_json()
            members.append((body['player_id'], body['player_token']))

        return code, members

    return _make
