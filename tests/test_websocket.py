import pytest


def events(sio_client, name):
    return [packet['args'][0] for packet in sio_client.get_received() if packet['name'] == name]


@pytest.fixture()
def socket_lobby(flask_app, client, make_lobby):
    """A started lobby with every player joined over Socket.IO."""
    code, members = make_lobby()
    sockets = {}
    for pid, token in members:
        sio_client = flask_app.socketio.test_client(flask_app, flask_test_client=client)
        ack = sio_client.emit('join_game', {'token': token}, callback=True)
        assert ack['success']
        sockets[pid] = sio_client

    for sio_client in sockets.values():
        sio_client.get_received()

    res = client.post(f'/api/lobbies/{code}/start', headers={'Authorization': f'Bearer {members[0][1]}'})
    assert res.status_code == 200

    yield code, members, sockets

    for sio_client in sockets.values():
        if sio_client.is_connected():
            sio_client.disconnect()


def test_connect_greets_client(sio_client):
    assert events(sio_client, 'connected') == [{'message': 'Connected'}]


def test_join_requires_token(sio_client):
    ack = sio_client.emit('join_game', {}, callback=True)
    assert ack == {'success': False, 'error': 'Authentication required'}

    ack = sio_client.emit('join_game', {'token': 'bogus'}, callback=True)
    assert ack['error'] == 'Invalid token'
    assert events(sio_client, 'error')[-1] == {'error': 'Invalid token'}


def test_leave_game(sio_client, make_lobby):
    _, members = make_lobby()
    sio_client.emit('join_game', {'token': members[1][1]}, callback=True)

    ack = sio_client.emit('leave_game', {'token': members[1][1]}, callback=True)
    assert ack == {'success': True}

    ack = sio_client.emit('leave_game', {'token': members[1][1]}, callback=True)
    assert ack == {'success': False, 'error': 'Player not found'}


def test_start_sends_each_player_own_role(socket_lobby):
    _, members, sockets = socket_lobby

    roles = {}
    for pid, sio_client in sockets.items():
        updates = events(sio_client, 'game_state_update')
        assert updates
        state = updates[-1]['state']
        assert state['phase'] == 'playing'
        assert 'spy_id' not in state
        roles[pid] = state['player_role']

    assert sum(role['is_spy'] for role in roles.values()) == 1


def test_action_ack_and_errors(socket_lobby):
    _, members, sockets = socket_lobby
    pid, token = members[0]
    sio_client = sockets[pid]

    ack = sio_client.emit('game_action', {'token': token, 'type': 'ready_to_vote', 'data': {}}, callback=True)
    assert ack == {'success': True}

    ack = sio_client.emit('game_action', {'token': token, 'type': 'ready_to_vote', 'data': {}}, callback=True)
    assert ack == {'success': True}

    ack = sio_client.emit('game_action', {'token': token, 'type': 'dance', 'data': {}}, callback=True)
    assert ack == {'success': False, 'error': 'Invalid action type'}


def test_full_round_over_sockets(socket_lobby):
    code, members, sockets = socket_lobby
    tokens = dict(members)

    spy_id = None
    for pid, sio_client in sockets.items():
        if events(sio_client, 'game_state_update')[-1]['state']['player_role']['is_spy']:
            spy_id = pid
    non_spy_id = next(pid for pid in sockets if pid != spy_id)

    for pid, sio_client in sockets.items():
        sio_client.emit('game_action', {'token': tokens[pid], 'type': 'ready_to_vote', 'data': {}}, callback=True)

    for sio_client in sockets.values():
        assert events(sio_client, 'game_state_update')[-1]['state']['phase'] == 'voting'

    for pid, sio_client in sockets.items():
        ack = sio_client.emit('game_action', {
            'token': tokens[pid],
            'type': 'submit_vote',
            'data': {'target_player_id': non_spy_id}
        }, callback=True)
        assert ack['success']

    for sio_client in sockets.values():
        received = sio_client.get_received()
        final = [p['args'][0] for p in received if p['name'] == 'game_state_update'][-1]['state']
        assert final['phase'] == 'finished'
        assert final['winner'] == 'spy'
        assert final['spy_id'] == spy_id

        ended = [p['args'][0] for p in received if p['name'] == 'game_ended']
        assert len(ended) == 1
        assert ended[0]['lobby_code'] == code
        assert ended[0]['game_results']['final_scores'][spy_id] == 3


def test_disconnect_marks_player(flask_app, client, socket_lobby):
    code, members, sockets = socket_lobby
    pid = members[1][0]
    sockets[pid].disconnect()

    lobby = client.get(f'/api/lobbies/{code}').get_json()['lobby']
    player = next(p for p in lobby['players'] if p['id'] == pid)
    assert player['is_connected'] is False


def test_handler_failure_is_acked_and_logged(socket_lobby, monkeypatch):
    from spyfall_server.websocket import handlers

    _, members, sockets = socket_lobby
    pid, token = members[0]
    logged = []

    def explode(*args, **kwargs):
        raise RuntimeError('action store offline')

    monkeypatch.setattr(handlers, 'parse_action', explode)
    monkeypatch.setattr(handlers.game_logger, 'log_error', lambda request, error, action, code=None: logged.append(action))

    sockets[pid].get_received()
    ack = sockets[pid].emit('game_action', {'token': token, 'type': 'ready_to_vote', 'data': {}}, callback=True)

    assert ack == {'success': False, 'error': 'action store offline'}
    assert logged == ['game_action']
    assert events(sockets[pid], 'error') == [{'error': 'action store offline'}]


def test_malformed_vote_payload_is_rejected(socket_lobby):
    _, members, sockets = socket_lobby
    tokens = dict(members)
    for pid, sio_client in sockets.items():
        sio_client.emit('game_action', {'token': tokens[pid], 'type': 'ready_to_vote', 'data': {}}, callback=True)

    pid = members[0][0]
    ack = sockets[pid].emit('game_action', {'token': tokens[pid], 'type': 'submit_vote', 'data': 'A'}, callback=True)
    assert ack == {'success': False, 'error': 'Must specify target player'}
