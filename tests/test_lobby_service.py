import pytest

from spyfall_server.services.lobby_service import LobbyService


@pytest.fixture()
def lobby_service(services):
    return services[1]


@pytest.fixture()
def full_lobby(lobby_service):
    created = lobby_service.create_lobby('Hana')
    code = created['lobby'].code
    ids = [created['player'].id]
    for name in ('Arun', 'Bea'):
        ids.append(lobby_service.join_lobby(code, name)['player'].id)
    return code, ids


class TestCreateLobby:

    def test_host_is_first_player(self, lobby_service):
        result = lobby_service.create_lobby('  Hana ')
        lobby, host = result['lobby'], result['player']

        assert result['success']
        assert host.name == 'Hana'
        assert host.is_host
        assert lobby.host_id == host.id
        assert lobby.players == [host]
        assert lobby.status == 'waiting'
        assert len(lobby.code) == 6
        assert lobby.code == lobby.code.upper()
        assert lobby_service.get_lobby(lobby.code.lower()) is lobby

    def test_requires_name(self, lobby_service):
        assert lobby_service.create_lobby('  ') == {'success': False, 'error': 'Player name is required'}

    @pytest.mark.parametrize('max_players', [2, 17])
    def test_max_players_bounds(self, lobby_service, max_players):
        result = lobby_service.create_lobby('Hana', max_players)
        assert result['error'] == 'Max players must be between 3 and 16'

    def test_custom_code_length(self):
        assert len(LobbyService(code_length=4).create_lobby('Hana')['lobby'].code) == 4


class TestJoinLobby:

    def test_join_is_case_insensitive_on_code(self, lobby_service):
        code = lobby_service.create_lobby('Hana')['lobby'].code
        result = lobby_service.join_lobby(code.lower(), 'Arun')
        assert result['success']
        assert [p.name for p in result['lobby'].players] == ['Hana', 'Arun']
        assert not result['player'].is_host

    def test_unknown_lobby(self, lobby_service):
        assert lobby_service.join_lobby('ZZZZZZ', 'Arun')['error'] == 'Lobby not found'

    def test_duplicate_name(self, lobby_service):
        code = lobby_service.create_lobby('Hana')['lobby'].code
        assert lobby_service.join_lobby(code, 'hana')['error'] == 'Player name already taken'

    def test_lobby_full(self, lobby_service):
        code = lobby_service.create_lobby('Hana', 3)['lobby'].code
        lobby_service.join_lobby(code, 'Arun')
        lobby_service.join_lobby(code, 'Bea')
        assert lobby_service.join_lobby(code, 'Cy')['error'] == 'Lobby is full'

    def test_cannot_join_running_game(self, lobby_service, full_lobby):
        code, ids = full_lobby
        lobby_service.start_game(ids[0])
        assert lobby_service.join_lobby(code, 'Cy')['error'] == 'Game already in progress'


    def test_can_join_after_game_finished(self, lobby_service, full_lobby):
        code, ids = full_lobby
        lobby_service.start_game(ids[0])
        lobby_service.finish_game(code)

        result = lobby_service.join_lobby(code, 'Cy')
        assert result['success']
        assert len(result['lobby'].players) == 4


class TestLeaveLobby:

    def test_host_leaving_promotes_next_player(self, lobby_service, full_lobby):
        code, ids = full_lobby
        result = lobby_service.leave_lobby(ids[0])

        assert result['was_host']
        lobby = result['lobby']
        assert lobby.host_id == ids[1]
        assert lobby.get_player(ids[1]).is_host
        assert lobby_service.get_lobby_by_player(ids[0]) is None

    def test_last_player_deletes_lobby(self, lobby_service):
        created = lobby_service.create_lobby('Hana')
        result = lobby_service.leave_lobby(created['player'].id)
        assert result['lobby'] is None
        assert lobby_service.get_lobby(created['lobby'].code) is None

    def test_emptied_lobby_ends_its_game(self, services, full_lobby):
        game_service, lobby_service, _ = services
        code, ids = full_lobby
        lobby_service.start_game(ids[0])

        for player_id in ids:
            lobby_service.leave_lobby(player_id)

        assert game_service.get_game(code) is None

    def test_unknown_player(self, lobby_service):
        assert lobby_service.leave_lobby('ghost')['error'] == 'Player not found'


class TestStartGame:

    def test_host_starts_game(self, services, full_lobby):
        game_service, lobby_service, _ = services
        code, ids = full_lobby

        result = lobby_service.start_game(ids[0])

        assert result['success']
        assert result['lobby'].status == 'playing'
        assert game_service.get_game(code).get_player_ids() == ids

    def test_only_host(self, lobby_service, full_lobby):
        _, ids = full_lobby
        assert lobby_service.start_game(ids[1])['error'] == 'Only the host can start the game'

    def test_not_twice(self, lobby_service, full_lobby):
        _, ids = full_lobby
        lobby_service.start_game(ids[0])
        assert lobby_service.start_game(ids[0])['error'] == 'Game already in progress'

    def test_needs_three_players(self, lobby_service):
        created = lobby_service.create_lobby('Hana')
        lobby_service.join_lobby(created['lobby'].code, 'Arun')
        result = lobby_service.start_game(created['player'].id)
        assert result['error'] == 'Minimum 3 players required for Spyfall'
        assert created['lobby'].status == 'waiting'

    def test_restart_after_finish(self, services, full_lobby):
        game_service, lobby_service, _ = services
        code, ids = full_lobby
        lobby_service.start_game(ids[0])
        first_game = game_service.get_game(code)

        lobby_service.finish_game(code)
        assert lobby_service.start_game(ids[0])['success']
        assert game_service.get_game(code) is not first_game


def test_connection_flag(lobby_service, full_lobby):
    _, ids = full_lobby
    lobby = lobby_service.set_connected(ids[1], False)
    assert lobby.get_player(ids[1]).is_connected is False
    assert lobby_service.set_connected('ghost', False) is None
