import threading

import pytest

from spyfall_server.models.game import ReadyToVote, SubmitVote
from spyfall_server.models.player import Lobby
from spyfall_server.services.game_service import GameService


@pytest.fixture()
def lobby(players):
    return Lobby(id='lobby-1', code='ABC123', host_id='host', max_players=8, players=players)


@pytest.fixture()
def game_service():
    return GameService()


def test_create_and_lookup(game_service, lobby):
    game = game_service.create_game(lobby)
    assert game_service.get_game('ABC123') is game
    assert game.lobby_code == 'ABC123'


def test_roster_is_a_snapshot(game_service, lobby):
    game = game_service.create_game(lobby)
    lobby.players.pop()
    assert len(game.get_player_ids()) == 3


def test_action_without_game(game_service):
    result = game_service.handle_action('NOPE00', ReadyToVote(player_id='host'))
    assert result.error == 'Game instance not found'


def test_player_state_hides_other_roles(game_service, lobby):
    game_service.create_game(lobby)
    state = game_service.get_player_state('ABC123', 'a')
    assert set(state['player_role']) == {'location', 'role', 'is_spy'}
    assert 'spy_id' not in state
    assert game_service.get_player_state('NOPE00', 'a') is None


def test_results_only_when_complete(game_service, lobby):
    game_service.create_game(lobby)
    assert game_service.get_game_results('ABC123') is None

    for pid in ('host', 'a', 'b'):
        game_service.handle_action('ABC123', ReadyToVote(player_id=pid))
    game_service.handle_action('ABC123', SubmitVote(player_id='host', target_player_id='a'))
    game_service.handle_action('ABC123', SubmitVote(player_id='a', target_player_id='b'))
    game_service.handle_action('ABC123', SubmitVote(player_id='b', target_player_id='host'))

    results = game_service.get_game_results('ABC123')
    assert results['game_stats']['is_tie'] is True


def test_concurrent_votes_are_applied_once(game_service, lobby):
    game_service.create_game(lobby)
    for pid in ('host', 'a', 'b'):
        game_service.handle_action('ABC123', ReadyToVote(player_id=pid))

    def vote():
        game_service.handle_action('ABC123', SubmitVote(player_id='host', target_player_id='a'))

    threads = [threading.Thread(target=vote) for _ in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(game_service.get_game('ABC123').game_state.votes) == 1


def test_end_game_returns_results(game_service, lobby):
    game_service.create_game(lobby)
    results = game_service.end_game('ABC123')

    assert results['final_scores'] == {'host': 0, 'a': 0, 'b': 0}
    assert game_service.get_game('ABC123') is None
    assert game_service.end_game('ABC123') is None


def test_delete_game(game_service, lobby):
    game_service.create_game(lobby)
    assert game_service.delete_game('ABC123') is True
    assert game_service.delete_game('ABC123') is False
    assert game_service.get_game('ABC123') is None
