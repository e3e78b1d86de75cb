import pytest

from spyfall_server.models.game import OfflinePlayerRole
from spyfall_server.services.voting import find_spy, resolve_plurality, resolve_votes, tally_votes


def test_tally_keeps_first_seen_order():
    assert list(tally_votes(['b', 'a', 'b', 'c'])) == ['b', 'a', 'c']
    assert tally_votes(['b', 'a', 'b', 'c']) == {'b': 2, 'a': 1, 'c': 1}


def test_single_leader_is_voted_out():
    outcome = resolve_votes(['Ann', 'Ann', 'Ben'])
    assert not outcome.is_tie
    assert outcome.voted_out == 'Ann'
    assert outcome.max_votes == 2


def test_shared_maximum_is_a_tie():
    outcome = resolve_votes(['Ann', 'Ben', 'Ann', 'Ben', 'Cat'])
    assert outcome.is_tie
    assert outcome.voted_out is None
    assert outcome.leaders == ['Ann', 'Ben']


@pytest.mark.parametrize('resolver, arg', [(resolve_votes, []), (resolve_plurality, {})])
def test_no_votes(resolver, arg):
    with pytest.raises(ValueError, match='No votes to process'):
        resolver(arg)


class TestFindSpy:

    def test_returns_spy_and_non_spy(self):
        roles = [
            OfflinePlayerRole('Ann', 'Bank', 'Teller', False),
            OfflinePlayerRole('Ben', None, None, True),
        ]
        spy, non_spy = find_spy(roles, name_attr='player_name')
        assert spy.player_name == 'Ben'
        assert non_spy.location == 'Bank'

    @pytest.mark.parametrize('roles', [
        [OfflinePlayerRole('Ann', 'Bank', 'Teller', False)],
        [OfflinePlayerRole('Ann', None, None, True)],
        [OfflinePlayerRole('Ann', None, None, True), OfflinePlayerRole('Ben', None, None, True),
         OfflinePlayerRole('Cat', 'Bank', 'Teller', False)],
    ])
    def test_invalid_rosters(self, roles):
        with pytest.raises(ValueError, match='missing spy or non-spy roles'):
            find_spy(roles, name_attr='player_name')
