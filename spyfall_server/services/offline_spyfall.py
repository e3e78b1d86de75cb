"""
Offline Spyfall Round Functions

Pure functions for the single-device pass-and-play variant. The caller
(the pass-and-play CLI) owns the phase transitions:
setup -> role_reveal -> discussion -> voting -> results.
"""

import random
from dataclasses import replace
from typing import Dict, List, Sequence

from ..config.game_settings import MIN_PLAYERS, MAX_PLAYERS
from ..models.game import (
    Location, OfflineGameResults, OfflinePlayerRole, OfflineVote,
    OFFLINE_NON_SPIES_WIN, OFFLINE_SPY_WINS
)
from . import roles as role_assignment
from .voting import find_spy, resolve_votes


def get_random_location(rng=random) -> Location:
    """Gets a random location from the available Spyfall locations."""
    return role_assignment.get_random_location(rng)


def get_random_role(location: Location, rng=random) -> str:
    """Gets a random role from a location's available roles."""
    return role_assignment.get_random_role(location, rng)


def assign_roles(player_names: Sequence[str], rng=random) -> List[OfflinePlayerRole]:
    """
    Assigns roles to players for an offline game.

    One player is randomly selected as the spy; the others share a location
    and each get a role drawn from it.

    Raises:
        ValueError: If the roster is smaller than 3 or larger than 16 players
    """
    if len(player_names) < MIN_PLAYERS:
        raise ValueError(f'Minimum {MIN_PLAYERS} players required for Spyfall')

    if len(player_names) > MAX_PLAYERS:
        raise ValueError(f'Maximum {MAX_PLAYERS} players allowed for Spyfall')

    return [
        OfflinePlayerRole(
            player_name=assignment.player_id,
            location=assignment.location,
            role=assignment.role,
            is_spy=assignment.is_spy,
        )
        for assignment in role_assignment.assign_roles(list(player_names), rng)
    ]


def process_votes(votes: Sequence[OfflineVote], roles: Sequence[OfflinePlayerRole]) -> OfflineGameResults:
    """
    Processes votes and determines the round result.

    A tie at the top means nobody is voted out and the spy wins.

    Raises:
        ValueError: On an empty vote list, or roles without a spy or a non-spy
    """
    if not votes:
        raise ValueError('No votes to process')

    outcome = resolve_votes([vote.target_name for vote in votes])
    spy_role, non_spy_role = find_spy(roles, name_attr='player_name')

    if outcome.is_tie:
        return OfflineGameResults(
            voted_out_player='',
            vote_counts=outcome.vote_counts,
            spy_name=spy_role.player_name,
            location=non_spy_role.location,
            winner=OFFLINE_SPY_WINS,
            is_tie=True,
            roles=list(roles),
        )

    spy_was_voted_out = outcome.voted_out == spy_role.player_name

    return OfflineGameResults(
        voted_out_player=outcome.voted_out,
        vote_counts=outcome.vote_counts,
        spy_name=spy_role.player_name,
        location=non_spy_role.location,
        winner=OFFLINE_NON_SPIES_WIN if spy_was_voted_out else OFFLINE_SPY_WINS,
        is_tie=False,
        roles=list(roles),
    )


def apply_spy_guess(results: OfflineGameResults, guessed_location: str) -> OfflineGameResults:
    """
    Give a voted-out spy one last guess at the location.

    A correct guess (case- and whitespace-insensitive) hands the round to
    the spy; a wrong one leaves the non-spies as winners.

    Raises:
        ValueError: If the spy was not voted out, or the guess is blank
    """
    if results.is_tie or results.voted_out_player != results.spy_name:
        raise ValueError('Spy can only guess after being voted out')

    if not guessed_location or not guessed_location.strip():
        raise ValueError('Must provide location guess')

    is_correct = guessed_location.strip().lower() == results.location.strip().lower()

    return replace(
        results,
        winner=OFFLINE_SPY_WINS if is_correct else OFFLINE_NON_SPIES_WIN,
        location_guess=guessed_location,
        spy_guessed_correctly=is_correct,
    )


def shuffle_array(items: Sequence, rng=random) -> list:
    """Returns a shuffled copy using the Fisher-Yates algorithm."""
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def create_voting_order(player_names: Sequence[str], rng=random) -> List[str]:
    """Creates a randomized voting order for players."""
    return shuffle_array(player_names, rng)


def validate_player_names(player_names: Sequence[str]) -> Dict:
    """
    Validates player names for offline game setup.

    Every violated rule is reported, not just the first.

    Returns:
        {'is_valid': bool, 'errors': [str, ...]}
    """
    errors = []

    if len(player_names) < MIN_PLAYERS:
        errors.append(f'Minimum {MIN_PLAYERS} players required')

    if len(player_names) > MAX_PLAYERS:
        errors.append(f'Maximum {MAX_PLAYERS} players allowed')

    if any(not name.strip() for name in player_names):
        errors.append('Player names cannot be empty')

    unique_names = {name.strip().lower() for name in player_names}
    if len(unique_names) != len(player_names):
        errors.append('Player names must be unique')

    return {
        'is_valid': len(errors) == 0,
        'errors': errors,
    }
