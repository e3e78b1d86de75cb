"""
Role Assignment

Secret assignment shared by the session engine and the offline round
functions: one random location, one random spy, and an independent random
role (with replacement) for every other player.
"""

import random
from typing import List, Sequence

from ..config.game_settings import SPYFALL_LOCATIONS
from ..models.game import Location, PlayerRole


def get_random_location(rng=random) -> Location:
    """Gets a random location from the catalog."""
    return rng.choice(SPYFALL_LOCATIONS)


def get_random_role(location: Location, rng=random) -> str:
    """Gets a random role from a location's available roles."""
    return rng.choice(location.roles)


def assign_roles(player_ids: Sequence[str], rng=random) -> List[PlayerRole]:
    """
    Assign one spy and one shared location across a roster.

    The roster size is not checked here; callers that accept untrusted
    rosters validate first.

    Args:
        player_ids: Roster identifiers, in roster order
        rng: Source of randomness (the random module or a random.Random)

    Returns:
        One PlayerRole per roster entry, in roster order
    """
    location = get_random_location(rng)
    spy_index = rng.randrange(len(player_ids))

    roles = []
    for index, player_id in enumerate(player_ids):
        if index == spy_index:
            roles.append(PlayerRole(player_id=player_id, location=None, role=None, is_spy=True))
        else:
            roles.append(PlayerRole(
                player_id=player_id,
                location=location.name,
                role=get_random_role(location, rng),
                is_spy=False,
            ))
    return roles
