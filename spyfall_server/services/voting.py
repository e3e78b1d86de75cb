"""
Vote Resolution

Tally and plurality selection shared by both game modes. A round with more
than one target at the maximum count is a tie: nobody is voted out.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence


@dataclass
class VoteOutcome:
    """Result of resolving one voting round."""
    vote_counts: Dict[str, int]
    leaders: List[str]
    max_votes: int

    @property
    def is_tie(self) -> bool:
        return len(self.leaders) > 1

    @property
    def voted_out(self) -> Optional[str]:
        return None if self.is_tie else self.leaders[0]


def tally_votes(targets: Iterable[str]) -> Dict[str, int]:
    """Count votes per target, keeping first-seen order."""
    counts: Dict[str, int] = {}
    for target in targets:
        counts[target] = counts.get(target, 0) + 1
    return counts


def resolve_plurality(vote_counts: Dict[str, int]) -> VoteOutcome:
    """
    Find every target sharing the highest vote count.

    Raises:
        ValueError: If no votes were cast
    """
    if not vote_counts:
        raise ValueError("No votes to process")

    max_votes = max(vote_counts.values())
    leaders = [target for target, count in vote_counts.items() if count == max_votes]
    return VoteOutcome(vote_counts=dict(vote_counts), leaders=leaders, max_votes=max_votes)


def resolve_votes(targets: Sequence[str]) -> VoteOutcome:
    """Tally a round of vote targets and resolve the plurality."""
    if not targets:
        raise ValueError("No votes to process")
    return resolve_plurality(tally_votes(targets))


def find_spy(roles: Sequence, *, name_attr: str) -> tuple:
    """
    Locate the spy and one non-spy in a role list.

    Returns:
        (spy_role, non_spy_role)

    Raises:
        ValueError: If the list lacks a spy or lacks any non-spy
    """
    spy_roles = [role for role in roles if role.is_spy]
    non_spy_role = next((role for role in roles if not role.is_spy), None)

    if len(spy_roles) != 1 or non_spy_role is None or not getattr(spy_roles[0], name_attr):
        raise ValueError("Invalid game state: missing spy or non-spy roles")

    return spy_roles[0], non_spy_role
