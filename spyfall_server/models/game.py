"""
Game Data Models

Contains all Spyfall data structures and enums shared by the session
engine and the offline round functions.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Tuple, Union


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GamePhase(Enum):
    """Session engine phases."""
    PLAYING = "playing"
    VOTING = "voting"
    SPY_GUESS = "spy_guess"
    FINISHED = "finished"


class Winner(Enum):
    """Session engine win conditions."""
    SPY = "spy"
    NON_SPIES = "non_spies"


# Offline results use a hyphenated value for the non-spy side
OFFLINE_SPY_WINS = "spy"
OFFLINE_NON_SPIES_WIN = "non-spies"


@dataclass(frozen=True)
class Location:
    """A catalog entry: a secret setting and the personas found there."""
    name: str
    roles: Tuple[str, ...]


@dataclass
class PlayerRole:
    """Secret assignment for one player in one game."""
    player_id: str
    location: Optional[str]
    role: Optional[str]
    is_spy: bool

    def to_dict(self) -> Dict:
        return {'location': self.location, 'role': self.role, 'is_spy': self.is_spy}


@dataclass
class Vote:
    voter_id: str
    target_player_id: str
    submitted_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict:
        return {
            'voter_id': self.voter_id,
            'target_player_id': self.target_player_id,
            'submitted_at': self.submitted_at.isoformat(),
        }


@dataclass
class LocationGuess:
    spy_id: str
    guessed_location: str
    is_correct: bool
    submitted_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict:
        return {
            'spy_id': self.spy_id,
            'guessed_location': self.guessed_location,
            'submitted_at': self.submitted_at.isoformat(),
            'is_correct': self.is_correct,
        }


@dataclass
class GameState:
    """Server-side Spyfall session state. Never sent to clients as-is."""
    phase: GamePhase
    location: str
    spy_id: str
    player_roles: List[PlayerRole]
    votes: List[Vote] = field(default_factory=list)
    voted_out_player_id: Optional[str] = None
    winner: Optional[Winner] = None
    location_guess: Optional[LocationGuess] = None
    is_tie: bool = False
    game_started_at: datetime = field(default_factory=utc_now)


# ---- Player actions ----

@dataclass
class ReadyToVote:
    type: ClassVar[str] = "ready_to_vote"
    player_id: str
    timestamp: datetime = field(default_factory=utc_now)


@dataclass
class SubmitVote:
    type: ClassVar[str] = "submit_vote"
    player_id: str
    target_player_id: Optional[str] = None
    timestamp: datetime = field(default_factory=utc_now)


@dataclass
class GuessLocation:
    type: ClassVar[str] = "guess_location"
    player_id: str
    guessed_location: Optional[str] = None
    timestamp: datetime = field(default_factory=utc_now)


SpyfallAction = Union[ReadyToVote, SubmitVote, GuessLocation]


def parse_action(payload: Dict, player_id: Optional[str] = None) -> Optional[SpyfallAction]:
    """
    Build a typed action from a wire message.

    Args:
        payload: {'type': ..., 'data': {...}, 'player_id': ..., 'timestamp': ...}
        player_id: Authenticated player id; overrides any id in the payload

    Returns:
        The typed action, or None when the type is not a Spyfall action
    """
    if not isinstance(payload, dict):
        return None

    action_type = payload.get('type')
    data = payload.get('data')
    if not isinstance(data, dict):
        data = {}
    actor = player_id or payload.get('player_id') or ''

    timestamp = utc_now()
    raw_timestamp = payload.get('timestamp')
    if isinstance(raw_timestamp, str):
        try:
            timestamp = datetime.fromisoformat(raw_timestamp)
        except ValueError:
            pass

    if action_type == ReadyToVote.type:
        return ReadyToVote(player_id=actor, timestamp=timestamp)
    if action_type == SubmitVote.type:
        return SubmitVote(player_id=actor, target_player_id=_text(data.get('target_player_id')), timestamp=timestamp)
    if action_type == GuessLocation.type:
        return GuessLocation(player_id=actor, guessed_location=_text(data.get('guessed_location')), timestamp=timestamp)
    return None


def _text(value) -> Optional[str]:
    # Non-string payload fields count as missing
    return value if isinstance(value, str) else None


@dataclass
class ActionResult:
    """Outcome of one dispatched action."""
    success: bool
    error: Optional[str] = None
    game_state_update: Optional[Dict] = None

    def to_dict(self) -> Dict:
        result = {'success': self.success}
        if self.error is not None:
            result['error'] = self.error
        if self.game_state_update is not None:
            result['game_state_update'] = self.game_state_update
        return result


# ---- Offline (pass-and-play) models ----

@dataclass
class OfflinePlayerRole:
    player_name: str
    location: Optional[str]
    role: Optional[str]
    is_spy: bool


@dataclass
class OfflineVote:
    voter_name: str
    target_name: str


@dataclass
class OfflineGameResults:
    """Snapshot of one offline round, recomputed from votes and roles."""
    voted_out_player: str
    vote_counts: Dict[str, int]
    spy_name: str
    location: str
    winner: str  # "spy" or "non-spies"
    is_tie: bool
    roles: List[OfflinePlayerRole] = field(default_factory=list)
    location_guess: Optional[str] = None
    spy_guessed_correctly: bool = False
