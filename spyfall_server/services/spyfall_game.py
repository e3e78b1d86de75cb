"""
Spyfall Session Engine

Server-authoritative game for one lobby. Phases run
playing -> voting -> spy_guess -> finished, with voting -> finished when the
vote ends in a tie or lands on a non-spy.
"""

import random
from typing import Dict, List, Optional, Sequence, Union

from ..config.game_settings import SPY_WIN_POINTS, NON_SPY_WIN_POINTS
from ..models.game import (
    ActionResult, GamePhase, GameState, GuessLocation, LocationGuess, ReadyToVote,
    SpyfallAction, SubmitVote, Vote, Winner, parse_action, utc_now
)
from ..models.player import Player
from ..utils.game_logger import game_logger
from .roles import assign_roles
from .voting import find_spy, resolve_votes


class SpyfallGame:
    """
    One Spyfall game over a fixed roster.

    The roster is supplied by the lobby layer and is assumed to hold
    between 3 and 16 players. Actions must be applied one at a time;
    GameService provides that serialization per lobby.
    """

    def __init__(self, players: Sequence[Player], lobby_code: Optional[str] = None, rng=random):
        self.players = list(players)
        self.lobby_code = lobby_code
        self.scores: Dict[str, int] = {player.id: 0 for player in self.players}
        self.players_ready_to_vote = set()
        self.game_state = self._initialize_game(rng)

    def _initialize_game(self, rng) -> GameState:
        player_roles = assign_roles([player.id for player in self.players], rng)
        spy_role, non_spy_role = find_spy(player_roles, name_attr='player_id')

        game_logger.log_game_event(
            self.lobby_code, 'game_started', 'system',
            total_players=len(self.players)
        )

        return GameState(
            phase=GamePhase.PLAYING,
            location=non_spy_role.location,
            spy_id=spy_role.player_id,
            player_roles=player_roles,
        )

    # ---- Action dispatch ----

    def handle_action(self, action: Union[SpyfallAction, Dict]) -> ActionResult:
        """
        Apply one player action.

        Args:
            action: A typed action, or a wire dict {'type', 'data', 'player_id'}

        Returns:
            ActionResult; game_state_update is set only when all players
            should receive a fresh state
        """
        if isinstance(action, dict):
            action = parse_action(action)

        if isinstance(action, ReadyToVote):
            return self._handle_ready_to_vote(action)
        if isinstance(action, SubmitVote):
            return self._handle_submit_vote(action)
        if isinstance(action, GuessLocation):
            return self._handle_guess_location(action)
        return ActionResult(success=False, error='Invalid action type')

    def _handle_ready_to_vote(self, action: ReadyToVote) -> ActionResult:
        if self.game_state.phase != GamePhase.PLAYING:
            return ActionResult(success=False, error='Not in playing phase')

        # Only roster members count toward the ready set
        if self._get_player(action.player_id):
            self.players_ready_to_vote.add(action.player_id)

        if len(self.players_ready_to_vote) == len(self.players):
            self.game_state.phase = GamePhase.VOTING
            game_logger.log_game_event(self.lobby_code, 'voting_started', action.player_id)
            return ActionResult(success=True, game_state_update=self.get_public_game_state())

        return ActionResult(success=True)

    def _handle_submit_vote(self, action: SubmitVote) -> ActionResult:
        if self.game_state.phase != GamePhase.VOTING:
            return ActionResult(success=False, error='Not in voting phase')

        if not isinstance(action.target_player_id, str) or not action.target_player_id:
            return ActionResult(success=False, error='Must specify target player')

        if not self._get_player(action.player_id):
            return ActionResult(success=False, error='Player not in game')

        if self.has_player_voted(action.player_id):
            return ActionResult(success=False, error='Already voted')

        if not self._get_player(action.target_player_id):
            return ActionResult(success=False, error='Target player not found')

        self.game_state.votes.append(Vote(
            voter_id=action.player_id,
            target_player_id=action.target_player_id,
            submitted_at=action.timestamp,
        ))
        game_logger.log_game_event(
            self.lobby_code, 'vote_submitted', action.player_id,
            votes_cast=len(self.game_state.votes), total_players=len(self.players)
        )

        if len(self.game_state.votes) == len(self.players):
            self._process_voting_results()
            return ActionResult(success=True, game_state_update=self.get_public_game_state())

        return ActionResult(success=True)

    def _process_voting_results(self) -> None:
        outcome = resolve_votes([vote.target_player_id for vote in self.game_state.votes])
        find_spy(self.game_state.player_roles, name_attr='player_id')

        if outcome.is_tie:
            # Nobody is voted out on a tie and the spy escapes
            self.game_state.is_tie = True
            self.game_state.voted_out_player_id = None
            game_logger.log_game_event(
                self.lobby_code, 'vote_tied', 'system',
                tied_players=outcome.leaders, max_votes=outcome.max_votes
            )
            self._finish(Winner.SPY)
            return

        self.game_state.voted_out_player_id = outcome.voted_out

        if outcome.voted_out == self.game_state.spy_id:
            self.game_state.phase = GamePhase.SPY_GUESS
            game_logger.log_game_event(self.lobby_code, 'spy_voted_out', 'system')
        else:
            self._finish(Winner.SPY)

    def _handle_guess_location(self, action: GuessLocation) -> ActionResult:
        if self.game_state.phase != GamePhase.SPY_GUESS:
            return ActionResult(success=False, error='Not in spy guess phase')

        if action.player_id != self.game_state.spy_id:
            return ActionResult(success=False, error='Only the spy can guess the location')

        if not isinstance(action.guessed_location, str) or not action.guessed_location.strip():
            return ActionResult(success=False, error='Must provide location guess')

        is_correct = action.guessed_location.strip().lower() == self.game_state.location.strip().lower()

        self.game_state.location_guess = LocationGuess(
            spy_id=action.player_id,
            guessed_location=action.guessed_location,
            is_correct=is_correct,
            submitted_at=action.timestamp,
        )
        game_logger.log_game_event(
            self.lobby_code, 'location_guessed', action.player_id, is_correct=is_correct
        )

        self._finish(Winner.SPY if is_correct else Winner.NON_SPIES)
        return ActionResult(success=True, game_state_update=self.get_public_game_state())

    def _finish(self, winner: Winner) -> None:
        self.game_state.phase = GamePhase.FINISHED
        self.game_state.winner = winner
        self._update_scores(winner)
        game_logger.log_game_event(
            self.lobby_code, 'game_finished', 'system',
            winner=winner.value, is_tie=self.game_state.is_tie
        )

    def _update_scores(self, winner: Winner) -> None:
        for player in self.players:
            if winner == Winner.SPY and player.id == self.game_state.spy_id:
                self.scores[player.id] = self.scores.get(player.id, 0) + SPY_WIN_POINTS
            elif winner == Winner.NON_SPIES and player.id != self.game_state.spy_id:
                self.scores[player.id] = self.scores.get(player.id, 0) + NON_SPY_WIN_POINTS

    # ---- State projections ----

    def get_public_game_state(self) -> Dict:
        """State visible to every player. The secret is revealed only once finished."""
        state = self.game_state
        public_state = {
            'phase': state.phase.value,
            'votes': [vote.to_dict() for vote in state.votes],
            'voted_out_player_id': state.voted_out_player_id,
            'winner': state.winner.value if state.winner else None,
            'location_guess': state.location_guess.to_dict() if state.location_guess else None,
            'is_tie': state.is_tie,
            'players_ready_to_vote': len(self.players_ready_to_vote),
            'total_players': len(self.players),
            'game_started_at': state.game_started_at.isoformat(),
        }

        if state.phase == GamePhase.FINISHED:
            public_state['location'] = state.location
            public_state['spy_id'] = state.spy_id

        return public_state

    def get_player_specific_state(self, player_id: str) -> Dict:
        """Public state plus the caller's own role, and nobody else's."""
        public_state = self.get_public_game_state()
        player_role = self._get_player_role(player_id)

        if not player_role:
            return public_state

        return {**public_state, 'player_role': player_role.to_dict()}

    # ---- Results ----

    def get_round_results(self) -> Dict:
        state = self.game_state
        return {
            'round_number': 1,
            'scores': dict(self.scores),
            'summary': self._generate_round_summary(),
            'details': {
                'location': state.location,
                'spy_id': state.spy_id,
                'winner': state.winner.value if state.winner else None,
                'is_tie': state.is_tie,
                'votes': [vote.to_dict() for vote in state.votes],
                'location_guess': state.location_guess.to_dict() if state.location_guess else None,
            },
        }

    def get_game_results(self) -> Dict:
        # max() keeps the first player on equal scores
        winner = max(self.scores, key=lambda pid: self.scores[pid]) if self.scores else 'No winner'
        state = self.game_state

        return {
            'final_scores': dict(self.scores),
            'winner': winner,
            'summary': self._generate_round_summary(),
            'game_stats': {
                'location': state.location,
                'spy_id': state.spy_id,
                'game_winner': state.winner.value if state.winner else None,
                'total_votes': len(state.votes),
                'is_tie': state.is_tie,
                'spy_guessed_correctly': bool(state.location_guess and state.location_guess.is_correct),
            },
        }

    def _generate_round_summary(self) -> str:
        spy_player = self._get_player(self.game_state.spy_id)
        spy_name = spy_player.name if spy_player else 'Unknown'

        if self.game_state.winner == Winner.SPY:
            if self.game_state.location_guess and self.game_state.location_guess.is_correct:
                return f"Spy wins! {spy_name} correctly guessed the location: {self.game_state.location}"
            if self.game_state.is_tie:
                return "Spy wins! The vote ended in a tie."
            return "Spy wins! The non-spies voted out the wrong person."
        if self.game_state.winner == Winner.NON_SPIES:
            return f"Non-spies win! {spy_name} was the spy and failed to guess the location."
        return "Game in progress."

    # ---- Queries ----

    def is_complete(self) -> bool:
        return self.game_state.phase == GamePhase.FINISHED

    def has_player_voted(self, player_id: str) -> bool:
        return any(vote.voter_id == player_id for vote in self.game_state.votes)

    def is_player_ready_to_vote(self, player_id: str) -> bool:
        return player_id in self.players_ready_to_vote

    def get_player_ids(self) -> List[str]:
        return [player.id for player in self.players]

    def _get_player(self, player_id: Optional[str]) -> Optional[Player]:
        return next((player for player in self.players if player.id == player_id), None)

    def _get_player_role(self, player_id: str):
        return next((role for role in self.game_state.player_roles if role.player_id == player_id), None)
