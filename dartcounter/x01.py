import logging
from typing import List, Optional

from dartcounter.checkout import get_checkout_suggestion
from dartcounter.config import MAX_CHECKOUT
from dartcounter.darts import get_dart_value, is_double
from dartcounter.game import find_player, validate_players
from dartcounter.models import (
    CheckoutSuggestion,
    CompletedLeg,
    Dart,
    LegProgress,
    Player,
    Visit,
    X01Config,
    X01PlayerState,
)
from dartcounter.visit_tracker import VisitTracker


logger = logging.getLogger(__name__)


class X01Game:
    """
    Countdown game (301 / 501).

    Responsibilities:
    - Subtract each dart from the current player's score
    - Detect busts (revert the whole visit) and checkouts (leg won)
    - Track legs and match progress
    - Undo one dart at a time, across visit boundaries
    """

    game_type = "x01"

    def __init__(self, players: List[Player], config: X01Config):
        self.players = validate_players(players)
        self.config = config

        self.player_states = [
            X01PlayerState(player_id=p.id, score=config.variant)
            for p in self.players
        ]
        self.visits = VisitTracker(self.players)
        self.progress = LegProgress()
        self.completed_legs: List[CompletedLeg] = []
        self.last_completed_visit: Optional[Visit] = None

    # =========================================================
    # PUBLIC API
    # =========================================================

    def record_throw(self, dart: Dart):
        if self.progress.finished or self.progress.leg_finished:
            return
        if self.visits.is_visit_complete():
            return
        self.last_completed_visit = None

        player_state = self._current_state()
        new_score = player_state.score - get_dart_value(dart)

        # Score reflects every dart of the visit so far, bust or not
        self.visits.add_dart(dart)
        player_state.score = new_score

        if self._is_bust(new_score, dart):
            player_state.score = new_score + self.visits.current_visit.total
            logger.debug(
                "bust: %s back to %d", player_state.player_id, player_state.score
            )
            self._end_visit(busted=True)
            return

        if new_score == 0:
            self._win_leg(player_state)
            self._end_visit(busted=False, skip_advance=True)
            return

        if self.visits.is_visit_complete():
            self._end_visit(busted=False)

    def undo_last_throw(self) -> bool:
        self.last_completed_visit = None

        dart = self.visits.undo_last_dart()
        if dart is not None:
            self._current_state().score += get_dart_value(dart)
            return True

        record = self.visits.undo_previous_visit()
        if record is None:
            return False

        player_state = self._state_for(record.player_id)
        if player_state is None:
            return False

        if record.visit.busted:
            score_before_visit = record.score_after
        else:
            score_before_visit = record.score_after + record.visit.total

        # The reopened visit still holds every dart but the undone one
        player_state.score = score_before_visit - self.visits.current_visit.total

        if not record.visit.busted and record.score_after == 0:
            self._revert_leg_win(player_state)

        return True

    def next_leg(self):
        if not self.progress.leg_finished or self.progress.finished:
            return

        self.completed_legs.append(self._current_leg_record())

        self.progress.current_leg += 1
        self.progress.leg_starting_player_index = (
            self.progress.leg_starting_player_index + 1
        ) % len(self.players)

        for player_state in self.player_states:
            player_state.score = self.config.variant

        self.visits.reset_all(self.progress.leg_starting_player_index)
        self.progress.leg_finished = False
        self.progress.leg_winner_id = None
        logger.debug("x01 leg %d started", self.progress.current_leg)

    # =========================================================
    # QUERIES
    # =========================================================

    def is_finished(self) -> bool:
        return self.progress.finished

    def is_leg_finished(self) -> bool:
        return self.progress.leg_finished

    def get_winner(self) -> Optional[Player]:
        return find_player(self.players, self.progress.winner_id)

    def get_leg_winner(self) -> Optional[Player]:
        return find_player(self.players, self.progress.leg_winner_id)

    def get_current_player(self) -> Player:
        return self.visits.get_current_player()

    def get_current_leg(self) -> int:
        return self.progress.current_leg

    def get_player_score(self, player_id: str) -> int:
        player_state = self._state_for(player_id)
        return player_state.score if player_state else 0

    def get_player_legs_won(self, player_id: str) -> int:
        player_state = self._state_for(player_id)
        return player_state.legs_won if player_state else 0

    def get_legs_to_win(self) -> int:
        return self.config.legs

    def get_darts_remaining(self) -> int:
        return self.visits.darts_remaining()

    def get_checkout_suggestion(self) -> Optional[CheckoutSuggestion]:
        score = self._current_state().score
        darts_remaining = self.visits.darts_remaining()

        if score > MAX_CHECKOUT or darts_remaining == 0:
            return None

        return get_checkout_suggestion(score, darts_remaining, self.config.out_rule)

    def get_player_average(self, player_id: str) -> float:
        """
        Three-dart average: points scored / darts thrown * 3, counting the
        in-progress visit when this player is at the board.
        """
        player_state = self._state_for(player_id)
        if player_state is None:
            return 0.0

        total_darts = sum(
            len(record.visit.darts)
            for record in self.visits.visit_history
            if record.player_id == player_id
        )
        if self.get_current_player().id == player_id:
            total_darts += len(self.visits.current_visit.darts)

        if total_darts == 0:
            return 0.0

        points_scored = self.config.variant - player_state.score
        return points_scored / total_darts * 3

    def get_all_completed_legs(self) -> List[CompletedLeg]:
        legs = list(self.completed_legs)
        if self.progress.leg_finished:
            legs.append(self._current_leg_record())
        return legs

    # =========================================================
    # RULES
    # =========================================================

    def _is_bust(self, new_score: int, dart: Dart) -> bool:
        if new_score < 0:
            return True
        if self.config.out_rule == "double":
            if new_score == 1:
                return True
            if new_score == 0 and not is_double(dart):
                return True
        return False

    def _win_leg(self, player_state: X01PlayerState):
        player_state.legs_won += 1
        self.progress.leg_finished = True
        self.progress.leg_winner_id = player_state.player_id
        logger.debug(
            "checkout: %s wins leg %d", player_state.player_id, self.progress.current_leg
        )

        if player_state.legs_won >= self.config.legs:
            self.progress.finished = True
            self.progress.winner_id = player_state.player_id
            logger.debug("x01 match won by %s", player_state.player_id)

    def _revert_leg_win(self, player_state: X01PlayerState):
        player_state.legs_won = max(0, player_state.legs_won - 1)
        self.progress.leg_finished = False
        self.progress.finished = False
        self.progress.winner_id = None
        self.progress.leg_winner_id = None

    # =========================================================
    # VISITS
    # =========================================================

    def _end_visit(self, busted: bool, skip_advance: bool = False):
        player_state = self._current_state()
        self.last_completed_visit = self.visits.current_visit.copy()
        self.last_completed_visit.busted = busted
        self.visits.end_visit(
            busted=busted,
            skip_advance=skip_advance,
            score_after=player_state.score,
        )

    def _current_leg_record(self) -> CompletedLeg:
        winner = next((ps for ps in self.player_states if ps.score == 0), None)
        return CompletedLeg(
            leg_number=self.progress.current_leg,
            winner_id=winner.player_id if winner else None,
            visit_history=list(self.visits.visit_history),
        )

    def _current_state(self) -> X01PlayerState:
        return self.player_states[self.visits.current_player_index]

    def _state_for(self, player_id: str) -> Optional[X01PlayerState]:
        for player_state in self.player_states:
            if player_state.player_id == player_id:
                return player_state
        return None
