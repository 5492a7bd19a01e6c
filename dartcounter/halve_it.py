import logging
from typing import List, Optional

from dartcounter.darts import get_dart_value, is_valid_dart
from dartcounter.game import find_player, validate_players
from dartcounter.models import (
    Dart,
    HalveItConfig,
    HalveItDartRecord,
    HalveItPlayerState,
    HalveItTarget,
    LegProgress,
    Player,
)
from dartcounter.visit_tracker import VisitTracker


logger = logging.getLogger(__name__)


def is_dart_on_target(dart: Dart, target: HalveItTarget) -> bool:
    if not is_valid_dart(dart):
        return False
    if target.kind == "number":
        return dart.segment == target.value
    if target.kind == "double":
        return dart.multiplier == 2
    if target.kind == "triple":
        return dart.multiplier == 3
    if target.kind == "bull":
        return dart.segment in (25, 50)
    return False


def score_dart(dart: Dart, target: HalveItTarget) -> int:
    return get_dart_value(dart) if is_dart_on_target(dart, target) else 0


class HalveItGame:
    """
    Each round has one target. Darts on target add their value straight
    away; a full visit without a single hit halves the score (rounded down).
    Highest score after the last round wins the leg.

    The per-visit hit flag is derived state: undo rebuilds it from the darts
    still in the visit instead of restoring it.
    """

    game_type = "halve-it"

    def __init__(self, players: List[Player], config: HalveItConfig):
        self.players = validate_players(players)
        self.config = config

        self.player_states = [
            HalveItPlayerState(player_id=p.id, score=config.starting_score)
            for p in self.players
        ]
        self.visits = VisitTracker(self.players)
        self.progress = LegProgress()
        self.dart_records: List[HalveItDartRecord] = []

        self.round_index = 0
        self.round_player_count = 0
        self.visit_hit_target = False
        self.visit_points = 0

    # =========================================================
    # PUBLIC API
    # =========================================================

    def record_throw(self, dart: Dart):
        if self.progress.finished or self.progress.leg_finished:
            return
        if self.visits.is_visit_complete():
            return
        if self.round_index >= len(self.config.targets):
            return

        player_state = self._current_state()
        previous_score = player_state.score
        self.visits.add_dart(dart)

        dart_scored = score_dart(dart, self.get_current_target())
        if dart_scored > 0:
            self.visit_hit_target = True
            self.visit_points += dart_scored
            player_state.score += dart_scored

        halving_applied = False
        if self.visits.is_visit_complete() and not self.visit_hit_target:
            halving_applied = True
            player_state.score //= 2
            logger.debug("halved %s to %d", player_state.player_id, player_state.score)

        self.dart_records.append(
            HalveItDartRecord(
                player_id=player_state.player_id,
                previous_score=previous_score,
                dart_scored=dart_scored,
                halving_applied=halving_applied,
            )
        )

        if self.visits.is_visit_complete():
            self._end_visit(player_state)

    def undo_last_throw(self) -> bool:
        if not self.dart_records:
            return False

        record = self.dart_records.pop()

        if self.visits.current_visit.darts:
            self.visits.undo_last_dart()
        else:
            self.visits.undo_previous_visit()
            if self.round_player_count == 0:
                self.round_index -= 1
                self.round_player_count = len(self.players) - 1
            else:
                self.round_player_count -= 1

        if self.progress.leg_finished:
            leg_winner = self._state_for(self.progress.leg_winner_id)
            if leg_winner is not None:
                leg_winner.legs_won = max(0, leg_winner.legs_won - 1)
            self.progress.leg_finished = False
            self.progress.leg_winner_id = None
        self.progress.finished = False
        self.progress.winner_id = None

        player_state = self._state_for(record.player_id)
        player_state.score = record.previous_score

        self._recalc_visit_state()
        return True

    def next_leg(self):
        if not self.progress.leg_finished or self.progress.finished:
            return

        self.progress.current_leg += 1
        self.progress.leg_starting_player_index = (
            self.progress.leg_starting_player_index + 1
        ) % len(self.players)

        self.round_index = 0
        self.round_player_count = 0
        self.visit_hit_target = False
        self.visit_points = 0
        for player_state in self.player_states:
            player_state.score = self.config.starting_score

        self.visits.reset_all(self.progress.leg_starting_player_index)
        self.dart_records = []
        self.progress.leg_finished = False
        self.progress.leg_winner_id = None
        logger.debug("halve it leg %d started", self.progress.current_leg)

    # =========================================================
    # QUERIES
    # =========================================================

    def get_current_round(self) -> int:
        return self.round_index + 1

    def get_current_target(self) -> Optional[HalveItTarget]:
        if self.round_index >= len(self.config.targets):
            return None
        return self.config.targets[self.round_index]

    def get_player_score(self, player_id: str) -> int:
        player_state = self._state_for(player_id)
        return player_state.score if player_state else 0

    def get_player_legs_won(self, player_id: str) -> int:
        player_state = self._state_for(player_id)
        return player_state.legs_won if player_state else 0

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

    def get_darts_remaining(self) -> int:
        return self.visits.darts_remaining()

    # =========================================================
    # ROUNDS
    # =========================================================

    def _end_visit(self, player_state: HalveItPlayerState):
        self.visits.end_visit(score_after=player_state.score)
        self.visit_hit_target = False
        self.visit_points = 0
        self.round_player_count += 1

        if self.round_player_count < len(self.players):
            return

        self.round_player_count = 0
        self.round_index += 1

        if self.round_index >= len(self.config.targets):
            best = self.player_states[0]
            for candidate in self.player_states[1:]:
                if candidate.score > best.score:
                    best = candidate
            self._win_leg(best)

    def _win_leg(self, player_state: HalveItPlayerState):
        player_state.legs_won += 1
        self.progress.leg_finished = True
        self.progress.leg_winner_id = player_state.player_id
        logger.debug("halve it: %s wins leg %d", player_state.player_id, self.progress.current_leg)

        if player_state.legs_won >= self.config.legs:
            self.progress.finished = True
            self.progress.winner_id = player_state.player_id

    def _recalc_visit_state(self):
        self.visit_hit_target = False
        self.visit_points = 0

        target = self.get_current_target()
        if target is None:
            return

        for dart in self.visits.current_visit.darts:
            scored = score_dart(dart, target)
            if scored > 0:
                self.visit_hit_target = True
                self.visit_points += scored

    def _current_state(self) -> HalveItPlayerState:
        return self.player_states[self.visits.current_player_index]

    def _state_for(self, player_id: Optional[str]) -> Optional[HalveItPlayerState]:
        for player_state in self.player_states:
            if player_state.player_id == player_id:
                return player_state
        return None
