import logging
from typing import List, Optional

from dartcounter.darts import get_dart_value
from dartcounter.game import find_player, validate_players
from dartcounter.models import (
    Dart,
    LegProgress,
    Player,
    ShanghaiConfig,
    ShanghaiDartSnapshot,
    ShanghaiPlayerState,
)
from dartcounter.visit_tracker import VisitTracker


logger = logging.getLogger(__name__)


class ShanghaiGame:
    """
    Round-based target game.

    Round N targets start_number + N - 1; only darts in that number score
    (segment x multiplier). A single, double and triple of the target in one
    visit is a Shanghai and wins the leg at once. Otherwise the highest total
    after the last round wins.

    Undo snapshots hold the thrower's score and the round counters as they
    were before each dart.
    """

    game_type = "shanghai"

    def __init__(self, players: List[Player], config: ShanghaiConfig):
        self.players = validate_players(players)
        self.config = config

        self.player_states = [ShanghaiPlayerState(player_id=p.id) for p in self.players]
        self.visits = VisitTracker(self.players)
        self.progress = LegProgress()
        self.dart_snapshots: List[ShanghaiDartSnapshot] = []

        self.round = 1
        # players who have finished their visit in the current round
        self.round_player_count = 0

    # =========================================================
    # PUBLIC API
    # =========================================================

    def record_throw(self, dart: Dart):
        if self.progress.finished or self.progress.leg_finished:
            return
        if self.visits.is_visit_complete():
            return

        player_state = self._current_state()
        target = self.get_current_target_number()

        self.dart_snapshots.append(
            ShanghaiDartSnapshot(
                player_id=player_state.player_id,
                previous_score=player_state.total_score,
                round=self.round,
                round_player_count=self.round_player_count,
            )
        )
        self.visits.add_dart(dart)

        if dart.segment == target:
            player_state.total_score += get_dart_value(dart)

        if self._is_shanghai(target):
            logger.debug("shanghai by %s on %d", player_state.player_id, target)
            self._win_leg(player_state)
            self.visits.end_visit(skip_advance=True, score_after=player_state.total_score)
            return

        if self.visits.is_visit_complete():
            self._end_visit(player_state)

    def undo_last_throw(self) -> bool:
        if not self.dart_snapshots:
            return False

        snapshot = self.dart_snapshots.pop()

        if self.visits.current_visit.darts:
            self.visits.undo_last_dart()
        else:
            self.visits.undo_previous_visit()

        if self.progress.leg_finished:
            leg_winner = self._state_for(self.progress.leg_winner_id)
            if leg_winner is not None:
                leg_winner.legs_won = max(0, leg_winner.legs_won - 1)
            self.progress.leg_finished = False
            self.progress.leg_winner_id = None
        self.progress.finished = False
        self.progress.winner_id = None

        player_state = self._state_for(snapshot.player_id)
        player_state.total_score = snapshot.previous_score
        self.round = snapshot.round
        self.round_player_count = snapshot.round_player_count
        return True

    def next_leg(self):
        if not self.progress.leg_finished or self.progress.finished:
            return

        self.progress.current_leg += 1
        self.progress.leg_starting_player_index = (
            self.progress.leg_starting_player_index + 1
        ) % len(self.players)

        self.round = 1
        self.round_player_count = 0
        for player_state in self.player_states:
            player_state.total_score = 0

        self.visits.reset_all(self.progress.leg_starting_player_index)
        self.dart_snapshots = []
        self.progress.leg_finished = False
        self.progress.leg_winner_id = None
        logger.debug("shanghai leg %d started", self.progress.current_leg)

    # =========================================================
    # QUERIES
    # =========================================================

    def get_current_round(self) -> int:
        return self.round

    def get_current_target_number(self) -> int:
        return self.config.start_number + self.round - 1

    def get_player_score(self, player_id: str) -> int:
        player_state = self._state_for(player_id)
        return player_state.total_score if player_state else 0

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
    # RULES
    # =========================================================

    def _is_shanghai(self, target: int) -> bool:
        multipliers = {
            d.multiplier for d in self.visits.current_visit.darts if d.segment == target
        }
        return {1, 2, 3} <= multipliers

    def _end_visit(self, player_state: ShanghaiPlayerState):
        self.visits.end_visit(score_after=player_state.total_score)
        self.round_player_count += 1

        if self.round_player_count < len(self.players):
            return

        self.round_player_count = 0
        self.round += 1
        logger.debug("shanghai round %d", self.round)

        if self.round > self.config.rounds:
            best = self.player_states[0]
            for candidate in self.player_states[1:]:
                if candidate.total_score > best.total_score:
                    best = candidate
            self._win_leg(best)

    def _win_leg(self, player_state: ShanghaiPlayerState):
        player_state.legs_won += 1
        self.progress.leg_finished = True
        self.progress.leg_winner_id = player_state.player_id

        if player_state.legs_won >= self.config.legs:
            self.progress.finished = True
            self.progress.winner_id = player_state.player_id
            logger.debug("shanghai match won by %s", player_state.player_id)

    def _current_state(self) -> ShanghaiPlayerState:
        return self.player_states[self.visits.current_player_index]

    def _state_for(self, player_id: Optional[str]) -> Optional[ShanghaiPlayerState]:
        for player_state in self.player_states:
            if player_state.player_id == player_id:
                return player_state
        return None
