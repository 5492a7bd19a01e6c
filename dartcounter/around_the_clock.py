import logging
from typing import List, Optional

from dartcounter.darts import is_valid_dart
from dartcounter.game import find_player, validate_players
from dartcounter.models import (
    AroundTheClockConfig,
    AroundTheClockDartSnapshot,
    AroundTheClockPlayerState,
    Dart,
    LegProgress,
    Player,
)
from dartcounter.visit_tracker import VisitTracker


logger = logging.getLogger(__name__)

BULL_TARGET = 25


def is_target_hit(dart: Dart, target: int) -> bool:
    if not is_valid_dart(dart):
        return False
    if target == BULL_TARGET:
        return dart.segment in (25, 50)
    return dart.segment == target


class AroundTheClockGame:
    """
    Hit 1 through 20 in order (optionally the bull last).
    Any ring counts; with doubles_advance_extra a double moves two
    numbers on and a triple three.
    """

    game_type = "around-the-clock"

    def __init__(self, players: List[Player], config: AroundTheClockConfig):
        self.players = validate_players(players)
        self.config = config

        self.player_states = [
            AroundTheClockPlayerState(player_id=p.id) for p in self.players
        ]
        self.visits = VisitTracker(self.players)
        self.progress = LegProgress()
        self.dart_snapshots: List[AroundTheClockDartSnapshot] = []

    # =========================================================
    # PUBLIC API
    # =========================================================

    def record_throw(self, dart: Dart):
        if self.progress.finished or self.progress.leg_finished:
            return
        if self.visits.is_visit_complete():
            return

        player_state = self._current_state()
        self.dart_snapshots.append(
            AroundTheClockDartSnapshot(
                player_id=player_state.player_id,
                previous_target=player_state.current_target,
            )
        )
        self.visits.add_dart(dart)

        if is_target_hit(dart, player_state.current_target):
            advance = dart.multiplier if self.config.doubles_advance_extra else 1
            player_state.current_target = self.get_next_target(
                player_state.current_target, advance
            )

            if player_state.current_target > self.get_max_target():
                self._win_leg(player_state)
                self._end_visit(player_state, skip_advance=True)
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

        player_state = self._state_for(snapshot.player_id)
        player_state.current_target = snapshot.previous_target

        if self.progress.leg_finished:
            player_state.legs_won = max(0, player_state.legs_won - 1)
            self.progress.leg_finished = False
            self.progress.leg_winner_id = None
        self.progress.finished = False
        self.progress.winner_id = None
        return True

    def next_leg(self):
        if not self.progress.leg_finished or self.progress.finished:
            return

        self.progress.current_leg += 1
        self.progress.leg_starting_player_index = (
            self.progress.leg_starting_player_index + 1
        ) % len(self.players)

        for player_state in self.player_states:
            player_state.current_target = 1

        self.visits.reset_all(self.progress.leg_starting_player_index)
        self.dart_snapshots = []
        self.progress.leg_finished = False
        self.progress.leg_winner_id = None
        logger.debug("around the clock leg %d started", self.progress.current_leg)

    # =========================================================
    # QUERIES
    # =========================================================

    def get_max_target(self) -> int:
        return BULL_TARGET if self.config.includes_bull else 20

    def get_next_target(self, current: int, advance: int) -> int:
        if current > 20:
            return current + advance

        nxt = current + advance
        if nxt > 20:
            # 21 means past the last number
            return BULL_TARGET if self.config.includes_bull else 21
        return nxt

    def get_player_target(self, player_id: str) -> int:
        player_state = self._state_for(player_id)
        return player_state.current_target if player_state else 1

    def get_player_score(self, player_id: str) -> int:
        player_state = self._state_for(player_id)
        return player_state.current_target if player_state else 0

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
    # INTERNAL
    # =========================================================

    def _win_leg(self, player_state: AroundTheClockPlayerState):
        player_state.legs_won += 1
        self.progress.leg_finished = True
        self.progress.leg_winner_id = player_state.player_id
        logger.debug("around the clock: %s finished", player_state.player_id)

        if player_state.legs_won >= self.config.legs:
            self.progress.finished = True
            self.progress.winner_id = player_state.player_id

    def _end_visit(self, player_state: AroundTheClockPlayerState, skip_advance: bool = False):
        self.visits.end_visit(
            skip_advance=skip_advance, score_after=player_state.current_target
        )

    def _current_state(self) -> AroundTheClockPlayerState:
        return self.player_states[self.visits.current_player_index]

    def _state_for(self, player_id: str) -> Optional[AroundTheClockPlayerState]:
        for player_state in self.player_states:
            if player_state.player_id == player_id:
                return player_state
        return None
