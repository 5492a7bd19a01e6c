import logging
from typing import Dict, List, Optional, Tuple

from dartcounter.config import CRICKET_NUMBERS
from dartcounter.darts import is_valid_dart
from dartcounter.game import find_player, validate_players
from dartcounter.models import (
    CricketConfig,
    CricketDartSnapshot,
    CricketPlayerState,
    Dart,
    LegProgress,
    Player,
)
from dartcounter.visit_tracker import VisitTracker


logger = logging.getLogger(__name__)


def _empty_marks() -> Dict[int, int]:
    return {number: 0 for number in CRICKET_NUMBERS}


def to_cricket_hit(dart: Dart) -> Optional[Tuple[int, int]]:
    """
    Map a dart to (cricket number, marks). Bulls count one mark for 25 and
    two for 50; anything off 15-20 / bull is no hit.
    """
    if not is_valid_dart(dart):
        return None
    if dart.segment == 50:
        return 25, 2
    if dart.segment == 25:
        return 25, 1
    if dart.segment in CRICKET_NUMBERS:
        return dart.segment, dart.multiplier
    return None


class CricketGame:
    """
    Cricket: close 15-20 and bull, score on numbers opponents still have open.

    Marks are stored as a running total per number (may exceed
    marks_to_close); a number counts as closed at >= marks_to_close.
    Undo restores a full per-dart copy of the thrower's marks and points.
    """

    game_type = "cricket"

    def __init__(self, players: List[Player], config: CricketConfig):
        self.players = validate_players(players)
        self.config = config

        self.player_states = [
            CricketPlayerState(player_id=p.id, marks=_empty_marks())
            for p in self.players
        ]
        self.visits = VisitTracker(self.players)
        self.progress = LegProgress()
        self.dart_snapshots: List[CricketDartSnapshot] = []

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
            CricketDartSnapshot(
                player_id=player_state.player_id,
                marks=dict(player_state.marks),
                points=player_state.points,
                legs_won=player_state.legs_won,
            )
        )
        self.visits.add_dart(dart)

        hit = to_cricket_hit(dart)
        if hit is not None:
            self._apply_hit(player_state, *hit)

        if self._has_closed_all(player_state) and self._has_highest_or_tied_score(player_state):
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
        player_state.marks = dict(snapshot.marks)
        player_state.points = snapshot.points
        player_state.legs_won = snapshot.legs_won

        self.progress.leg_finished = False
        self.progress.finished = False
        self.progress.winner_id = None
        self.progress.leg_winner_id = None
        return True

    def next_leg(self):
        if not self.progress.leg_finished or self.progress.finished:
            return

        self.progress.current_leg += 1
        self.progress.leg_starting_player_index = (
            self.progress.leg_starting_player_index + 1
        ) % len(self.players)

        for player_state in self.player_states:
            player_state.marks = _empty_marks()
            player_state.points = 0

        self.visits.reset_all(self.progress.leg_starting_player_index)
        self.dart_snapshots = []
        self.progress.leg_finished = False
        self.progress.leg_winner_id = None
        logger.debug("cricket leg %d started", self.progress.current_leg)

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

    def get_darts_remaining(self) -> int:
        return self.visits.darts_remaining()

    def get_cricket_numbers(self) -> List[int]:
        return list(CRICKET_NUMBERS)

    def get_player_marks(self, player_id: str) -> Dict[int, int]:
        player_state = self._state_for(player_id)
        if player_state is None:
            return {}
        return dict(player_state.marks)

    def get_player_score(self, player_id: str) -> int:
        player_state = self._state_for(player_id)
        return player_state.points if player_state else 0

    def get_player_legs_won(self, player_id: str) -> int:
        player_state = self._state_for(player_id)
        return player_state.legs_won if player_state else 0

    def is_closed(self, player_id: str, number: int) -> bool:
        player_state = self._state_for(player_id)
        if player_state is None:
            return False
        return player_state.marks.get(number, 0) >= self.config.marks_to_close

    # =========================================================
    # RULES
    # =========================================================

    def _apply_hit(self, player_state: CricketPlayerState, number: int, marks: int):
        current = player_state.marks[number]
        marks_to_close = self.config.marks_to_close

        if current < marks_to_close:
            scoring_marks = max(0, current + marks - marks_to_close)
        else:
            scoring_marks = marks

        if scoring_marks > 0 and not self._all_opponents_closed(player_state, number):
            player_state.points += scoring_marks * number

        player_state.marks[number] = current + marks

    def _all_opponents_closed(self, player_state: CricketPlayerState, number: int) -> bool:
        return all(
            other.marks[number] >= self.config.marks_to_close
            for other in self.player_states
            if other.player_id != player_state.player_id
        )

    def _has_closed_all(self, player_state: CricketPlayerState) -> bool:
        return all(
            player_state.marks[number] >= self.config.marks_to_close
            for number in CRICKET_NUMBERS
        )

    def _has_highest_or_tied_score(self, player_state: CricketPlayerState) -> bool:
        return all(player_state.points >= other.points for other in self.player_states)

    def _win_leg(self, player_state: CricketPlayerState):
        player_state.legs_won += 1
        self.progress.leg_finished = True
        self.progress.leg_winner_id = player_state.player_id
        logger.debug(
            "cricket: %s wins leg %d", player_state.player_id, self.progress.current_leg
        )

        if player_state.legs_won >= self.config.legs:
            self.progress.finished = True
            self.progress.winner_id = player_state.player_id

    # =========================================================
    # VISITS
    # =========================================================

    def _end_visit(self, player_state: CricketPlayerState, skip_advance: bool = False):
        self.visits.end_visit(skip_advance=skip_advance, score_after=player_state.points)

    def _current_state(self) -> CricketPlayerState:
        return self.player_states[self.visits.current_player_index]

    def _state_for(self, player_id: str) -> Optional[CricketPlayerState]:
        for player_state in self.player_states:
            if player_state.player_id == player_id:
                return player_state
        return None
