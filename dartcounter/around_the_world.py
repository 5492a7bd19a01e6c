import logging
from typing import List, Optional

from dartcounter.config import AROUND_THE_WORLD_SEQUENCE
from dartcounter.darts import is_valid_dart
from dartcounter.game import find_player, validate_players
from dartcounter.models import (
    AroundTheWorldConfig,
    AroundTheWorldDartSnapshot,
    AroundTheWorldPlayerState,
    Dart,
    LegProgress,
    Player,
)
from dartcounter.visit_tracker import VisitTracker


logger = logging.getLogger(__name__)


def _is_target_hit(dart: Dart, target: int) -> bool:
    if not is_valid_dart(dart):
        return False
    if target == 25:
        return dart.segment in (25, 50)
    return dart.segment == target


class AroundTheWorldGame:
    """
    Work through 1-20 then the bull. A hit moves the player on by its
    multiplier: singles 1, doubles 2, triples 3.
    """

    game_type = "around-the-world"

    def __init__(self, players: List[Player], config: AroundTheWorldConfig):
        self.players = validate_players(players)
        self.config = config

        self.player_states = [
            AroundTheWorldPlayerState(player_id=p.id) for p in self.players
        ]
        self.visits = VisitTracker(self.players)
        self.progress = LegProgress()
        self.dart_snapshots: List[AroundTheWorldDartSnapshot] = []

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
            AroundTheWorldDartSnapshot(
                player_id=player_state.player_id,
                previous_index=player_state.sequence_index,
            )
        )
        self.visits.add_dart(dart)

        sequence_length = len(AROUND_THE_WORLD_SEQUENCE)
        target = AROUND_THE_WORLD_SEQUENCE[player_state.sequence_index]

        if _is_target_hit(dart, target):
            player_state.sequence_index = min(
                player_state.sequence_index + dart.multiplier, sequence_length
            )

            if player_state.sequence_index >= sequence_length:
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
        player_state.sequence_index = snapshot.previous_index

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
            player_state.sequence_index = 0

        self.visits.reset_all(self.progress.leg_starting_player_index)
        self.dart_snapshots = []
        self.progress.leg_finished = False
        self.progress.leg_winner_id = None
        logger.debug("around the world leg %d started", self.progress.current_leg)

    # =========================================================
    # QUERIES
    # =========================================================

    def get_sequence_length(self) -> int:
        return len(AROUND_THE_WORLD_SEQUENCE)

    def get_player_target(self, player_id: str) -> int:
        """Next number to hit; 0 once the sequence is complete."""
        player_state = self._state_for(player_id)
        if player_state is None:
            return 1
        if player_state.sequence_index >= len(AROUND_THE_WORLD_SEQUENCE):
            return 0
        return AROUND_THE_WORLD_SEQUENCE[player_state.sequence_index]

    def get_player_score(self, player_id: str) -> int:
        player_state = self._state_for(player_id)
        return player_state.sequence_index if player_state else 0

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

    def _win_leg(self, player_state: AroundTheWorldPlayerState):
        player_state.legs_won += 1
        self.progress.leg_finished = True
        self.progress.leg_winner_id = player_state.player_id
        logger.debug("around the world: %s finished", player_state.player_id)

        if player_state.legs_won >= self.config.legs:
            self.progress.finished = True
            self.progress.winner_id = player_state.player_id

    def _end_visit(self, player_state: AroundTheWorldPlayerState, skip_advance: bool = False):
        self.visits.end_visit(
            skip_advance=skip_advance, score_after=player_state.sequence_index
        )

    def _current_state(self) -> AroundTheWorldPlayerState:
        return self.player_states[self.visits.current_player_index]

    def _state_for(self, player_id: str) -> Optional[AroundTheWorldPlayerState]:
        for player_state in self.player_states:
            if player_state.player_id == player_id:
                return player_state
        return None
