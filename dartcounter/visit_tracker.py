from typing import List, Optional

from dartcounter.config import DARTS_PER_VISIT
from dartcounter.darts import get_dart_value
from dartcounter.models import Dart, Player, TrackedVisit, Visit


class VisitTracker:
    """
    Turn bookkeeping shared by every game.

    Responsibilities:
    - Hold the in-progress visit (up to 3 darts)
    - Rotate the current player round-robin
    - Keep finished visits so undo can step back across a turn
    """

    def __init__(self, players: List[Player], starting_player_index: int = 0):
        self.players = players
        self.current_player_index = starting_player_index
        self.current_visit = Visit()
        self.visit_history: List[TrackedVisit] = []

    # =========================================================
    # STATE
    # =========================================================

    def get_current_player(self) -> Player:
        return self.players[self.current_player_index]

    def darts_remaining(self) -> int:
        return DARTS_PER_VISIT - len(self.current_visit.darts)

    def is_visit_complete(self) -> bool:
        return len(self.current_visit.darts) >= DARTS_PER_VISIT

    # =========================================================
    # MUTATION
    # =========================================================

    def add_dart(self, dart: Dart) -> bool:
        if self.is_visit_complete():
            return False

        self.current_visit.darts.append(dart)
        self.current_visit.total += get_dart_value(dart)
        return True

    def end_visit(
        self,
        busted: bool = False,
        skip_advance: bool = False,
        score_after: Optional[int] = None,
    ):
        """
        Push the current visit to history and start an empty one.
        The player only rotates when skip_advance is False.
        """
        self.current_visit.busted = busted
        self.visit_history.append(
            TrackedVisit(
                player_id=self.get_current_player().id,
                visit=self.current_visit.copy(),
                score_after=score_after,
            )
        )

        if not skip_advance:
            self.current_player_index = (self.current_player_index + 1) % len(self.players)

        self.current_visit = Visit()

    # =========================================================
    # UNDO
    # =========================================================

    def undo_last_dart(self) -> Optional[Dart]:
        if not self.current_visit.darts:
            return None

        dart = self.current_visit.darts.pop()
        self.current_visit.total -= get_dart_value(dart)
        return dart

    def undo_previous_visit(self) -> Optional[TrackedVisit]:
        """
        Step back into the last finished visit: its owner becomes the
        current player again and the visit is reopened without its last dart.
        """
        if not self.visit_history:
            return None

        last = self.visit_history.pop()

        for index, player in enumerate(self.players):
            if player.id == last.player_id:
                self.current_player_index = index
                break

        restored = list(last.visit.darts[:-1])
        self.current_visit = Visit(
            darts=restored,
            total=sum(get_dart_value(d) for d in restored),
        )
        return last

    # =========================================================
    # RESET
    # =========================================================

    def reset_visit(self):
        self.current_visit = Visit()

    def reset_all(self, starting_player_index: int):
        self.current_player_index = starting_player_index
        self.current_visit = Visit()
        self.visit_history = []
