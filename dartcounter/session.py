import logging
from copy import deepcopy
from typing import Any, Dict, List, Optional

from dartcounter.game import Game
from dartcounter.models import Dart, GameEvent, GameSnapshot, Player
from dartcounter.registry import GameRegistry, game_registry
from dartcounter.timeline import (
    apply_event,
    build_snapshot,
    event_to_dict,
    is_effective_event,
    parse_event,
)


logger = logging.getLogger(__name__)


class GameSession:
    """
    Single local game session.

    Responsibilities:
    - Manage one game instance built through the registry
    - Record live throws and replay event lists (atomic)
    - Store timeline snapshots
    - Export the raw event log
    - Hand finished matches to a statistics recorder

    Recorders are append-only. Undoing a finished match re-arms the hook
    and the match is handed over again when it finishes; the earlier
    result stays with the recorder.
    """

    def __init__(
        self,
        game_type: str,
        players: List[Player],
        config=None,
        registry: Optional[GameRegistry] = None,
        recorder=None,
    ):
        self._registry = registry or game_registry
        self._game_type = game_type
        self._players = list(players)
        self._config = config
        self._recorder = recorder

        self._game = self._new_game()
        self._timeline: List[GameSnapshot] = []
        self._events: List[GameEvent] = []
        self._stats_recorded = False

    @property
    def game(self) -> Game:
        return self._game

    # ---------------------------------------------------------
    # Live play
    # ---------------------------------------------------------

    def record_throw(self, dart: Dart) -> GameSnapshot:
        return self._apply(GameEvent(action="throw", dart=dart))

    def next_leg(self) -> GameSnapshot:
        return self._apply(GameEvent(action="next_leg"))

    def undo_last_throw(self) -> bool:
        if not self._game.undo_last_throw():
            return False

        # Game undo never crosses a leg boundary, so the newest entry is the throw
        self._events.pop()
        self._timeline.pop()

        if self._stats_recorded and not self._game.is_finished():
            self._stats_recorded = False
            logger.info("%s match reopened by undo", self._game_type)
        return True

    # ---------------------------------------------------------
    # Bulk replay
    # ---------------------------------------------------------

    def load_events(self, events: List[Dict[str, Any]]) -> List[GameSnapshot]:
        """
        Bulk load events from a list of dicts.
        Atomic: if any event fails -> no state mutation.
        """
        if not isinstance(events, list):
            raise ValueError("events must be a list")

        # Convert first (validation stage)
        parsed = [parse_event(e) for e in events]

        # Prepare temp game for atomic replay
        temp_game = self._new_game()
        temp_timeline: List[GameSnapshot] = []
        temp_events: List[GameEvent] = []

        for event in parsed:
            if not is_effective_event(temp_game, event):
                continue
            apply_event(temp_game, event)
            temp_events.append(event)
            temp_timeline.append(build_snapshot(temp_game, len(temp_timeline) + 1))

        # If everything succeeds -> commit
        self._game = temp_game
        self._timeline = temp_timeline
        self._events = temp_events
        self._stats_recorded = False
        self._maybe_record_stats()

        logger.info(
            "loaded %d of %d events into %s session",
            len(temp_events),
            len(parsed),
            self._game_type,
        )
        return deepcopy(self._timeline)

    # ---------------------------------------------------------
    # Queries
    # ---------------------------------------------------------

    def get_snapshot(self) -> GameSnapshot:
        if not self._timeline:
            raise RuntimeError("No events recorded")

        return self._timeline[-1]

    def get_timeline(self) -> List[GameSnapshot]:
        return deepcopy(self._timeline)

    def export_events(self) -> List[Dict[str, Any]]:
        return [event_to_dict(e) for e in self._events]

    def reset(self):
        self._game = self._new_game()
        self._timeline = []
        self._events = []
        self._stats_recorded = False

    # ---------------------------------------------------------
    # Internal
    # ---------------------------------------------------------

    def _new_game(self) -> Game:
        return self._registry.create_game(self._game_type, self._players, self._config)

    def _apply(self, event: GameEvent) -> GameSnapshot:
        if not is_effective_event(self._game, event):
            logger.debug("ignored %s event", event.action)
            return build_snapshot(self._game, len(self._timeline))

        apply_event(self._game, event)
        snapshot = build_snapshot(self._game, len(self._timeline) + 1)

        self._events.append(event)
        self._timeline.append(snapshot)
        self._maybe_record_stats()
        return snapshot

    def _maybe_record_stats(self):
        if self._stats_recorded or not self._game.is_finished():
            return

        self._stats_recorded = True
        winner = self._game.get_winner()
        logger.info(
            "%s match finished, winner %s",
            self._game_type,
            winner.name if winner else None,
        )

        definition = self._registry.get(self._game_type)
        if self._recorder is None or definition is None or definition.record_stats is None:
            return
        definition.record_stats(self._game, self._recorder)
