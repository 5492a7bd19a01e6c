from typing import Any, Dict, List, Optional

from dartcounter.game import Game
from dartcounter.models import Dart, GameEvent, GameSnapshot, Player
from dartcounter.registry import GameRegistry, game_registry


EVENT_ACTIONS = ("throw", "next_leg")


def parse_event(raw: Dict[str, Any]) -> GameEvent:
    """
    Event dicts are {"segment": int, "multiplier": int} for a throw or
    {"action": "next_leg"}.
    """
    if not isinstance(raw, dict):
        raise ValueError("invalid event format")

    action = raw.get("action", "throw")
    if action not in EVENT_ACTIONS:
        raise ValueError(f"invalid event action: {action}")

    if action == "next_leg":
        return GameEvent(action="next_leg")

    if "segment" not in raw:
        raise ValueError("invalid event format")

    try:
        dart = Dart(
            segment=int(raw["segment"]),
            multiplier=int(raw.get("multiplier", 1)),
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid dart in event: {raw}") from e

    return GameEvent(action="throw", dart=dart)


def event_to_dict(event: GameEvent) -> Dict[str, Any]:
    if event.action == "next_leg":
        return {"action": "next_leg"}
    return {"segment": event.dart.segment, "multiplier": event.dart.multiplier}


def is_effective_event(game: Game, event: GameEvent) -> bool:
    """Whether the game would act on the event rather than ignore it."""
    if event.action == "next_leg":
        return game.is_leg_finished() and not game.is_finished()
    return not (game.is_leg_finished() or game.is_finished())


def apply_event(game: Game, event: GameEvent):
    if event.action == "next_leg":
        game.next_leg()
    else:
        game.record_throw(event.dart)


def build_snapshot(game: Game, index: int) -> GameSnapshot:
    winner = game.get_winner()
    leg_winner = game.get_leg_winner()

    return GameSnapshot(
        index=index,
        leg=game.get_current_leg(),
        current_player_id=game.get_current_player().id,
        scores={p.id: game.get_player_score(p.id) for p in game.players},
        darts_remaining=game.get_darts_remaining(),
        leg_finished=game.is_leg_finished(),
        finished=game.is_finished(),
        winner_id=winner.id if winner else None,
        leg_winner_id=leg_winner.id if leg_winner else None,
    )


def build_timeline(
    game_type: str,
    players: List[Player],
    events: List[GameEvent],
    config=None,
    registry: Optional[GameRegistry] = None,
) -> List[GameSnapshot]:
    """
    Replays events on a fresh game and returns one snapshot per effective
    event. Does NOT mutate external state.
    """
    game = (registry or game_registry).create_game(game_type, players, config)

    timeline: List[GameSnapshot] = []
    for event in events:
        if not is_effective_event(game, event):
            continue
        apply_event(game, event)
        timeline.append(build_snapshot(game, len(timeline) + 1))

    return timeline
