from typing import List, Optional, Protocol, runtime_checkable

from dartcounter.exceptions import GameConfigError
from dartcounter.models import Dart, Player


@runtime_checkable
class Game(Protocol):
    """
    Contract every game variant satisfies. Variants share no base class;
    they conform structurally.
    """

    game_type: str
    players: List[Player]

    def record_throw(self, dart: Dart) -> None: ...

    def undo_last_throw(self) -> bool: ...

    def is_finished(self) -> bool: ...

    def is_leg_finished(self) -> bool: ...

    def get_winner(self) -> Optional[Player]: ...

    def get_leg_winner(self) -> Optional[Player]: ...

    def get_current_player(self) -> Player: ...

    def get_player_score(self, player_id: str) -> int: ...

    def get_current_leg(self) -> int: ...

    def get_darts_remaining(self) -> int: ...

    def next_leg(self) -> None: ...


def validate_players(players: List[Player]) -> List[Player]:
    if not players:
        raise GameConfigError("At least one player is required")

    ids = [p.id for p in players]
    if len(set(ids)) != len(ids):
        raise GameConfigError("Player ids must be unique")

    return list(players)


def find_player(players: List[Player], player_id: Optional[str]) -> Optional[Player]:
    if player_id is None:
        return None
    for player in players:
        if player.id == player_id:
            return player
    return None
