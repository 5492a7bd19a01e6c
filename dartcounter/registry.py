"""
Game registry: maps game-type ids to factories and selection metadata.

The module-level `game_registry` comes with all built-in variants
registered and is the normal way to obtain a game instance:

    game = game_registry.create_game("x01", players, X01Config(variant=301))
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from dartcounter.around_the_clock import AroundTheClockGame
from dartcounter.around_the_world import AroundTheWorldGame
from dartcounter.config import DEFAULT_MAX_PLAYERS
from dartcounter.cricket import CricketGame
from dartcounter.exceptions import GameConfigError, UnknownGameTypeError
from dartcounter.game import Game
from dartcounter.halve_it import HalveItGame
from dartcounter.models import (
    AroundTheClockConfig,
    AroundTheWorldConfig,
    CricketConfig,
    HalveItConfig,
    Player,
    ShanghaiConfig,
    X01Config,
)
from dartcounter.shanghai import ShanghaiGame
from dartcounter.statistics import record_x01_stats
from dartcounter.x01 import X01Game


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameDefinition:
    id: str
    name: str
    description: str
    min_players: int
    max_players: int
    config_type: Type
    factory: Callable[[List[Player], Any], Game]
    record_stats: Optional[Callable[[Game, Any], None]] = None

    @property
    def default_config(self):
        return self.config_type()


class GameRegistry:

    def __init__(self):
        self._games: Dict[str, GameDefinition] = {}

    def register(self, definition: GameDefinition):
        if definition.id in self._games:
            logger.warning("Game %r is already registered. Overwriting.", definition.id)
        self._games[definition.id] = definition

    def get(self, game_id: str) -> Optional[GameDefinition]:
        return self._games.get(game_id)

    def get_all(self) -> List[GameDefinition]:
        return list(self._games.values())

    def unregister(self, game_id: str):
        self._games.pop(game_id, None)

    def has(self, game_id: str) -> bool:
        return game_id in self._games

    def create_game(self, game_id: str, players: List[Player], config=None) -> Game:
        """
        Build a game instance. `config` may be the variant's config object,
        a plain dict of its fields, or None for the defaults.
        """
        definition = self._games.get(game_id)
        if definition is None:
            raise UnknownGameTypeError(f"Unknown game type: {game_id}")

        if not definition.min_players <= len(players) <= definition.max_players:
            raise GameConfigError(
                f"{definition.name} needs {definition.min_players}-"
                f"{definition.max_players} players, got {len(players)}"
            )

        if config is None:
            config = definition.default_config
        elif isinstance(config, dict):
            config = definition.config_type.from_dict(config)

        return definition.factory(players, config)


BUILTIN_GAMES = (
    GameDefinition(
        id=X01Game.game_type,
        name="X01",
        description="Classic countdown (301/501)",
        min_players=1,
        max_players=DEFAULT_MAX_PLAYERS,
        config_type=X01Config,
        factory=X01Game,
        record_stats=record_x01_stats,
    ),
    GameDefinition(
        id=CricketGame.game_type,
        name="Cricket",
        description="Close numbers 15-20 and Bull, score on opponents",
        min_players=2,
        max_players=DEFAULT_MAX_PLAYERS,
        config_type=CricketConfig,
        factory=CricketGame,
    ),
    GameDefinition(
        id=AroundTheClockGame.game_type,
        name="Around the Clock",
        description="Hit 1-20 in sequence, first to finish wins",
        min_players=1,
        max_players=DEFAULT_MAX_PLAYERS,
        config_type=AroundTheClockConfig,
        factory=AroundTheClockGame,
    ),
    GameDefinition(
        id=AroundTheWorldGame.game_type,
        name="Around the World",
        description="Hit 1-20 then Bull; doubles/triples skip ahead",
        min_players=1,
        max_players=DEFAULT_MAX_PLAYERS,
        config_type=AroundTheWorldConfig,
        factory=AroundTheWorldGame,
    ),
    GameDefinition(
        id=ShanghaiGame.game_type,
        name="Shanghai",
        description="Target each number in turn; hit single+double+triple to win instantly",
        min_players=2,
        max_players=DEFAULT_MAX_PLAYERS,
        config_type=ShanghaiConfig,
        factory=ShanghaiGame,
    ),
    GameDefinition(
        id=HalveItGame.game_type,
        name="Halve It",
        description="Hit round targets or get your score halved",
        min_players=1,
        max_players=DEFAULT_MAX_PLAYERS,
        config_type=HalveItConfig,
        factory=HalveItGame,
    ),
)


def register_builtin_games(registry: GameRegistry):
    for definition in BUILTIN_GAMES:
        registry.register(definition)


game_registry = GameRegistry()
register_builtin_games(game_registry)
