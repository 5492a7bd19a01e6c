from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from dartcounter.config import (
    DEFAULT_LEGS,
    HALVE_IT_TARGET_KINDS,
    OUT_RULES,
    X01_VARIANTS,
)
from dartcounter.exceptions import GameConfigError


# --- DARTS & VISITS ---

@dataclass(frozen=True)
class Dart:
    segment: int
    multiplier: int = 1


@dataclass
class Visit:
    darts: List[Dart] = field(default_factory=list)
    total: int = 0
    busted: bool = False

    def copy(self) -> "Visit":
        return Visit(darts=list(self.darts), total=self.total, busted=self.busted)


@dataclass(frozen=True)
class Player:
    id: str
    name: str


@dataclass
class TrackedVisit:
    player_id: str
    visit: Visit
    score_after: Optional[int] = None


@dataclass
class CompletedLeg:
    leg_number: int
    winner_id: Optional[str]
    visit_history: List[TrackedVisit] = field(default_factory=list)


@dataclass
class LegProgress:
    current_leg: int = 1
    leg_starting_player_index: int = 0
    leg_finished: bool = False
    finished: bool = False
    winner_id: Optional[str] = None
    leg_winner_id: Optional[str] = None


@dataclass(frozen=True)
class CheckoutSuggestion:
    darts: Tuple[Dart, ...]
    description: str


# --- CONFIGS ---

def _check_legs(legs: int):
    if legs < 1:
        raise GameConfigError("legs must be at least 1")


@dataclass(frozen=True)
class X01Config:
    variant: int = 501
    out_rule: str = "double"
    legs: int = DEFAULT_LEGS

    def __post_init__(self):
        if self.variant not in X01_VARIANTS:
            raise GameConfigError(f"Unsupported X01 variant: {self.variant}")
        if self.out_rule not in OUT_RULES:
            raise GameConfigError(f"Unsupported out rule: {self.out_rule}")
        _check_legs(self.legs)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "X01Config":
        return X01Config(
            variant=int(d.get("variant", 501)),
            out_rule=str(d.get("out_rule", "double")),
            legs=int(d.get("legs", DEFAULT_LEGS)),
        )


@dataclass(frozen=True)
class CricketConfig:
    marks_to_close: int = 3
    legs: int = DEFAULT_LEGS

    def __post_init__(self):
        if self.marks_to_close < 1:
            raise GameConfigError("marks_to_close must be at least 1")
        _check_legs(self.legs)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "CricketConfig":
        return CricketConfig(
            marks_to_close=int(d.get("marks_to_close", 3)),
            legs=int(d.get("legs", DEFAULT_LEGS)),
        )


@dataclass(frozen=True)
class AroundTheClockConfig:
    includes_bull: bool = False
    doubles_advance_extra: bool = False
    legs: int = DEFAULT_LEGS

    def __post_init__(self):
        _check_legs(self.legs)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "AroundTheClockConfig":
        return AroundTheClockConfig(
            includes_bull=bool(d.get("includes_bull", False)),
            doubles_advance_extra=bool(d.get("doubles_advance_extra", False)),
            legs=int(d.get("legs", DEFAULT_LEGS)),
        )


@dataclass(frozen=True)
class AroundTheWorldConfig:
    legs: int = DEFAULT_LEGS

    def __post_init__(self):
        _check_legs(self.legs)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "AroundTheWorldConfig":
        return AroundTheWorldConfig(legs=int(d.get("legs", DEFAULT_LEGS)))


@dataclass(frozen=True)
class ShanghaiConfig:
    rounds: int = 7
    start_number: int = 1
    legs: int = DEFAULT_LEGS

    def __post_init__(self):
        if self.rounds < 1:
            raise GameConfigError("rounds must be at least 1")
        if not 1 <= self.start_number <= 20:
            raise GameConfigError("start_number must be between 1 and 20")
        if self.start_number + self.rounds - 1 > 20:
            raise GameConfigError("last round target must not be above 20")
        _check_legs(self.legs)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ShanghaiConfig":
        return ShanghaiConfig(
            rounds=int(d.get("rounds", 7)),
            start_number=int(d.get("start_number", 1)),
            legs=int(d.get("legs", DEFAULT_LEGS)),
        )


@dataclass(frozen=True)
class HalveItTarget:
    """
    One Halve It round target.

    kind is "number" (value required), "double", "triple" or "bull".
    """
    kind: str
    value: Optional[int] = None
    label: str = ""

    def __post_init__(self):
        if self.kind not in HALVE_IT_TARGET_KINDS:
            raise GameConfigError(f"Unknown Halve It target kind: {self.kind}")
        if self.kind == "number" and self.value is None:
            raise GameConfigError("number targets need a value")

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "HalveItTarget":
        value = d.get("value")
        return HalveItTarget(
            kind=str(d["kind"]),
            value=(int(value) if value is not None else None),
            label=str(d.get("label", "")),
        )


DEFAULT_HALVE_IT_TARGETS: Tuple[HalveItTarget, ...] = (
    HalveItTarget("number", 20, "20"),
    HalveItTarget("number", 19, "19"),
    HalveItTarget("number", 18, "18"),
    HalveItTarget("double", label="Doubles"),
    HalveItTarget("number", 17, "17"),
    HalveItTarget("number", 16, "16"),
    HalveItTarget("number", 15, "15"),
    HalveItTarget("triple", label="Triples"),
    HalveItTarget("number", 20, "20"),
    HalveItTarget("bull", label="Bull"),
)


@dataclass(frozen=True)
class HalveItConfig:
    targets: Tuple[HalveItTarget, ...] = DEFAULT_HALVE_IT_TARGETS
    starting_score: int = 40
    legs: int = DEFAULT_LEGS

    def __post_init__(self):
        object.__setattr__(self, "targets", tuple(self.targets))
        if not self.targets:
            raise GameConfigError("Halve It needs at least one target")
        if self.starting_score < 0:
            raise GameConfigError("starting_score must not be negative")
        _check_legs(self.legs)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "HalveItConfig":
        raw_targets = d.get("targets")
        targets = (
            tuple(HalveItTarget.from_dict(t) for t in raw_targets)
            if raw_targets is not None
            else DEFAULT_HALVE_IT_TARGETS
        )
        return HalveItConfig(
            targets=targets,
            starting_score=int(d.get("starting_score", 40)),
            legs=int(d.get("legs", DEFAULT_LEGS)),
        )


# --- PLAYER STATE ---

@dataclass
class X01PlayerState:
    player_id: str
    score: int
    legs_won: int = 0


@dataclass
class CricketPlayerState:
    player_id: str
    marks: Dict[int, int]
    points: int = 0
    legs_won: int = 0


@dataclass
class AroundTheClockPlayerState:
    player_id: str
    current_target: int = 1
    legs_won: int = 0


@dataclass
class AroundTheWorldPlayerState:
    player_id: str
    sequence_index: int = 0
    legs_won: int = 0


@dataclass
class ShanghaiPlayerState:
    player_id: str
    total_score: int = 0
    legs_won: int = 0


@dataclass
class HalveItPlayerState:
    player_id: str
    score: int
    legs_won: int = 0


# --- UNDO SNAPSHOTS (one per dart) ---

@dataclass(frozen=True)
class CricketDartSnapshot:
    player_id: str
    marks: Dict[int, int]
    points: int
    legs_won: int


@dataclass(frozen=True)
class AroundTheClockDartSnapshot:
    player_id: str
    previous_target: int


@dataclass(frozen=True)
class AroundTheWorldDartSnapshot:
    player_id: str
    previous_index: int


@dataclass(frozen=True)
class ShanghaiDartSnapshot:
    player_id: str
    previous_score: int
    round: int
    round_player_count: int


@dataclass(frozen=True)
class HalveItDartRecord:
    player_id: str
    previous_score: int
    dart_scored: int
    halving_applied: bool


# --- EVENTS & SNAPSHOTS ---

@dataclass(frozen=True)
class GameEvent:
    action: str  # "throw" or "next_leg"
    dart: Optional[Dart] = None


@dataclass(frozen=True)
class GameSnapshot:
    index: int
    leg: int
    current_player_id: str
    scores: Dict[str, int]
    darts_remaining: int
    leg_finished: bool
    finished: bool
    winner_id: Optional[str]
    leg_winner_id: Optional[str]
