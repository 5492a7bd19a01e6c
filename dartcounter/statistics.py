import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from dartcounter.config import VISIT_MILESTONES
from dartcounter.models import CompletedLeg, TrackedVisit


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class X01PlayerStats:
    legs_played: int = 0
    legs_won: int = 0
    total_darts: int = 0
    total_points_scored: int = 0
    average: float = 0.0
    darts_per_leg: Optional[float] = None
    highest_visit: int = 0
    best_leg: Optional[int] = None
    visits_60_plus: int = 0
    visits_100_plus: int = 0
    visits_140_plus: int = 0
    visits_180: int = 0


@dataclass(frozen=True)
class X01AllTimePlayerStats:
    player_name: str
    game_type: str = "x01"
    games_played: int = 0
    games_won: int = 0
    legs_played: int = 0
    legs_won: int = 0
    total_darts: int = 0
    total_points_scored: int = 0
    highest_visit: int = 0
    best_leg: Optional[int] = None
    visits_60_plus: int = 0
    visits_100_plus: int = 0
    visits_140_plus: int = 0
    visits_180: int = 0
    total_darts_in_won_legs: float = 0
    won_leg_count: int = 0

    @property
    def average(self) -> float:
        if self.total_darts == 0:
            return 0.0
        return self.total_points_scored / self.total_darts * 3

    @property
    def darts_per_leg(self) -> Optional[float]:
        if self.won_leg_count == 0:
            return None
        return self.total_darts_in_won_legs / self.won_leg_count


# =============================================================================
# Per-match
# =============================================================================

def _count_darts(visits: List[TrackedVisit]) -> int:
    return sum(len(v.visit.darts) for v in visits)


def _count_points(visits: List[TrackedVisit], game_variant: int, is_leg_winner: bool) -> int:
    # A won leg is worth exactly the starting score
    if is_leg_winner:
        return game_variant
    return sum(v.visit.total for v in visits if not v.visit.busted)


def calculate_x01_player_stats(
    player_id: str,
    completed_legs: List[CompletedLeg],
    game_variant: int,
) -> X01PlayerStats:
    """
    Per-match statistics for one player from archived X01 legs.
    Busted visits score nothing and do not count toward milestones.
    """
    total_darts = 0
    total_points = 0
    highest_visit = 0
    best_leg: Optional[int] = None
    milestones = {threshold: 0 for threshold in VISIT_MILESTONES}
    legs_won = 0
    darts_in_won_legs = 0

    for leg in completed_legs:
        player_visits = [v for v in leg.visit_history if v.player_id == player_id]
        won = leg.winner_id == player_id
        leg_darts = _count_darts(player_visits)

        total_darts += leg_darts
        total_points += _count_points(player_visits, game_variant, won)

        if won:
            legs_won += 1
            darts_in_won_legs += leg_darts
            if best_leg is None or leg_darts < best_leg:
                best_leg = leg_darts

        for record in player_visits:
            if record.visit.busted:
                continue
            visit_total = record.visit.total
            highest_visit = max(highest_visit, visit_total)
            for threshold in milestones:
                if visit_total >= threshold:
                    milestones[threshold] += 1

    return X01PlayerStats(
        legs_played=len(completed_legs),
        legs_won=legs_won,
        total_darts=total_darts,
        total_points_scored=total_points,
        average=(total_points / total_darts * 3) if total_darts else 0.0,
        darts_per_leg=(darts_in_won_legs / legs_won) if legs_won else None,
        highest_visit=highest_visit,
        best_leg=best_leg,
        visits_60_plus=milestones[60],
        visits_100_plus=milestones[100],
        visits_140_plus=milestones[140],
        visits_180=milestones[180],
    )


# =============================================================================
# All-time
# =============================================================================

def create_empty_x01_stats(player_name: str) -> X01AllTimePlayerStats:
    return X01AllTimePlayerStats(player_name=player_name)


def _min_nullable(a: Optional[int], b: Optional[int]) -> Optional[int]:
    if a is None:
        return b
    if b is None:
        return a
    return min(a, b)


def merge_x01_stats(
    existing: X01AllTimePlayerStats,
    game_stats: X01PlayerStats,
    won_match: bool,
) -> X01AllTimePlayerStats:
    darts_in_won_legs = (
        game_stats.darts_per_leg * game_stats.legs_won
        if game_stats.darts_per_leg is not None
        else 0
    )
    return replace(
        existing,
        games_played=existing.games_played + 1,
        games_won=existing.games_won + (1 if won_match else 0),
        legs_played=existing.legs_played + game_stats.legs_played,
        legs_won=existing.legs_won + game_stats.legs_won,
        total_darts=existing.total_darts + game_stats.total_darts,
        total_points_scored=existing.total_points_scored + game_stats.total_points_scored,
        highest_visit=max(existing.highest_visit, game_stats.highest_visit),
        best_leg=_min_nullable(existing.best_leg, game_stats.best_leg),
        visits_60_plus=existing.visits_60_plus + game_stats.visits_60_plus,
        visits_100_plus=existing.visits_100_plus + game_stats.visits_100_plus,
        visits_140_plus=existing.visits_140_plus + game_stats.visits_140_plus,
        visits_180=existing.visits_180 + game_stats.visits_180,
        total_darts_in_won_legs=existing.total_darts_in_won_legs + darts_in_won_legs,
        won_leg_count=existing.won_leg_count + game_stats.legs_won,
    )


class AllTimeStatistics:
    """
    In-memory all-time X01 statistics keyed by player name.

    Accepts finished matches through record_game_stats (the recorder
    signature the registry hooks call). Storage is the caller's business.
    """

    def __init__(self):
        self._stats: Dict[str, X01AllTimePlayerStats] = {}

    def record_game_stats(
        self,
        game_type: str,
        player_names: List[str],
        completed_legs: List[CompletedLeg],
        player_id_to_name: Dict[str, str],
        game_variant: int,
        match_winner_name: Optional[str],
    ):
        if not completed_legs:
            return

        name_to_id = {name: pid for pid, name in player_id_to_name.items()}

        for player_name in player_names:
            player_id = name_to_id.get(player_name)
            if player_id is None:
                continue

            game_stats = calculate_x01_player_stats(player_id, completed_legs, game_variant)
            existing = self._stats.get(player_name) or create_empty_x01_stats(player_name)
            self._stats[player_name] = merge_x01_stats(
                existing, game_stats, won_match=(match_winner_name == player_name)
            )

        logger.debug("recorded %s stats for %s", game_type, ", ".join(player_names))

    def get_player_stats(self, player_name: str) -> Optional[X01AllTimePlayerStats]:
        return self._stats.get(player_name)

    def get_all(self) -> List[X01AllTimePlayerStats]:
        return list(self._stats.values())

    def reset_player_stats(self, player_name: str) -> bool:
        return self._stats.pop(player_name, None) is not None


def record_x01_stats(game, recorder):
    """Registry hook: hand a finished X01 match to a statistics recorder."""
    completed_legs = game.get_all_completed_legs()
    if not completed_legs:
        return

    winner = game.get_winner()
    recorder.record_game_stats(
        "x01",
        [p.name for p in game.players],
        completed_legs,
        {p.id: p.name for p in game.players},
        game.config.variant,
        winner.name if winner else None,
    )
