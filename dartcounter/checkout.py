import logging
from typing import Dict, List, Optional, Sequence, Tuple

from dartcounter.config import MAX_CHECKOUT
from dartcounter.darts import format_dart, get_dart_value, is_double, parse_dart
from dartcounter.models import CheckoutSuggestion, Dart


logger = logging.getLogger(__name__)


SINGLES: Tuple[Dart, ...] = tuple(Dart(i, 1) for i in range(1, 21)) + (Dart(25, 1),)

# Valid double-out finishes: D1..D20 and the bull
DOUBLES: Tuple[Dart, ...] = tuple(Dart(i, 2) for i in range(1, 21)) + (Dart(50, 1),)

TRIPLES: Tuple[Dart, ...] = tuple(Dart(i, 3) for i in range(1, 21))

ALL_DARTS: Tuple[Dart, ...] = SINGLES + DOUBLES + TRIPLES

# Highest first dart first, so the search favours T20-style setups
_FIRST_DARTS_BY_VALUE: Tuple[Dart, ...] = tuple(
    sorted(ALL_DARTS, key=get_dart_value, reverse=True)
)


# Standard double-out routes, one per finishable score
COMMON_CHECKOUTS: Dict[int, str] = {
    170: "T20 T20 Bull",
    167: "T20 T19 Bull",
    164: "T20 T18 Bull",
    161: "T20 T17 Bull",
    160: "T20 T20 D20",
    158: "T20 T20 D19",
    157: "T20 T19 D20",
    156: "T20 T20 D18",
    155: "T20 T19 D19",
    154: "T20 T18 D20",
    153: "T20 T19 D18",
    152: "T20 T20 D16",
    151: "T20 T17 D20",
    150: "T20 T18 D18",
    149: "T20 T19 D16",
    148: "T20 T20 D14",
    147: "T20 T17 D18",
    146: "T20 T18 D16",
    145: "T20 T19 D14",
    144: "T20 T20 D12",
    143: "T20 T17 D16",
    142: "T20 T14 D20",
    141: "T20 T19 D12",
    140: "T20 T20 D10",
    139: "T20 T13 D20",
    138: "T20 T18 D12",
    137: "T20 T19 D10",
    136: "T20 T20 D8",
    135: "T20 T17 D12",
    134: "T20 T14 D16",
    133: "T20 T19 D8",
    132: "T20 T16 D12",
    131: "T20 T13 D16",
    130: "T20 T18 D8",
    129: "T19 T16 D12",
    128: "T18 T14 D16",
    127: "T20 T17 D8",
    126: "T19 T19 D6",
    125: "T20 T19 D4",
    124: "T20 T16 D8",
    123: "T19 T16 D9",
    122: "T18 T18 D7",
    121: "T20 T11 D14",
    120: "T20 20 D20",
    119: "T19 T12 D13",
    118: "T20 18 D20",
    117: "T20 17 D20",
    116: "T20 16 D20",
    115: "T20 15 D20",
    114: "T20 14 D20",
    113: "T20 13 D20",
    112: "T20 12 D20",
    111: "T20 11 D20",
    110: "T20 10 D20",
    109: "T20 9 D20",
    108: "T20 16 D16",
    107: "T19 10 D20",
    106: "T20 6 D20",
    105: "T20 5 D20",
    104: "T18 10 D20",
    103: "T19 6 D20",
    102: "T20 10 D16",
    101: "T17 10 D20",
    100: "T20 D20",
    99: "T19 10 D16",
    98: "T20 D19",
    97: "T19 D20",
    96: "T20 D18",
    95: "T19 D19",
    94: "T18 D20",
    93: "T19 D18",
    92: "T20 D16",
    91: "T17 D20",
    90: "T18 D18",
    89: "T19 D16",
    88: "T20 D14",
    87: "T17 D18",
    86: "T18 D16",
    85: "T19 D14",
    84: "T20 D12",
    83: "T17 D16",
    82: "T14 D20",
    81: "T19 D12",
    80: "T20 D10",
    79: "T13 D20",
    78: "T18 D12",
    77: "T19 D10",
    76: "T20 D8",
    75: "T17 D12",
    74: "T14 D16",
    73: "T19 D8",
    72: "T16 D12",
    71: "T13 D16",
    70: "T18 D8",
    69: "T19 D6",
    68: "T20 D4",
    67: "T17 D8",
    66: "T10 D18",
    65: "T19 D4",
    64: "T16 D8",
    63: "T13 D12",
    62: "T10 D16",
    61: "T15 D8",
    60: "20 D20",
    59: "19 D20",
    58: "18 D20",
    57: "17 D20",
    56: "16 D20",
    55: "15 D20",
    54: "14 D20",
    53: "13 D20",
    52: "12 D20",
    51: "11 D20",
    50: "Bull",
    49: "9 D20",
    48: "8 D20",
    47: "7 D20",
    46: "6 D20",
    45: "5 D20",
    44: "4 D20",
    43: "3 D20",
    42: "10 D16",
    41: "9 D16",
    40: "D20",
    39: "7 D16",
    38: "D19",
    37: "5 D16",
    36: "D18",
    35: "3 D16",
    34: "D17",
    33: "1 D16",
    32: "D16",
    31: "7 D12",
    30: "D15",
    29: "5 D12",
    28: "D14",
    27: "3 D12",
    26: "D13",
    25: "9 D8",
    24: "D12",
    23: "7 D8",
    22: "D11",
    21: "5 D8",
    20: "D10",
    19: "3 D8",
    18: "D9",
    17: "1 D8",
    16: "D8",
    15: "7 D4",
    14: "D7",
    13: "5 D4",
    12: "D6",
    11: "3 D4",
    10: "D5",
    9: "1 D4",
    8: "D4",
    7: "3 D2",
    6: "D3",
    5: "1 D2",
    4: "D2",
    3: "1 D1",
    2: "D1",
}


# =============================================================================
# Search
# =============================================================================

def is_valid_finish(dart: Dart, out_rule: str) -> bool:
    if out_rule == "single":
        return True
    return is_double(dart)


def _finish_darts(out_rule: str) -> Sequence[Dart]:
    return DOUBLES if out_rule == "double" else ALL_DARTS


def _is_dead_end(remaining: int, out_rule: str) -> bool:
    if remaining < 1:
        return True
    return out_rule == "double" and remaining == 1


def _suggest(darts: List[Dart]) -> CheckoutSuggestion:
    return CheckoutSuggestion(
        darts=tuple(darts),
        description=" ".join(format_dart(d) for d in darts),
    )


def _find_finish(remaining: int, out_rule: str) -> Optional[Dart]:
    for dart in _finish_darts(out_rule):
        if get_dart_value(dart) == remaining and is_valid_finish(dart, out_rule):
            return dart
    return None


def _find_one_dart_finish(score: int, out_rule: str) -> Optional[CheckoutSuggestion]:
    finish = _find_finish(score, out_rule)
    if finish is None:
        return None
    return _suggest([finish])


def _find_two_dart_finish(score: int, out_rule: str) -> Optional[CheckoutSuggestion]:
    for first in ALL_DARTS:
        remaining = score - get_dart_value(first)
        if _is_dead_end(remaining, out_rule):
            continue

        finish = _find_finish(remaining, out_rule)
        if finish is not None:
            return _suggest([first, finish])
    return None


def _find_three_dart_finish(score: int, out_rule: str) -> Optional[CheckoutSuggestion]:
    for first in _FIRST_DARTS_BY_VALUE:
        after_first = score - get_dart_value(first)
        if _is_dead_end(after_first, out_rule):
            continue

        for second in ALL_DARTS:
            after_second = after_first - get_dart_value(second)
            if _is_dead_end(after_second, out_rule):
                continue

            finish = _find_finish(after_second, out_rule)
            if finish is not None:
                return _suggest([first, second, finish])
    return None


def calculate_checkout(
    score: int,
    darts_remaining: int,
    out_rule: str,
) -> Optional[CheckoutSuggestion]:
    """
    Compute a finish for `score` using at most `darts_remaining` darts.

    Fewer darts are always preferred; within the same dart count the first
    combination found wins. Returns None when no finish exists.
    """
    if darts_remaining <= 0:
        return None
    if score > MAX_CHECKOUT or score < 1:
        return None

    if score == 1:
        if out_rule == "single":
            return _suggest([Dart(1, 1)])
        # lowest double is D1 = 2
        return None

    searches = (_find_one_dart_finish, _find_two_dart_finish, _find_three_dart_finish)
    for dart_count, search in enumerate(searches, start=1):
        if dart_count > darts_remaining:
            break
        suggestion = search(score, out_rule)
        if suggestion is not None:
            return suggestion

    return None


# =============================================================================
# Table lookup
# =============================================================================

def count_darts_in_checkout(description: str) -> int:
    return len(description.split())


def get_checkout_suggestion(
    score: int,
    darts_remaining: int,
    out_rule: str,
) -> Optional[CheckoutSuggestion]:
    """
    Preferred finish for `score`: the COMMON_CHECKOUTS route for double-out
    when it fits in the darts left, otherwise the computed search.
    """
    if score > MAX_CHECKOUT or score < 1 or darts_remaining <= 0:
        return None

    description = COMMON_CHECKOUTS.get(score) if out_rule == "double" else None
    if description and count_darts_in_checkout(description) <= darts_remaining:
        darts = tuple(parse_dart(token) for token in description.split())
        return CheckoutSuggestion(darts=darts, description=description)

    suggestion = calculate_checkout(score, darts_remaining, out_rule)
    if suggestion is None:
        logger.debug("no checkout for %d with %d dart(s), %s out", score, darts_remaining, out_rule)
    return suggestion
