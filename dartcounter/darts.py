from dartcounter.models import Dart


MISS = Dart(segment=0, multiplier=1)

BULL_SEGMENTS = (25, 50)


def is_valid_dart(dart: Dart) -> bool:
    """A miss, a bull, or 1-20 thrown as a single, double or triple."""
    if dart.segment == 0 or dart.segment in BULL_SEGMENTS:
        return True
    return 1 <= dart.segment <= 20 and dart.multiplier in (1, 2, 3)


def get_dart_value(dart: Dart) -> int:
    """
    Point value of a dart. Bull segments carry their own value (25 / 50)
    whatever the multiplier field says. Off-board darts score 0.
    """
    if not is_valid_dart(dart):
        return 0
    if dart.segment in BULL_SEGMENTS:
        return dart.segment
    return dart.segment * dart.multiplier


def format_dart(dart: Dart) -> str:
    """Display form, e.g. "T20", "D16", "Bull", "25", "M"."""
    if dart.segment == 0:
        return "M"
    if dart.segment == 50:
        return "Bull"
    if dart.segment == 25:
        return "25"
    if dart.multiplier == 3:
        return f"T{dart.segment}"
    if dart.multiplier == 2:
        return f"D{dart.segment}"
    return f"{dart.segment}"


def is_double(dart: Dart) -> bool:
    return dart.multiplier == 2 or dart.segment == 50


def parse_dart(text: str) -> Dart:
    """
    Inverse of format_dart. Also accepts an "S" prefix for singles.
    """
    token = text.strip().upper()

    if token in ("M", "MISS", "0"):
        return MISS
    if token in ("BULL", "DB", "50"):
        return Dart(segment=50, multiplier=1)
    if token in ("25", "SB"):
        return Dart(segment=25, multiplier=1)

    multiplier = 1
    if token[:1] in ("S", "D", "T"):
        multiplier = {"S": 1, "D": 2, "T": 3}[token[0]]
        token = token[1:]

    if not token.isdigit():
        raise ValueError(f"Invalid dart: {text!r}")

    segment = int(token)
    if not 1 <= segment <= 20:
        raise ValueError(f"Invalid dart segment: {text!r}")

    return Dart(segment=segment, multiplier=multiplier)
