class DartCounterError(Exception):
    pass


class GameConfigError(DartCounterError, ValueError):
    pass


class UnknownGameTypeError(DartCounterError, KeyError):
    pass
