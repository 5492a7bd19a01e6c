DARTS_PER_VISIT = 3

MAX_CHECKOUT = 170

X01_VARIANTS = (301, 501)
OUT_RULES = ("single", "double")

CRICKET_NUMBERS = (15, 16, 17, 18, 19, 20, 25)

AROUND_THE_WORLD_SEQUENCE = tuple(range(1, 21)) + (25,)

# Scores in 2..170 with no three-dart double-out finish
BOGEY_NUMBERS = frozenset({159, 162, 163, 165, 166, 168, 169})

HALVE_IT_TARGET_KINDS = ("number", "double", "triple", "bull")

DEFAULT_LEGS = 1
DEFAULT_MAX_PLAYERS = 8

VISIT_MILESTONES = (60, 100, 140, 180)
