import pytest

from dartcounter.halve_it import HalveItGame, is_dart_on_target, score_dart
from dartcounter.models import Dart, HalveItConfig, HalveItTarget, Player


SOLO = Player(id="solo", name="Solo")
OTHER = Player(id="other", name="Other")

MISS = Dart(0, 1)


def create_game(players=None, **config):
    return HalveItGame(players or [SOLO], HalveItConfig(**config))


def throw_all(game, *darts):
    for dart in darts:
        game.record_throw(dart)


# ---------- TARGETS ----------

@pytest.mark.parametrize("dart, target, expected", [
    (Dart(20, 3), HalveItTarget("number", 20), 60),
    (Dart(19, 1), HalveItTarget("number", 20), 0),
    (Dart(7, 2), HalveItTarget("double"), 14),
    (Dart(7, 1), HalveItTarget("double"), 0),
    (Dart(9, 3), HalveItTarget("triple"), 27),
    (Dart(50, 1), HalveItTarget("bull"), 50),
    (Dart(25, 1), HalveItTarget("bull"), 25),
    (MISS, HalveItTarget("bull"), 0),
])
def test_score_dart(dart, target, expected):
    assert score_dart(dart, target) == expected


def test_miss_is_never_on_a_number_target():
    assert not is_dart_on_target(MISS, HalveItTarget("number", 20))


# ---------- HALVING ----------

def test_missed_visit_halves_rounding_down():
    game = create_game(starting_score=41)
    throw_all(game, MISS, MISS, MISS)

    assert game.get_player_score("solo") == 20
    assert game.get_current_round() == 2


def test_hit_prevents_halving():
    game = create_game(starting_score=41)
    throw_all(game, Dart(20, 1), MISS, MISS)

    assert game.get_player_score("solo") == 61


def test_hits_add_immediately():
    game = create_game()
    game.record_throw(Dart(20, 2))

    assert game.get_player_score("solo") == 80


def test_off_board_double_is_not_a_hit():
    game = create_game(targets=(HalveItTarget("double"),), starting_score=40)
    game.record_throw(Dart(30, 2))

    assert game.get_player_score("solo") == 40
    assert game.visit_hit_target is False

    throw_all(game, Dart(20, 5), Dart(21, 1))

    assert game.get_player_score("solo") == 20


# ---------- END OF GAME ----------

def test_highest_score_after_last_round_wins():
    game = create_game(
        players=[SOLO, OTHER],
        targets=(HalveItTarget("number", 20, "20"),),
    )
    throw_all(game, Dart(20, 1), MISS, MISS)
    throw_all(game, MISS, MISS, MISS)

    assert game.is_finished()
    assert game.get_winner() == SOLO
    assert game.get_player_score("other") == 20
    assert game.get_current_target() is None


def test_throws_ignored_after_last_round():
    game = create_game(targets=(HalveItTarget("bull", label="Bull"),))
    throw_all(game, Dart(50, 1), MISS, MISS)

    game.record_throw(Dart(50, 1))

    assert game.get_player_score("solo") == 90


# ---------- UNDO ----------

def test_undo_halving_dart():
    game = create_game(starting_score=41)
    throw_all(game, MISS, MISS, MISS)

    game.undo_last_throw()

    assert game.get_player_score("solo") == 41
    assert game.get_current_round() == 1
    assert game.get_darts_remaining() == 1


def test_undo_rebuilds_hit_flag():
    game = create_game(starting_score=41)
    throw_all(game, Dart(20, 1), MISS)

    game.undo_last_throw()
    assert game.visit_hit_target is True

    throw_all(game, MISS, MISS)

    assert game.get_player_score("solo") == 61


def test_undo_removing_only_hit_allows_halving():
    game = create_game(starting_score=40)
    game.record_throw(Dart(20, 1))

    game.undo_last_throw()
    assert game.visit_hit_target is False

    throw_all(game, MISS, MISS, MISS)

    assert game.get_player_score("solo") == 20


def test_undo_across_round_boundary_with_two_players():
    game = create_game(players=[SOLO, OTHER])
    throw_all(game, MISS, MISS, MISS)
    throw_all(game, MISS, MISS, MISS)

    assert game.get_current_round() == 2

    game.undo_last_throw()

    assert game.get_current_round() == 1
    assert game.get_current_player() == OTHER
    assert game.get_player_score("other") == 40


def test_undo_last_round_result():
    game = create_game(targets=(HalveItTarget("number", 20, "20"),))
    throw_all(game, MISS, MISS, MISS)

    game.undo_last_throw()

    assert not game.is_finished()
    assert game.get_player_legs_won("solo") == 0
    assert game.get_current_target().value == 20
