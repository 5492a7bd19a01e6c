from itertools import permutations

import pytest

from dartcounter.models import Dart, Player, ShanghaiConfig
from dartcounter.shanghai import ShanghaiGame


ALICE = Player(id="a", name="Alice")
BOB = Player(id="b", name="Bob")

MISS = Dart(0, 1)


def create_game(**config):
    return ShanghaiGame([ALICE, BOB], ShanghaiConfig(**config))


def throw_all(game, *darts):
    for dart in darts:
        game.record_throw(dart)


# ---------- SHANGHAI ----------

@pytest.mark.parametrize("order", list(permutations([1, 2, 3])))
def test_shanghai_wins_instantly_in_any_order(order):
    game = create_game(rounds=7)

    throw_all(game, *[Dart(1, m) for m in order])

    assert game.is_finished()
    assert game.get_winner() == ALICE
    assert game.get_player_score("a") == 6
    assert game.get_current_round() == 1


def test_off_target_triple_is_not_a_shanghai():
    game = create_game()
    throw_all(game, Dart(1, 1), Dart(1, 2), Dart(2, 3))

    assert not game.is_leg_finished()
    assert game.get_player_score("a") == 3


# ---------- ROUNDS ----------

def test_only_the_round_number_scores():
    game = create_game()
    throw_all(game, Dart(1, 3), Dart(20, 3), Dart(1, 1))

    assert game.get_player_score("a") == 4


def test_round_advances_after_everyone_throws():
    game = create_game()
    throw_all(game, MISS, MISS, MISS)

    assert game.get_current_round() == 1

    throw_all(game, MISS, MISS, MISS)

    assert game.get_current_round() == 2
    assert game.get_current_target_number() == 2
    assert game.get_current_player() == ALICE


def test_start_number_offsets_targets():
    game = create_game(start_number=14)

    assert game.get_current_target_number() == 14


def test_highest_total_wins_after_last_round():
    game = create_game(rounds=1)
    throw_all(game, Dart(1, 1), MISS, MISS)
    throw_all(game, Dart(1, 2), MISS, MISS)

    assert game.is_finished()
    assert game.get_winner() == BOB
    assert game.get_leg_winner() == BOB


def test_tie_goes_to_first_player():
    game = create_game(rounds=1)
    throw_all(game, MISS, MISS, MISS, MISS, MISS, MISS)

    assert game.get_winner() == ALICE


# ---------- UNDO ----------

def test_undo_across_round_boundary():
    game = create_game()
    throw_all(game, MISS, MISS, MISS)
    throw_all(game, MISS, MISS, Dart(1, 3))

    assert game.get_current_round() == 2

    game.undo_last_throw()

    assert game.get_current_round() == 1
    assert game.get_current_player() == BOB
    assert game.get_darts_remaining() == 1
    assert game.get_player_score("b") == 0


def test_undo_shanghai():
    game = create_game()
    throw_all(game, Dart(1, 1), Dart(1, 2), Dart(1, 3))

    game.undo_last_throw()

    assert not game.is_finished()
    assert game.get_player_legs_won("a") == 0
    assert game.get_player_score("a") == 3
    assert game.get_current_player() == ALICE
    assert game.get_darts_remaining() == 1


def test_undo_final_round_result():
    game = create_game(rounds=1)
    throw_all(game, Dart(1, 1), MISS, MISS)
    throw_all(game, Dart(1, 2), MISS, MISS)

    game.undo_last_throw()

    assert not game.is_leg_finished()
    assert game.get_player_legs_won("b") == 0
    assert game.get_current_round() == 1


def test_next_leg_resets_rounds():
    game = create_game(legs=2)
    throw_all(game, Dart(1, 1), Dart(1, 2), Dart(1, 3))

    game.next_leg()

    assert game.get_current_leg() == 2
    assert game.get_current_round() == 1
    assert game.get_player_score("a") == 0
    assert game.get_current_player() == BOB
