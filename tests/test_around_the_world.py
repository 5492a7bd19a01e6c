from dartcounter.around_the_world import AroundTheWorldGame
from dartcounter.models import AroundTheWorldConfig, Dart, Player


SOLO = Player(id="solo", name="Solo")


def create_game(legs=1):
    return AroundTheWorldGame([SOLO], AroundTheWorldConfig(legs=legs))


def hit_through(game, last):
    for number in range(1, last + 1):
        game.record_throw(Dart(number, 1))


# ---------- ADVANCE ----------

def test_multiplier_sets_the_skip():
    game = create_game()

    game.record_throw(Dart(1, 3))
    assert game.get_player_target("solo") == 4

    game.record_throw(Dart(4, 2))
    assert game.get_player_target("solo") == 6
    assert game.get_player_score("solo") == 5


def test_wrong_number_does_nothing():
    game = create_game()
    game.record_throw(Dart(2, 3))

    assert game.get_player_target("solo") == 1


def test_bull_comes_after_twenty():
    game = create_game()
    hit_through(game, 18)
    game.record_throw(Dart(19, 2))

    assert game.get_player_target("solo") == 25
    assert not game.is_finished()


# ---------- FINISH ----------

def test_bull_finishes():
    game = create_game()
    hit_through(game, 20)

    game.record_throw(Dart(25, 1))

    assert game.is_finished()
    assert game.get_winner() == SOLO
    assert game.get_player_target("solo") == 0
    assert game.get_player_score("solo") == game.get_sequence_length()


def test_triple_on_twenty_overshoots_to_finish():
    game = create_game()
    hit_through(game, 19)

    game.record_throw(Dart(20, 3))

    assert game.is_finished()


# ---------- UNDO ----------

def test_undo_finish():
    game = create_game()
    hit_through(game, 20)
    game.record_throw(Dart(50, 1))

    assert game.undo_last_throw() is True

    assert not game.is_finished()
    assert game.get_player_target("solo") == 25
    assert game.get_player_legs_won("solo") == 0


def test_undo_empty():
    assert create_game().undo_last_throw() is False
