from dartcounter.models import Dart, Player, X01Config
from dartcounter.x01 import X01Game


ALICE = Player(id="a", name="Alice")
BOB = Player(id="b", name="Bob")


def create_game(variant=501, out_rule="double", legs=1):
    return X01Game([ALICE, BOB], X01Config(variant=variant, out_rule=out_rule, legs=legs))


def set_score(game, index, score):
    game.player_states[index].score = score


def throw_all(game, *darts):
    for dart in darts:
        game.record_throw(dart)


MISS = Dart(0, 1)
T20 = Dart(20, 3)


# ---------- SCORING ----------

def test_scores_subtract_per_dart():
    game = create_game()
    throw_all(game, T20, Dart(20, 1))

    assert game.get_player_score("a") == 421
    assert game.get_darts_remaining() == 1
    assert game.get_current_player() == ALICE


def test_visit_passes_to_next_player():
    game = create_game()
    throw_all(game, T20, T20, T20)

    assert game.get_player_score("a") == 321
    assert game.get_current_player() == BOB
    assert game.get_darts_remaining() == 3


def test_off_board_darts_take_nothing_off():
    game = create_game()
    throw_all(game, Dart(21, 1), Dart(60, 3))

    assert game.get_player_score("a") == 501
    assert game.get_darts_remaining() == 1


def test_unknown_player_scores_zero():
    assert create_game().get_player_score("nobody") == 0


# ---------- CHECKOUT ----------

def test_double_out_checkout():
    game = create_game()
    set_score(game, 0, 40)

    suggestion = game.get_checkout_suggestion()
    assert suggestion.description == "D20"

    game.record_throw(Dart(20, 2))

    assert game.get_player_score("a") == 0
    assert game.is_leg_finished()
    assert game.is_finished()
    assert game.get_winner() == ALICE
    assert game.get_leg_winner() == ALICE


def test_single_out_allows_any_finish():
    game = create_game(variant=301, out_rule="single")
    set_score(game, 0, 2)

    game.record_throw(Dart(2, 1))

    assert game.get_player_score("a") == 0
    assert game.is_leg_finished()


def test_bull_is_a_valid_double_out():
    game = create_game()
    set_score(game, 0, 50)

    game.record_throw(Dart(50, 1))

    assert game.is_finished()


def test_no_suggestion_above_max_checkout():
    game = create_game()
    assert game.get_checkout_suggestion() is None


def test_throws_ignored_after_finish():
    game = create_game()
    set_score(game, 0, 40)
    game.record_throw(Dart(20, 2))

    game.record_throw(T20)

    assert game.get_player_score("b") == 501
    assert game.get_current_player() == ALICE


# ---------- BUSTS ----------

def test_single_finish_busts_under_double_out():
    game = create_game(variant=301)
    set_score(game, 0, 2)

    game.record_throw(Dart(2, 1))

    assert game.get_player_score("a") == 2
    assert not game.is_leg_finished()
    assert game.get_current_player() == BOB
    assert game.visits.visit_history[-1].visit.busted is True


def test_bust_restores_score_from_start_of_visit():
    game = create_game()
    set_score(game, 0, 100)

    throw_all(game, T20, T20)

    assert game.get_player_score("a") == 100
    assert game.get_current_player() == BOB
    assert game.last_completed_visit.busted is True


def test_leaving_one_is_a_bust_on_double_out():
    game = create_game()
    set_score(game, 0, 41)

    throw_all(game, Dart(20, 1), Dart(20, 1))

    assert game.get_player_score("a") == 41
    assert game.get_current_player() == BOB


def test_leaving_one_is_fine_on_single_out():
    game = create_game(out_rule="single")
    set_score(game, 0, 41)

    throw_all(game, Dart(20, 1), Dart(20, 1))

    assert game.get_player_score("a") == 1
    assert game.get_current_player() == ALICE


# ---------- UNDO ----------

def test_undo_on_fresh_game():
    assert create_game().undo_last_throw() is False


def test_undo_within_visit():
    game = create_game()
    game.record_throw(T20)

    assert game.undo_last_throw() is True
    assert game.get_player_score("a") == 501
    assert game.get_darts_remaining() == 3


def test_undo_across_visit_boundary():
    game = create_game()
    throw_all(game, T20, Dart(20, 1), Dart(20, 1))

    assert game.undo_last_throw() is True

    assert game.get_current_player() == ALICE
    assert game.get_player_score("a") == 421
    assert game.get_darts_remaining() == 1


def test_undo_bust():
    game = create_game()
    set_score(game, 0, 50)
    game.record_throw(T20)

    game.undo_last_throw()

    assert game.get_current_player() == ALICE
    assert game.get_player_score("a") == 50
    assert game.get_darts_remaining() == 3


def test_undo_checkout_reopens_leg():
    game = create_game()
    set_score(game, 0, 40)
    game.record_throw(Dart(20, 2))

    game.undo_last_throw()

    assert game.get_player_score("a") == 40
    assert not game.is_leg_finished()
    assert not game.is_finished()
    assert game.get_winner() is None
    assert game.get_player_legs_won("a") == 0


# ---------- LEGS ----------

def test_next_leg_rotates_starting_player():
    game = create_game(legs=2)
    set_score(game, 0, 40)
    game.record_throw(Dart(20, 2))

    assert game.is_leg_finished()
    assert not game.is_finished()

    game.next_leg()

    assert game.get_current_leg() == 2
    assert game.get_current_player() == BOB
    assert game.get_player_score("a") == 501
    assert game.get_player_score("b") == 501
    assert game.get_player_legs_won("a") == 1
    assert game.get_legs_to_win() == 2


def test_next_leg_ignored_mid_leg():
    game = create_game(legs=2)
    game.record_throw(T20)

    game.next_leg()

    assert game.get_current_leg() == 1
    assert game.get_player_score("a") == 441


def test_match_won_after_required_legs():
    game = create_game(legs=2)
    for _ in range(2):
        set_score(game, game.visits.current_player_index, 40)
        starter = game.get_current_player()
        game.record_throw(Dart(20, 2))
        assert game.get_leg_winner() == starter
        game.next_leg()

    # legs split one each
    assert not game.is_finished()

    set_score(game, game.visits.current_player_index, 40)
    game.record_throw(Dart(20, 2))

    assert game.is_finished()
    assert game.get_winner() == ALICE


def test_completed_legs_include_finished_leg():
    game = create_game(legs=2)
    throw_all(game, T20, T20, T20)
    set_score(game, 1, 40)
    game.record_throw(Dart(20, 2))

    legs = game.get_all_completed_legs()
    assert len(legs) == 1
    assert legs[0].winner_id == "b"
    assert [v.player_id for v in legs[0].visit_history] == ["a", "b"]

    game.next_leg()

    assert len(game.get_all_completed_legs()) == 1
    assert game.visits.visit_history == []


# ---------- AVERAGE ----------

def test_three_dart_average():
    game = create_game()
    throw_all(game, T20, T20, T20)

    assert game.get_player_average("a") == 180.0
    assert game.get_player_average("b") == 0.0


def test_average_counts_darts_in_progress():
    game = create_game()
    throw_all(game, T20, T20, T20, MISS, MISS, MISS, T20)

    # 240 points over 4 darts
    assert game.get_player_average("a") == 180.0
    game.record_throw(MISS)
    assert game.get_player_average("a") == 144.0
