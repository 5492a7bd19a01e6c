from dartcounter.models import Dart, Player
from dartcounter.visit_tracker import VisitTracker


def create_tracker(count=2):
    players = [Player(id=f"p{i}", name=f"Player {i}") for i in range(count)]
    return VisitTracker(players)


# ---------- VISIT FLOW ----------

def test_three_darts_complete_a_visit():
    tracker = create_tracker()

    for _ in range(3):
        assert tracker.add_dart(Dart(20, 1))

    assert tracker.is_visit_complete()
    assert tracker.darts_remaining() == 0
    assert tracker.add_dart(Dart(20, 1)) is False
    assert tracker.current_visit.total == 60


def test_end_visit_rotates_player():
    tracker = create_tracker()
    tracker.add_dart(Dart(20, 3))
    tracker.end_visit(score_after=441)

    assert tracker.get_current_player().id == "p1"
    assert tracker.darts_remaining() == 3

    record = tracker.visit_history[-1]
    assert record.player_id == "p0"
    assert record.score_after == 441
    assert record.visit.total == 60


def test_skip_advance_keeps_player():
    tracker = create_tracker()
    tracker.add_dart(Dart(20, 2))
    tracker.end_visit(skip_advance=True)

    assert tracker.get_current_player().id == "p0"


def test_rotation_wraps():
    tracker = create_tracker(3)
    for _ in range(3):
        tracker.end_visit()

    assert tracker.current_player_index == 0


# ---------- UNDO ----------

def test_undo_last_dart():
    tracker = create_tracker()
    tracker.add_dart(Dart(20, 1))
    tracker.add_dart(Dart(19, 3))

    assert tracker.undo_last_dart() == Dart(19, 3)
    assert tracker.current_visit.total == 20
    assert tracker.undo_last_dart() == Dart(20, 1)
    assert tracker.undo_last_dart() is None


def test_undo_previous_visit_reopens_without_last_dart():
    tracker = create_tracker()
    for dart in (Dart(20, 1), Dart(5, 1), Dart(1, 1)):
        tracker.add_dart(dart)
    tracker.end_visit(busted=True)

    record = tracker.undo_previous_visit()

    assert record.visit.busted is True
    assert tracker.get_current_player().id == "p0"
    assert tracker.current_visit.darts == [Dart(20, 1), Dart(5, 1)]
    assert tracker.current_visit.total == 25
    assert tracker.visit_history == []


def test_undo_previous_visit_empty():
    assert create_tracker().undo_previous_visit() is None


def test_reset_all():
    tracker = create_tracker()
    tracker.add_dart(Dart(1, 1))
    tracker.end_visit()
    tracker.reset_all(1)

    assert tracker.current_player_index == 1
    assert tracker.visit_history == []
    assert tracker.current_visit.darts == []
