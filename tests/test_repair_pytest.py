import pytest

from chore_balancer import Chore, Person, Policy, WeekLedger, repair_bounds
from chore_balancer.expander import Occurrence
from chore_balancer.repair import total_deficit

ROSTER = [Person(name="Alice"), Person(name="Bob"), Person(name="Cara")]


def _occ(chore_id, weight, cadence="weekly", seq=0):
    return Occurrence(chore=Chore(id=chore_id, name=f"chore-{chore_id}", weight=weight, cadence=cadence), week_index=0, seq=seq)


@pytest.fixture
def lopsided() -> WeekLedger:
    """Alice holds every chore; Bob and Cara have nothing."""
    ledger = WeekLedger.for_roster(ROSTER, 0)
    for chore_id, weight in [(1, 3), (2, 1), (3, 2), (4, 5)]:
        ledger.add("Alice", _occ(chore_id, weight))
    return ledger


def test_moves_lightest_chores_to_needy_people(lopsided):
    moves = repair_bounds(lopsided, Policy(min_per_week=1, max_per_week=4))
    assert [(m.chore_id, m.donor, m.recipient) for m in moves] == [(2, "Alice", "Bob"), (3, "Alice", "Cara")]
    assert lopsided.counts == {"Alice": 2, "Bob": 1, "Cara": 1}
    assert lopsided.loads == {"Alice": 8, "Bob": 1, "Cara": 2}


def test_counts_and_loads_stay_in_sync(lopsided):
    repair_bounds(lopsided, Policy(min_per_week=1, max_per_week=4))
    for person in lopsided.people:
        mine = [a for a in lopsided.assignments if a.person == person]
        assert lopsided.counts[person] == len(mine)
        assert lopsided.loads[person] == sum(a.weight for a in mine)


def test_each_move_reduces_deficit(lopsided):
    policy = Policy(min_per_week=2, max_per_week=4)
    deficits = [total_deficit(lopsided, policy.min_per_week)]
    while True:
        moves = repair_bounds(lopsided, policy.model_copy(update={"repair_max_rounds": 1}))
        if not moves:
            break
        deficits.append(total_deficit(lopsided, policy.min_per_week))
    assert deficits == sorted(deficits, reverse=True)
    assert len(set(deficits)) == len(deficits)
    # four chores cannot give three people two each
    assert deficits[-1] > 0


def test_round_cap_limits_moves(lopsided):
    moves = repair_bounds(lopsided, Policy(min_per_week=1, max_per_week=4, repair_max_rounds=1))
    assert len(moves) == 1
    assert lopsided.counts["Cara"] == 0


def test_shared_chores_never_move():
    ledger = WeekLedger.for_roster(ROSTER[:2], 0)
    ledger.add("Alice", _occ(8, 5, "quarterly"), shared=True)
    ledger.add("Alice", _occ(9, 4, "quarterly"), shared=True)
    assert repair_bounds(ledger, Policy(min_per_week=1, max_per_week=3)) == []
    assert ledger.counts == {"Alice": 2, "Bob": 0}


def test_no_duplicate_in_week_when_moving():
    ledger = WeekLedger.for_roster(ROSTER[:2], 0)
    ledger.add("Alice", _occ(1, 1, "twice-weekly"))
    ledger.add("Alice", _occ(2, 3))
    ledger.add("Alice", _occ(3, 4))
    ledger.add("Bob", _occ(1, 1, "twice-weekly", seq=1))
    moves = repair_bounds(ledger, Policy(min_per_week=2, max_per_week=3))
    assert [(m.chore_id, m.recipient) for m in moves] == [(2, "Bob")]


def test_nothing_to_do_when_bounds_met(lopsided):
    assert repair_bounds(lopsided, Policy(min_per_week=0, max_per_week=4)) == []


def test_updates_last_assignee_for_moved_chore(lopsided):
    last = {2: "Alice", 3: "Bob", 4: "Alice"}
    repair_bounds(lopsided, Policy(min_per_week=1, max_per_week=4), last)
    assert last == {2: "Bob", 3: "Bob", 4: "Alice"}
