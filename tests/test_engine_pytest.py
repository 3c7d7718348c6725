import logging

import pytest

from chore_balancer import Chore, InvalidInput, Person, Policy, WeekLedger, allocate, assign_group, balance_greedy, expand_week, load_default_config

CFG = load_default_config()

ROSTER = [Person(name="Alice"), Person(name="Bob"), Person(name="Cara")]
CATALOG = [
    Chore(id=1, name="Sweep", weight=2, cadence="weekly"),
    Chore(id=2, name="Bathroom", weight=3, cadence="weekly"),
    Chore(id=3, name="Garden", weight=4, cadence="quarterly"),
]
POLICY = Policy(min_per_week=1, max_per_week=2, avoid_immediate_repeat=True, no_duplicate_per_week=True)


def _holders(week, chore_id):
    return [a.person for a in week.assignments if a.chore_id == chore_id]


def test_example_household_first_two_weeks():
    result = allocate(ROSTER, CATALOG, 4, POLICY)
    assert [w.week for w in result.weeks] == [1, 2, 3, 4]

    first, second = result.weeks[0], result.weeks[1]
    assert sorted(_holders(first, 3)) == ["Alice", "Bob", "Cara"]
    assert len(_holders(first, 1)) == 1
    assert len(_holders(first, 2)) == 1
    # everyone starts the week with the shared chore, so roster order decides
    assert _holders(first, 2) == ["Alice"]
    assert _holders(first, 1) == ["Bob"]

    assert _holders(second, 3) == []
    assert _holders(second, 2) != _holders(first, 2)
    assert _holders(second, 1) != _holders(first, 1)


def test_example_household_reports_unmet_minimum():
    result = allocate(ROSTER, CATALOG, 4, POLICY)
    # two individual chores cannot cover three people once the shared one is gone
    assert {(b.week, b.person) for b in result.unmet_bounds()} == {(2, "Cara"), (3, "Cara"), (4, "Cara")}


def test_count_and_load_conservation():
    result = allocate(CFG.people, CFG.chores, 8, CFG.policy)
    for week in result.weeks:
        assert sum(week.counts.values()) == len(week.assignments)
        assert sum(week.loads.values()) == sum(a.weight for a in week.assignments)
        for person, count in week.counts.items():
            assert count == len(week.for_person(person))


def test_group_fan_out_every_period():
    result = allocate(CFG.people, CFG.chores, 8, CFG.policy)
    names = [p.name for p in CFG.people]
    for week in result.weeks:
        holders = _holders(week, 8)
        if (week.week - 1) % 4 == 0:
            assert sorted(holders) == sorted(names)
        else:
            assert holders == []


def test_group_fan_out_twelve_week_model():
    policy = CFG.policy.model_copy(update={"group_period_weeks": 12})
    result = allocate(CFG.people, CFG.chores, 12, policy)
    due = [w.week for w in result.weeks if _holders(w, 8)]
    assert due == [1]


def test_max_respected_after_greedy_stage():
    policy = CFG.policy
    last: dict[int, str] = {}
    for week_index in range(8):
        due = expand_week(CFG.chores, week_index, group_period=policy.group_period_weeks)
        ledger = WeekLedger.for_roster(CFG.people, week_index)
        assign_group(ledger, due.group, policy)
        balance_greedy(ledger, due.individual, policy, last)
        assert max(ledger.counts.values()) <= policy.max_per_week


def test_generic_household_within_bounds():
    result = allocate(CFG.people, CFG.chores, CFG.cycle_weeks, CFG.policy)
    assert result.unmet_bounds() == []
    assert result.unassigned() == []


def test_no_immediate_repeat_across_weeks():
    result = allocate(CFG.people, CFG.chores, 6, CFG.policy)
    for prev, cur in zip(result.weeks, result.weeks[1:]):
        for chore_id in (2, 3, 4):  # weekly chores
            assert _holders(prev, chore_id) != _holders(cur, chore_id)


def test_allocate_is_deterministic():
    a = allocate(CFG.people, CFG.chores, 8, CFG.policy)
    b = allocate(CFG.people, CFG.chores, 8, CFG.policy)
    assert a.model_dump_json() == b.model_dump_json()


def test_allocate_does_not_mutate_inputs():
    people = list(CFG.people)
    chores = list(CFG.chores)
    before = ([p.model_dump() for p in people], [c.model_dump() for c in chores], CFG.policy.model_dump())
    allocate(people, chores, 4, CFG.policy)
    assert ([p.model_dump() for p in people], [c.model_dump() for c in chores], CFG.policy.model_dump()) == before
    assert people == list(CFG.people)
    assert chores == list(CFG.chores)


def test_unassignable_occurrence_is_recorded(caplog):
    roster = [Person(name="Solo")]
    catalog = [Chore(id=1, name="Dishes", weight=2, cadence="twice-weekly")]
    with caplog.at_level(logging.INFO, logger="chore_balancer"):
        result = allocate(roster, catalog, 2, Policy(min_per_week=0, max_per_week=3))
    assert [(u.week, u.chore_id, u.seq) for u in result.unassigned()] == [(1, 1, 1), (2, 1, 1)]
    assert all(w.counts == {"Solo": 1} for w in result.weeks)
    assert "no eligible person" in caplog.text


def test_unknown_cadence_is_skipped():
    catalog = [Chore(id=1, name="Sweep", weight=2), Chore(id=2, name="Mystery", weight=5, cadence="sometimes")]
    result = allocate(ROSTER, catalog, 3, Policy(min_per_week=0))
    assert all(_holders(w, 2) == [] for w in result.weeks)
    assert result.unassigned() == []


def test_default_policy():
    result = allocate(ROSTER, CATALOG, 1)
    assert result.policy == Policy()


@pytest.mark.parametrize(
    "roster,catalog,weeks,policy",
    [
        ([], CATALOG, 4, POLICY),
        (ROSTER, [], 4, POLICY),
        (ROSTER, CATALOG, 0, POLICY),
        (ROSTER, CATALOG, 4, Policy(min_per_week=3, max_per_week=2)),
        ([Person(name="Alice"), Person(name="Alice")], CATALOG, 4, POLICY),
        (ROSTER, [Chore(id=1, name="a"), Chore(id=1, name="b")], 4, POLICY),
    ],
)
def test_invalid_input(roster, catalog, weeks, policy):
    with pytest.raises(InvalidInput):
        allocate(roster, catalog, weeks, policy)


def test_invalid_input_is_value_error():
    assert issubclass(InvalidInput, ValueError)
