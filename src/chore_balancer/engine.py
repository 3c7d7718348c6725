from __future__ import annotations

import logging
from collections.abc import Sequence

from .balancer import LastAssignees, WeekLedger, assign_group, balance_greedy
from .expander import expand_week
from .models import Chore, CycleResult, Person, Policy, WeekAssignment
from .repair import repair_bounds

_LOGGER = logging.getLogger(__name__)


class InvalidInput(ValueError):
    """The roster, catalog or policy cannot be allocated; fix the configuration and retry."""


def _validate(roster: Sequence[Person], catalog: Sequence[Chore], cycle_weeks: int, policy: Policy) -> None:
    if not roster:
        raise InvalidInput("roster is empty")
    if not catalog:
        raise InvalidInput("chore catalog is empty")
    if cycle_weeks < 1:
        raise InvalidInput(f"cycle_weeks must be at least 1 (got {cycle_weeks})")
    if policy.max_per_week < policy.min_per_week:
        raise InvalidInput(f"max_per_week ({policy.max_per_week}) is below min_per_week ({policy.min_per_week})")
    names = [p.name for p in roster]
    if len(set(names)) != len(names):
        raise InvalidInput("person names must be unique within the roster")
    ids = [c.id for c in catalog]
    if len(set(ids)) != len(ids):
        raise InvalidInput("chore ids must be unique within the catalog")


def allocate_week(
    roster: Sequence[Person],
    catalog: Sequence[Chore],
    week_index: int,
    policy: Policy,
    last_assignee: LastAssignees,
) -> WeekAssignment:
    """Run expansion, group fan-out, greedy balancing and repair for a single week."""
    due = expand_week(catalog, week_index, group_period=policy.group_period_weeks)
    ledger = WeekLedger.for_roster(roster, week_index)
    assign_group(ledger, due.group, policy)
    balance_greedy(ledger, due.individual, policy, last_assignee)
    moves = repair_bounds(ledger, policy, last_assignee)
    _LOGGER.debug(
        "week %d: %d shared, %d individual occurrences, %d repair moves",
        week_index + 1,
        len(due.group),
        len(due.individual),
        len(moves),
    )
    return ledger.freeze()


def allocate(roster: Sequence[Person], catalog: Sequence[Chore], cycle_weeks: int, policy: Policy | None = None) -> CycleResult:
    """Allocate the whole cycle of chores across the roster.

    Pure with respect to its inputs: the roster, catalog and policy are only
    read, and the same snapshots always produce the same result.

    Args:
        roster: People sharing the chores; names must be unique
        catalog: Chore catalog; ids must be unique
        cycle_weeks: Number of weeks to allocate (>= 1)
        policy: Weekly bounds and placement rules (defaults to `Policy()`)

    Returns:
        One WeekAssignment per week. Occurrences nobody could take are listed
        in each week's `unassigned`, and bounds that could not be met are
        reported by `CycleResult.unmet_bounds()`.

    Raises:
        InvalidInput: empty roster or catalog, bad cycle length, max below min,
            or duplicate names/ids
    """
    policy = policy or Policy()
    _validate(roster, catalog, cycle_weeks, policy)

    last_assignee: LastAssignees = {}
    weeks = [allocate_week(roster, catalog, i, policy, last_assignee) for i in range(cycle_weeks)]
    result = CycleResult(weeks=weeks, policy=policy.model_copy())

    for bound in result.unmet_bounds():
        _LOGGER.info("week %d: %s has %d chores, outside [%d, %d]", bound.week, bound.person, bound.count, bound.minimum, bound.maximum)
    return result
