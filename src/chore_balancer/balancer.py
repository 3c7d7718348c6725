from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from .expander import Occurrence
from .models import Assignment, Person, Policy, UnassignedOccurrence, WeekAssignment

_LOGGER = logging.getLogger(__name__)

type LastAssignees = dict[int, str]


@dataclass(slots=True)
class WeekLedger:
    """Mutable working state for one week.

    Every change goes through `add`/`move` so counts and loads always equal
    the aggregation of `assignments`.
    """

    week_index: int
    people: list[str]
    assignments: list[Assignment] = field(default_factory=list)
    counts: dict[str, int] = field(default_factory=dict)
    loads: dict[str, int] = field(default_factory=dict)
    unassigned: list[UnassignedOccurrence] = field(default_factory=list)

    def __post_init__(self) -> None:
        for name in self.people:
            self.counts.setdefault(name, 0)
            self.loads.setdefault(name, 0)

    @classmethod
    def for_roster(cls, roster: Sequence[Person], week_index: int) -> WeekLedger:
        return cls(week_index=week_index, people=[p.name for p in roster])

    def holds(self, person: str, chore_id: int) -> bool:
        return any(a.person == person and a.chore_id == chore_id for a in self.assignments)

    def add(self, person: str, occ: Occurrence, shared: bool = False) -> Assignment:
        chore = occ.chore
        assignment = Assignment(
            person=person,
            chore_id=chore.id,
            chore_name=chore.name,
            area=chore.area,
            weight=chore.weight,
            shared=shared,
        )
        self.assignments.append(assignment)
        self.counts[person] += 1
        self.loads[person] += chore.weight
        return assignment

    def move(self, index: int, recipient: str) -> Assignment:
        old = self.assignments[index]
        moved = old.model_copy(update={"person": recipient})
        self.assignments[index] = moved
        self.counts[old.person] -= 1
        self.loads[old.person] -= old.weight
        self.counts[recipient] += 1
        self.loads[recipient] += old.weight
        return moved

    def drop(self, occ: Occurrence) -> None:
        chore = occ.chore
        self.unassigned.append(
            UnassignedOccurrence(week=self.week_index + 1, chore_id=chore.id, chore_name=chore.name, weight=chore.weight, seq=occ.seq)
        )

    def freeze(self) -> WeekAssignment:
        return WeekAssignment(
            week=self.week_index + 1,
            assignments=list(self.assignments),
            loads={p: self.loads[p] for p in self.people},
            counts={p: self.counts[p] for p in self.people},
            unassigned=list(self.unassigned),
        )


def assign_group(ledger: WeekLedger, group: Sequence[Occurrence], policy: Policy) -> None:
    """Fan every group occurrence out to every person on the roster."""
    for occ in group:
        for person in ledger.people:
            if policy.no_duplicate_per_week and ledger.holds(person, occ.chore.id):
                _LOGGER.debug("week %d: %s already holds %r, skipping shared copy", ledger.week_index + 1, person, occ.chore.name)
                continue
            ledger.add(person, occ, shared=True)


def _placement_order(occ: Occurrence) -> tuple[int, int, int]:
    # heaviest first; chore id and seq keep ties reproducible
    return (-occ.chore.weight, occ.chore.id, occ.seq)


def balance_greedy(
    ledger: WeekLedger,
    individual: Sequence[Occurrence],
    policy: Policy,
    last_assignee: LastAssignees,
) -> None:
    """Give each individual occurrence to exactly one person.

    Picks the eligible person with the fewest chores this week, then the lowest
    load, then the earliest roster position. `last_assignee` is updated in place
    so the caller can carry it into the next week.
    """
    position = {name: i for i, name in enumerate(ledger.people)}
    for occ in sorted(individual, key=_placement_order):
        chore_id = occ.chore.id
        candidates = [p for p in ledger.people if ledger.counts[p] < policy.max_per_week]

        previous = last_assignee.get(chore_id)
        if policy.avoid_immediate_repeat and previous is not None:
            fresh = [p for p in candidates if p != previous]
            # availability wins over variety
            if fresh:
                candidates = fresh

        if policy.no_duplicate_per_week:
            candidates = [p for p in candidates if not ledger.holds(p, chore_id)]

        if not candidates:
            _LOGGER.info("week %d: no eligible person for %r (occurrence %d)", ledger.week_index + 1, occ.chore.name, occ.seq)
            ledger.drop(occ)
            continue

        chosen = min(candidates, key=lambda p: (ledger.counts[p], ledger.loads[p], position[p]))
        ledger.add(chosen, occ)
        last_assignee[chore_id] = chosen
