from __future__ import annotations

import logging
from dataclasses import dataclass

from .balancer import LastAssignees, WeekLedger
from .models import Policy

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RepairMove:
    week: int
    chore_id: int
    weight: int
    donor: str
    recipient: str


def total_deficit(ledger: WeekLedger, minimum: int) -> int:
    return sum(max(0, minimum - ledger.counts[p]) for p in ledger.people)


def _find_move(ledger: WeekLedger, policy: Policy) -> tuple[int, str] | None:
    """Pick the next (assignment index, recipient) pair, or None when nothing can move."""
    position = {name: i for i, name in enumerate(ledger.people)}
    minimum = policy.min_per_week
    below = sorted((p for p in ledger.people if ledger.counts[p] < minimum), key=lambda p: (ledger.counts[p], position[p]))
    above = sorted((p for p in ledger.people if ledger.counts[p] > minimum), key=lambda p: (-ledger.counts[p], position[p]))
    if not below or not above:
        return None

    for needy in below:
        for donor in above:
            movable = [
                (a.weight, i)
                for i, a in enumerate(ledger.assignments)
                if a.person == donor
                and not a.shared
                and not (policy.no_duplicate_per_week and ledger.holds(needy, a.chore_id))
            ]
            if movable:
                _, index = min(movable)
                return index, needy
    return None


def repair_bounds(ledger: WeekLedger, policy: Policy, last_assignee: LastAssignees | None = None) -> list[RepairMove]:
    """Shift movable chores from people above the weekly minimum to people below it.

    One move per round, lightest chore first, at most `policy.repair_max_rounds`
    rounds. Stops early once nobody is short, nobody has spare chores, or no
    eligible chore can move. Whatever is still out of bounds afterwards is left
    for the caller to inspect.
    """
    moves: list[RepairMove] = []
    for _ in range(policy.repair_max_rounds):
        found = _find_move(ledger, policy)
        if found is None:
            break
        index, recipient = found
        donor = ledger.assignments[index].person
        moved = ledger.move(index, recipient)
        if last_assignee is not None and last_assignee.get(moved.chore_id) == donor:
            last_assignee[moved.chore_id] = recipient
        moves.append(RepairMove(week=ledger.week_index + 1, chore_id=moved.chore_id, weight=moved.weight, donor=donor, recipient=recipient))
        _LOGGER.debug("week %d: moved %r from %s to %s", ledger.week_index + 1, moved.chore_name, donor, recipient)
    return moves
