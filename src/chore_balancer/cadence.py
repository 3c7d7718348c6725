from __future__ import annotations

from collections.abc import Iterable

from .models import Cadence, Chore

MONTH_WEEKS = 4


def is_group_cadence(chore: Chore) -> bool:
    """Quarterly chores are done by everyone together in the week they fall due."""
    return chore.cadence == Cadence.QUARTERLY


def monthly_ranks(catalog: Iterable[Chore]) -> dict[int, int]:
    """Map chore id -> zero-based position among the monthly chores, in catalog order."""
    ranks: dict[int, int] = {}
    for chore in catalog:
        if chore.cadence == Cadence.MONTHLY:
            ranks[chore.id] = len(ranks)
    return ranks


def occurrences(chore: Chore, week_index: int, *, rank: int = 0, group_period: int = 4) -> int:
    """Resolve how many times a chore falls due in a given week of the cycle.

    Args:
        chore: Chore to resolve
        week_index: Zero-based week index within the cycle
        rank: The chore's position among monthly chores (see `monthly_ranks`);
            staggers monthly chores across the four-week sub-cycle
        group_period: Weeks between quarterly occurrences (4 or 12)

    Returns:
        Number of occurrences, 0 for unknown cadences
    """
    match chore.cadence:
        case Cadence.WEEKLY:
            return 1
        case Cadence.TWICE_WEEKLY:
            return 2
        case Cadence.BIWEEKLY:
            return 1 if week_index % 2 == 0 else 0
        case Cadence.MONTHLY:
            return 1 if week_index % MONTH_WEEKS == rank % MONTH_WEEKS else 0
        case Cadence.QUARTERLY:
            return 1 if week_index % group_period == 0 else 0
        case _:
            return 0
