from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .cadence import is_group_cadence, monthly_ranks, occurrences
from .models import Chore


@dataclass(frozen=True, slots=True)
class Occurrence:
    chore: Chore
    week_index: int
    seq: int = 0  # numbers repeats of the same chore within one week


@dataclass(slots=True)
class WeekOccurrences:
    week_index: int
    group: list[Occurrence] = field(default_factory=list)
    individual: list[Occurrence] = field(default_factory=list)


def expand_week(catalog: Sequence[Chore], week_index: int, group_period: int = 4) -> WeekOccurrences:
    """Turn the catalog into the concrete occurrences due in one week.

    Group-cadence chores land in `group`, everything else in `individual`.
    Catalog order is preserved within each list.
    """
    ranks = monthly_ranks(catalog)
    out = WeekOccurrences(week_index=week_index)
    for chore in catalog:
        n = occurrences(chore, week_index, rank=ranks.get(chore.id, 0), group_period=group_period)
        target = out.group if is_group_cadence(chore) else out.individual
        target.extend(Occurrence(chore=chore, week_index=week_index, seq=i) for i in range(n))
    return out
