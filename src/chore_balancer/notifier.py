from __future__ import annotations

from collections.abc import Sequence

from .models import CycleResult, Person, WeekAssignment


def _chore_line(name: str, area: str | None, weight: int, shared: bool) -> str:
    line = f"- {name}"
    if area:
        line += f" ({area})"
    line += f", weight {weight}"
    if shared:
        line += " [everyone]"
    return line


def compose_message(week: WeekAssignment, person: Person) -> str:
    """Build the plain-text weekly chore message for one person."""
    mine = week.for_person(person.name)
    count = week.counts.get(person.name, len(mine))
    load = week.loads.get(person.name, sum(a.weight for a in mine))

    lines = [f"Hi {person.name},", ""]
    if mine:
        lines.append(f"Your chores for week {week.week}:")
        lines.extend(_chore_line(a.chore_name, a.area, a.weight, a.shared) for a in mine)
    else:
        lines.append(f"You have no chores in week {week.week}.")
    lines.extend(["", f"Total: {count} chore{'s' if count != 1 else ''}, load {load}.", "Thanks!"])
    return "\n".join(lines)


def compose_cycle_messages(result: CycleResult, roster: Sequence[Person]) -> list[dict[str, object]]:
    """Draft one message per person with a contact address, for every week of the cycle."""
    out: list[dict[str, object]] = []
    for week in result.weeks:
        for person in roster:
            if not person.contact:
                continue
            out.append(
                {
                    "to": person.contact,
                    "week": week.week,
                    "subject": f"Chores for week {week.week}",
                    "body": compose_message(week, person),
                }
            )
    return out
