"""Editing helpers for the chore catalog and roster of a household config.

Every function returns a new HouseholdConfigModel and leaves its input untouched.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import Cadence, Chore, HouseholdConfigModel, Person, Policy


def next_chore_id(chores: Iterable[Chore]) -> int:
    return max((c.id for c in chores), default=0) + 1


def _index_of(cfg: HouseholdConfigModel, chore_id: int) -> int:
    for i, chore in enumerate(cfg.chores):
        if chore.id == chore_id:
            return i
    raise KeyError(f"No chore with id {chore_id}")


def add_chore(
    cfg: HouseholdConfigModel,
    name: str,
    area: str | None = None,
    weight: int = 1,
    cadence: Cadence | str = Cadence.WEEKLY,
) -> tuple[HouseholdConfigModel, Chore]:
    """Append a chore under the next unused id."""
    chore = Chore(id=next_chore_id(cfg.chores), name=name, area=area, weight=weight, cadence=cadence)
    return cfg.model_copy(update={"chores": [*cfg.chores, chore]}), chore


def update_chore(cfg: HouseholdConfigModel, chore_id: int, **changes: object) -> HouseholdConfigModel:
    """Change name/area/weight/cadence of a chore while keeping its id."""
    if "id" in changes:
        raise ValueError("chore ids cannot be changed")
    i = _index_of(cfg, chore_id)
    data = cfg.chores[i].model_dump() | changes
    chores = list(cfg.chores)
    chores[i] = Chore.model_validate(data)
    return cfg.model_copy(update={"chores": chores})


def remove_chore(cfg: HouseholdConfigModel, chore_id: int) -> HouseholdConfigModel:
    i = _index_of(cfg, chore_id)
    return cfg.model_copy(update={"chores": cfg.chores[:i] + cfg.chores[i + 1 :]})


def add_person(cfg: HouseholdConfigModel, person: Person) -> HouseholdConfigModel:
    if any(p.name == person.name for p in cfg.people):
        raise ValueError(f"Person '{person.name}' is already on the roster")
    return cfg.model_copy(update={"people": [*cfg.people, person]})


def remove_person(cfg: HouseholdConfigModel, name: str) -> HouseholdConfigModel:
    people = [p for p in cfg.people if p.name != name]
    if len(people) == len(cfg.people):
        raise KeyError(f"No person named '{name}'")
    return cfg.model_copy(update={"people": people})


def update_policy(cfg: HouseholdConfigModel, cycle_weeks: int | None = None, **changes: object) -> HouseholdConfigModel:
    """Change allocation settings. The per-week maximum may never drop below the minimum."""
    policy = Policy.model_validate(cfg.policy.model_dump() | changes)
    if policy.max_per_week < policy.min_per_week:
        raise ValueError(f"max_per_week ({policy.max_per_week}) is below min_per_week ({policy.min_per_week})")
    update: dict[str, object] = {"policy": policy}
    if cycle_weeks is not None:
        if cycle_weeks < 1:
            raise ValueError(f"cycle length must be at least 1 week, got {cycle_weeks}")
        update["cycle_weeks"] = cycle_weeks
    return cfg.model_copy(update=update)
