from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

# Named color presets for easy configuration
type NamedColor = Literal[
    "pink",
    "hot_pink",
    "blue",
    "midnight_blue",
    "light_blue",
    "sky_blue",
    "green",
    "pale_green",
    "forest_green",
    "purple",
    "lavender",
    "orange",
    "coral",
    "red",
    "crimson",
    "yellow",
    "gold",
    "gray",
    "grey",
]

type ColorValue = NamedColor | str  # Named color or hex string like "#FF1493"

MIN_WEIGHT = 1
MAX_WEIGHT = 5


class Cadence(StrEnum):
    WEEKLY = "weekly"
    TWICE_WEEKLY = "twice-weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"

    @classmethod
    def parse(cls, value: str) -> Cadence | None:
        key = value.strip().lower().replace("_", "-").replace(" ", "-")
        key = _CADENCE_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return None


_CADENCE_ALIASES = {
    "bi-weekly": "biweekly",
    "fortnightly": "biweekly",
    "twiceweekly": "twice-weekly",
}


class Person(BaseModel):
    name: str = Field(min_length=1)
    contact: str | None = Field(default=None, description="Address used for notification drafts")


class Chore(BaseModel):
    """A recurring task in the household catalog.

    Weights outside [1, 5] are clamped rather than rejected. Cadence values the
    resolver does not know are kept verbatim and simply never fall due.
    """

    id: int
    name: str = Field(min_length=1)
    area: str | None = None
    weight: int = Field(default=1, description="Relative effort, clamped to 1-5")
    cadence: Cadence | str = Cadence.WEEKLY

    @field_validator("weight")
    @classmethod
    def _clamp_weight(cls, v: int) -> int:
        return max(MIN_WEIGHT, min(MAX_WEIGHT, v))

    @field_validator("cadence", mode="before")
    @classmethod
    def _normalize_cadence(cls, v: object) -> object:
        if isinstance(v, str) and not isinstance(v, Cadence):
            return Cadence.parse(v) or v
        return v


class Policy(BaseModel):
    min_per_week: int = Field(default=1, ge=0)
    max_per_week: int = Field(default=3, ge=0)
    avoid_immediate_repeat: bool = True
    no_duplicate_per_week: bool = True
    group_period_weeks: Literal[4, 12] = Field(default=4, description="Quarterly chores fall due once every N weeks")
    repair_max_rounds: int = Field(default=100, ge=1)


class Assignment(BaseModel):
    person: str
    chore_id: int
    chore_name: str
    area: str | None = None
    weight: int
    shared: bool = Field(default=False, description="Group-cadence fan-out; never moved by repair")


class UnassignedOccurrence(BaseModel):
    week: int
    chore_id: int
    chore_name: str
    weight: int
    seq: int = 0


class UnmetBound(BaseModel):
    week: int
    person: str
    count: int
    minimum: int
    maximum: int


class WeekAssignment(BaseModel):
    week: int = Field(ge=1)
    assignments: list[Assignment] = Field(default_factory=list)
    loads: dict[str, int] = Field(default_factory=dict)
    counts: dict[str, int] = Field(default_factory=dict)
    unassigned: list[UnassignedOccurrence] = Field(default_factory=list)

    def for_person(self, name: str) -> list[Assignment]:
        return [a for a in self.assignments if a.person == name]


class CycleResult(BaseModel):
    weeks: list[WeekAssignment]
    policy: Policy

    def unassigned(self) -> list[UnassignedOccurrence]:
        return [u for w in self.weeks for u in w.unassigned]

    def unmet_bounds(self) -> list[UnmetBound]:
        lo, hi = self.policy.min_per_week, self.policy.max_per_week
        return [
            UnmetBound(week=w.week, person=person, count=count, minimum=lo, maximum=hi)
            for w in self.weeks
            for person, count in w.counts.items()
            if count < lo or count > hi
        ]

    def total_loads(self) -> dict[str, int]:
        totals: dict[str, int] = {}
        for w in self.weeks:
            for person, load in w.loads.items():
                totals[person] = totals.get(person, 0) + load
        return totals

    def total_counts(self) -> dict[str, int]:
        totals: dict[str, int] = {}
        for w in self.weeks:
            for person, count in w.counts.items():
                totals[person] = totals.get(person, 0) + count
        return totals


class VisualizationPalette(BaseModel):
    """Color palette for PNG cycle visualizations.

    Supports named colors (e.g., 'pink', 'blue') or hex strings (e.g., '#FF1493').
    People without an explicit color cycle through `rotation`.
    """

    people: dict[str, ColorValue] = Field(default_factory=dict, description="Per-person color overrides")
    rotation: list[ColorValue] = Field(
        default_factory=lambda: ["light_blue", "pale_green", "lavender", "gold", "coral", "pink"],
        description="Colors handed out in roster order to people without an override",
    )
    violation: ColorValue = Field(default="crimson", description="Outline for weeks outside the min/max bounds")


class HouseholdConfigModel(BaseModel):
    version: str = Field(default="1.0.0", description="Schema version for compatibility tracking")
    people: list[Person]
    chores: list[Chore] = Field(default_factory=list)
    policy: Policy = Field(default_factory=Policy)
    cycle_weeks: int = Field(default=4, ge=1)
    visualization: VisualizationPalette = Field(default_factory=VisualizationPalette, description="Color palette for PNG exports")

    @model_validator(mode="after")
    def _validate_identities(self) -> HouseholdConfigModel:
        names = [p.name for p in self.people]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ValueError(f"duplicate person names: {', '.join(dupes)}")
        ids = [c.id for c in self.chores]
        dupe_ids = sorted({i for i in ids if ids.count(i) > 1})
        if dupe_ids:
            raise ValueError(f"duplicate chore ids: {', '.join(map(str, dupe_ids))}")
        return self
