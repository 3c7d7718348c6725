from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import render_config
from .models import HouseholdConfigModel, Person
from .resources import load_template


@dataclass(slots=True)
class InitParams:
    people: list[Person]
    template: str = "generic"
    outfile: Path = Path("household.yaml")
    overwrite: bool = False
    cycle_weeks: int | None = None


def parse_person(spec: str) -> Person:
    """Parse ``NAME`` or ``NAME:CONTACT`` as given on the command line."""
    name, _, contact = spec.partition(":")
    return Person(name=name.strip(), contact=contact.strip() or None)


def generate_config(params: InitParams) -> str:
    """Generate config content in the format specified by outfile extension."""
    base = load_template(params.template).model_dump(mode="json")
    base["people"] = [p.model_dump(mode="json") for p in params.people]
    if params.cycle_weeks is not None:
        base["cycle_weeks"] = params.cycle_weeks
    cfg = HouseholdConfigModel.model_validate(base)
    return render_config(cfg, params.outfile.suffix)


def write_config(params: InitParams) -> Path:
    if params.outfile.exists() and not params.overwrite:
        raise FileExistsError(f"Refusing to overwrite existing file: {params.outfile}")
    params.outfile.parent.mkdir(parents=True, exist_ok=True)
    params.outfile.write_text(generate_config(params), encoding="utf-8")
    return params.outfile
