from __future__ import annotations
from importlib import resources
from typing import List
from .models import HouseholdConfigModel

_DATA_DIR = "data"
_TEMPLATE_INDEX = {
    "generic": "household.generic.json",
    "couple": "household.couple.json",
}


def list_templates() -> List[str]:
    return list(_TEMPLATE_INDEX.keys())


def _template_text(key: str) -> str:
    return (
        resources.files(__package__)
        .joinpath(_DATA_DIR)
        .joinpath(_TEMPLATE_INDEX[key])
        .read_text(encoding="utf-8")
    )


def default_config_text() -> str:
    return _template_text("generic")


def load_default_config() -> HouseholdConfigModel:
    return HouseholdConfigModel.model_validate_json(default_config_text())


def load_template(name: str) -> HouseholdConfigModel:
    key = name.strip().lower()
    if key not in _TEMPLATE_INDEX:
        raise ValueError(f"Unknown template '{name}'. Available: {', '.join(list_templates())}")
    return HouseholdConfigModel.model_validate_json(_template_text(key))
