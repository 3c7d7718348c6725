from __future__ import annotations

import json
from pathlib import Path

import yaml

from .models import HouseholdConfigModel

# Default config location following XDG Base Directory specification
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "chore-balancer"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "household.yaml"

_YAML_SUFFIXES = (".yaml", ".yml")


def get_config_path() -> Path:
    """
    Get the path to the user's household config file.

    Returns ~/.config/chore-balancer/household.yaml, or household.json when
    only the JSON variant exists.
    """
    yaml_path = DEFAULT_CONFIG_DIR / "household.yaml"
    json_path = DEFAULT_CONFIG_DIR / "household.json"

    if yaml_path.exists():
        return yaml_path
    elif json_path.exists():
        return json_path
    else:
        return DEFAULT_CONFIG_FILE


def ensure_config_dir() -> Path:
    """Ensure the config directory exists, creating it if necessary."""
    DEFAULT_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return DEFAULT_CONFIG_DIR


def config_exists() -> bool:
    """Check if a config file exists at the default location (YAML or JSON)."""
    yaml_path = DEFAULT_CONFIG_DIR / "household.yaml"
    json_path = DEFAULT_CONFIG_DIR / "household.json"
    return yaml_path.exists() or json_path.exists()


def load_config_file(path: Path) -> HouseholdConfigModel:
    """Load a household config, detecting the format by extension."""
    content = path.read_text(encoding="utf-8")
    if path.suffix in _YAML_SUFFIXES:
        return HouseholdConfigModel.model_validate(yaml.safe_load(content))
    return HouseholdConfigModel.model_validate_json(content)


def render_config(cfg: HouseholdConfigModel, suffix: str) -> str:
    data = cfg.model_dump(mode="json")
    if suffix in _YAML_SUFFIXES:
        # Use block style for better readability
        return yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True, width=120, indent=2)
    return json.dumps(data, indent=2)


def dump_config(cfg: HouseholdConfigModel, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_config(cfg, path.suffix), encoding="utf-8")
    return path
