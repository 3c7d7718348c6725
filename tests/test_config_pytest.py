import importlib
from pathlib import Path

import pytest

import chore_balancer.config as config_mod
from chore_balancer import load_default_config


@pytest.fixture
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Patch HOME env, reload module, create config_dir, yield."""
    test_home = tmp_path / "fake_home"
    monkeypatch.setenv("HOME", str(test_home))
    importlib.reload(config_mod)
    config_dir = config_mod.DEFAULT_CONFIG_DIR  # Now uses fake HOME
    config_dir.mkdir(parents=True, exist_ok=True)
    yield config_dir
    importlib.reload(config_mod)  # Reset for next test


def test_config_exists_yaml(isolated_config):
    (isolated_config / "household.yaml").touch()
    assert config_mod.config_exists()


def test_config_exists_json(isolated_config):
    (isolated_config / "household.json").touch()
    assert config_mod.config_exists()


def test_config_exists_none(isolated_config):
    assert not config_mod.config_exists()


def test_get_config_path_yaml(isolated_config):
    yaml_path = isolated_config / "household.yaml"
    yaml_path.touch()
    assert config_mod.get_config_path() == yaml_path


def test_get_config_path_json_fallback(isolated_config):
    json_path = isolated_config / "household.json"
    json_path.touch()
    assert config_mod.get_config_path() == json_path


def test_get_config_path_default(isolated_config):
    assert config_mod.get_config_path() == config_mod.DEFAULT_CONFIG_FILE


def test_ensure_config_dir_creates(isolated_config):
    isolated_config.rmdir()
    assert not isolated_config.exists()
    result = config_mod.ensure_config_dir()
    assert result == isolated_config
    assert isolated_config.is_dir()


@pytest.mark.parametrize("name", ["household.yaml", "household.yml", "household.json"])
def test_dump_and_load(tmp_path, name):
    cfg = load_default_config()
    path = config_mod.dump_config(cfg, tmp_path / "nested" / name)
    assert path.exists()
    assert config_mod.load_config_file(path) == cfg


def test_yaml_is_block_style(tmp_path):
    path = config_mod.dump_config(load_default_config(), tmp_path / "household.yaml")
    text = path.read_text(encoding="utf-8")
    assert text.startswith("version: 1.0.0")
    assert "cadence: twice-weekly" in text


def test_quoted_weights_are_clamped_on_load(tmp_path):
    yaml_path = tmp_path / "household.yaml"
    yaml_path.write_text(
        "people:\n- name: Alice\nchores:\n- id: 1\n  name: Dishes\n  weight: '9'\n- id: 2\n  name: Trash\n  weight: '0'\n",
        encoding="utf-8",
    )
    assert [c.weight for c in config_mod.load_config_file(yaml_path).chores] == [5, 1]

    json_path = tmp_path / "household.json"
    json_path.write_text('{"people": [{"name": "Alice"}], "chores": [{"id": 1, "name": "Dishes", "weight": "7"}]}', encoding="utf-8")
    assert config_mod.load_config_file(json_path).chores[0].weight == 5
