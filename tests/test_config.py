"""Tests for crml config loading."""

import json
from pathlib import Path

import pytest
import yaml

from crml.config import CrmlConfig, find_config_file, load_config, save_config
from crml.errors import ConfigError


def test_defaults():
    config = CrmlConfig()
    assert config.root_dir == Path("templates")
    assert config.output_dir == Path("src/crml")
    assert config.include == []
    assert config.dialect == "rust"
    assert config.extension == ".crml"


def test_load_json(tmp_path):
    path = tmp_path / "crml.json"
    path.write_text(
        json.dumps(
            {
                "root_dir": "tpl",
                "output_dir": "out",
                "include": [["index", "IndexProps"], ["about", "AboutProps"]],
            }
        )
    )

    config = load_config(path)
    assert config.root_dir == tmp_path / "tpl"
    assert config.output_dir == tmp_path / "out"
    assert config.include == [("index", "IndexProps"), ("about", "AboutProps")]


def test_load_yaml(tmp_path):
    path = tmp_path / "crml.yaml"
    path.write_text(
        yaml.safe_dump({"dialect": "python", "include": [["index", "Page"]]})
    )

    config = load_config(path)
    assert config.dialect == "python"
    assert config.root_dir == tmp_path / "templates"


def test_absolute_paths_are_kept(tmp_path):
    out = tmp_path / "elsewhere"
    path = tmp_path / "conf" / "crml.json"
    path.parent.mkdir()
    path.write_text(json.dumps({"output_dir": str(out)}))

    assert load_config(path).output_dir == out


def test_empty_yaml_uses_defaults(tmp_path):
    path = tmp_path / "crml.yaml"
    path.write_text("")

    assert load_config(path).include == []


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "crml.json")


def test_invalid_json(tmp_path):
    path = tmp_path / "crml.json"
    path.write_text("{not json")

    with pytest.raises(ConfigError):
        load_config(path)


def test_invalid_dialect(tmp_path):
    path = tmp_path / "crml.json"
    path.write_text(json.dumps({"dialect": "go"}))

    with pytest.raises(ConfigError):
        load_config(path)


def test_top_level_must_be_mapping(tmp_path):
    path = tmp_path / "crml.yaml"
    path.write_text("- a\n- b\n")

    with pytest.raises(ConfigError):
        load_config(path)


def test_find_config_file_in_parent(tmp_path):
    config_path = tmp_path / "crml.yaml"
    config_path.write_text("include: []\n")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    assert find_config_file(nested) == config_path


def test_save_and_load(tmp_path):
    path = tmp_path / "crml.json"
    save_config(CrmlConfig(include=[("index", "IndexProps")], dialect="python"), path)

    data = json.loads(path.read_text())
    assert data["include"] == [["index", "IndexProps"]]
    assert data["root_dir"] == "templates"

    config = load_config(path)
    assert config.dialect == "python"
    assert config.include == [("index", "IndexProps")]
