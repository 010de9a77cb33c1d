from __future__ import annotations

from pathlib import Path

import pytest

from backup_cli.errors import ModelNotFound, ModelParseError
from backup_cli.finder import ModelFinder
from backup_cli.model import BackupModel
from backup_cli.paths import PathOptions, resolve_paths
from backup_cli.runner import RunContext

from .conftest import write_config, write_model


@pytest.fixture()
def config_dir(tmp_path: Path, source_dir: Path) -> Path:
    config_dir = tmp_path / "conf"
    write_config(config_dir, compress=True, keep=3)
    for trigger in ("db_users", "db_orders", "web", "my_db_copy"):
        write_model(config_dir, trigger, [source_dir])
    return config_dir


def _context(tmp_path: Path, trigger: str) -> RunContext:
    root = tmp_path / "root"
    root.mkdir(exist_ok=True)
    return RunContext(trigger=trigger, time="2026.10.18.09.00.00", config=resolve_paths(PathOptions(root_path=str(root))))


def test_triggers_are_sorted(config_dir: Path) -> None:
    finder = ModelFinder(config_dir / "config.yml")

    assert finder.triggers() == ["db_orders", "db_users", "my_db_copy", "web"]


def test_match_is_anchored(config_dir: Path) -> None:
    finder = ModelFinder(config_dir / "config.yml")

    assert finder.match("db_*") == ["db_orders", "db_users"]
    assert finder.match("*db*") == ["db_orders", "db_users", "my_db_copy"]
    assert finder.match("*") == ["db_orders", "db_users", "my_db_copy", "web"]


def test_match_treats_other_characters_literally(config_dir: Path, source_dir: Path) -> None:
    write_model(config_dir, "a.b1", [source_dir])
    write_model(config_dir, "axb2", [source_dir])
    finder = ModelFinder(config_dir / "config.yml")

    assert finder.match("a.b*") == ["a.b1"]


def test_load_applies_config_defaults(config_dir: Path, tmp_path: Path) -> None:
    finder = ModelFinder(config_dir / "config.yml")

    model = finder.load("web", _context(tmp_path, "web"))

    assert isinstance(model, BackupModel)
    assert model.compress is True
    assert model.keep == 3
    assert model.extension == "tar.gz"
    assert model.label == "web (web)"


def test_load_unknown_trigger(config_dir: Path, tmp_path: Path) -> None:
    finder = ModelFinder(config_dir / "config.yml")

    with pytest.raises(ModelNotFound, match="ghost"):
        finder.load("ghost", _context(tmp_path, "ghost"))


def test_missing_config_file(tmp_path: Path) -> None:
    finder = ModelFinder(tmp_path / "nowhere" / "config.yml")

    with pytest.raises(ModelNotFound, match="configuration file"):
        finder.match("db_*")


def test_invalid_yaml_is_a_parse_error(config_dir: Path) -> None:
    (config_dir / "models" / "broken.yml").write_text("trigger: [unclosed", encoding="utf-8")
    finder = ModelFinder(config_dir / "config.yml")

    with pytest.raises(ModelParseError, match="Invalid YAML"):
        finder.triggers()


def test_model_without_archives_is_a_parse_error(config_dir: Path) -> None:
    write_model(config_dir, "empty", [])
    finder = ModelFinder(config_dir / "config.yml")

    with pytest.raises(ModelParseError, match="archive"):
        finder.triggers()


def test_duplicate_trigger_is_a_parse_error(config_dir: Path, source_dir: Path) -> None:
    duplicate = config_dir / "models" / "zz_copy.yml"
    duplicate.write_text((config_dir / "models" / "web.yml").read_text(encoding="utf-8"), encoding="utf-8")
    finder = ModelFinder(config_dir / "config.yml")

    with pytest.raises(ModelParseError, match="defined in both"):
        finder.triggers()


def test_undecodable_model_file_is_a_parse_error(config_dir: Path) -> None:
    (config_dir / "models" / "bad.yml").write_bytes(b"trigger: caf\xe9\narchives: [/tmp]\n")
    finder = ModelFinder(config_dir / "config.yml")

    with pytest.raises(ModelParseError, match="bad.yml"):
        finder.match("db_*")


def test_undecodable_config_file_is_a_parse_error(config_dir: Path) -> None:
    (config_dir / "config.yml").write_bytes(b"defaults:\n  keep: caf\xe9\n")
    finder = ModelFinder(config_dir / "config.yml")

    with pytest.raises(ModelParseError, match="config.yml"):
        finder.triggers()
