from __future__ import annotations

from pathlib import Path

import pytest

from sudokugen import config


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "config.toml"
    path.write_text(
        "[solver]\nhidden_singles = false\ntime_limit = 2.5\n\n[generator]\nbase_size = 2\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("SUDOKUGEN_CONFIG", str(path))
    config.reload()
    yield path
    config.reload()


def test_values_come_from_the_named_file(config_file: Path) -> None:
    assert config.get_section("generator.base_size") == 2
    assert config.get_section("solver") == {"hidden_singles": False, "time_limit": 2.5}


def test_missing_paths(config_file: Path) -> None:
    with pytest.raises(KeyError):
        config.get_section("generator.missing")
    assert config.get_section("pdf", {"rows": 1}) == {"rows": 1}


def test_solver_settings_from_file(config_file: Path) -> None:
    settings = config.solver_settings(env={})
    assert settings == config.SolverSettings(hidden_singles=False, time_limit=2.5)


def test_environment_overrides_file(config_file: Path) -> None:
    settings = config.solver_settings(
        env={"SUDOKUGEN_HIDDEN_SINGLES": "yes", "SUDOKUGEN_TIME_LIMIT": "0"}
    )
    assert settings.hidden_singles is True
    assert settings.time_limit is None


def test_unparseable_overrides_are_ignored(config_file: Path) -> None:
    settings = config.solver_settings(
        env={"SUDOKUGEN_HIDDEN_SINGLES": "maybe", "SUDOKUGEN_TIME_LIMIT": "soon"}
    )
    assert settings == config.SolverSettings(hidden_singles=False, time_limit=2.5)


def test_named_file_must_exist(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUDOKUGEN_CONFIG", str(tmp_path / "absent.toml"))
    config.reload()
    try:
        with pytest.raises(RuntimeError):
            config.get_config()
    finally:
        monkeypatch.delenv("SUDOKUGEN_CONFIG")
        config.reload()
