"""Utility helpers for loading project-wide configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import-untyped,no-redef]


_CONFIG_FILENAME = "config.toml"
_CONFIG_ENV = "SUDOKUGEN_CONFIG"


def _config_path() -> Path:
    override = os.environ.get(_CONFIG_ENV)
    if override:
        return Path(override)
    return Path(__file__).resolve().parents[2] / _CONFIG_FILENAME


@lru_cache(maxsize=1)
def get_config() -> Dict[str, Any]:
    """Load and cache the project configuration as a dictionary.

    Without ``SUDOKUGEN_CONFIG`` the file is looked up at the project root and
    a missing file simply means "all defaults".  A path named explicitly in
    the environment must exist.
    """

    path = _config_path()
    if not path.exists():
        if os.environ.get(_CONFIG_ENV):
            raise RuntimeError(f"Configuration file '{path}' named by {_CONFIG_ENV} was not found")
        return {}
    with path.open("rb") as fh:
        return tomllib.load(fh)


def reload() -> None:
    """Clear the cached configuration."""

    get_config.cache_clear()


def get_section(path: str, default: Any = None) -> Any:
    """Retrieve a nested configuration value using dotted notation."""

    data: Any = get_config()
    for part in path.split("."):
        if isinstance(data, dict) and part in data:
            data = data[part]
        else:
            if default is not None:
                return default
            raise KeyError(f"Configuration path '{path}' not found")
    return data


def _coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalised = value.strip().lower()
        if normalised in {"1", "true", "yes", "on"}:
            return True
        if normalised in {"0", "false", "no", "off"}:
            return False
    return None


def _coerce_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str) and value.strip():
        try:
            return float(value)
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class SolverSettings:
    """Solver options after merging ``config.toml`` with environment overrides."""

    hidden_singles: bool = True
    time_limit: Optional[float] = None


def solver_settings(env: Mapping[str, str] | None = None) -> SolverSettings:
    """Resolve solver options; the environment wins over the ``[solver]`` table."""

    env = os.environ if env is None else env
    section = get_section("solver", {})
    if not isinstance(section, dict):
        section = {}

    hidden = _coerce_bool(section.get("hidden_singles"))
    if hidden is None:
        hidden = True
    override = _coerce_bool(env.get("SUDOKUGEN_HIDDEN_SINGLES"))
    if override is not None:
        hidden = override

    time_limit = _coerce_float(section.get("time_limit"))
    env_limit = _coerce_float(env.get("SUDOKUGEN_TIME_LIMIT"))
    if env_limit is not None:
        time_limit = env_limit
    if time_limit is not None and time_limit <= 0:
        time_limit = None

    return SolverSettings(hidden_singles=hidden, time_limit=time_limit)


__all__ = ["SolverSettings", "get_config", "get_section", "reload", "solver_settings"]
