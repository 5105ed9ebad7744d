"""Static coaching knowledge loaded from YAML and profile formatting helpers."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from app.config import get_settings
from app.models.schemas import ExperienceLevel, ExperienceUnit


DEFAULT_LEVEL = ExperienceLevel.BEGINNER.value


@lru_cache(maxsize=4)
def _load_pedagogy_file(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def load_pedagogy(path: Path | None = None) -> dict[str, Any]:
    """Return the pedagogy config (cached per path)."""

    if path is None:
        path = get_settings().pedagogy_config_path
    return _load_pedagogy_file(Path(path))


def _level_key(level: ExperienceLevel | str | None) -> str:
    if level is None:
        return DEFAULT_LEVEL
    return getattr(level, "value", level)


def _level_config(level: ExperienceLevel | str | None, config: dict[str, Any]) -> dict[str, Any]:
    levels = config.get("levels", {})
    key = _level_key(level)
    if key in levels:
        return levels[key]
    fallback = config.get("default_level", DEFAULT_LEVEL)
    return levels.get(fallback, {})


def get_pedagogical_context(level: ExperienceLevel | str | None = None, config: dict[str, Any] | None = None) -> str:
    """Technical principles and alert heuristics for a level."""

    config = config if config is not None else load_pedagogy()
    level_config = _level_config(level, config)
    sections = [level_config.get("technical", ""), level_config.get("alerts", "")]
    return "\n\n".join(section.strip() for section in sections if section)


def get_tone_guideline(level: ExperienceLevel | str | None = None, config: dict[str, Any] | None = None) -> str:
    config = config if config is not None else load_pedagogy()
    return str(_level_config(level, config).get("tone", "")).strip()


def format_level(level: ExperienceLevel | str, config: dict[str, Any] | None = None) -> str:
    """Human-readable (Spanish) label for a level."""

    config = config if config is not None else load_pedagogy()
    key = _level_key(level)
    return str(config.get("levels", {}).get(key, {}).get("label", key))


def format_experience(value: int, unit: ExperienceUnit | str, config: dict[str, Any] | None = None) -> str:
    """E.g. ``1 año`` / ``6 meses``."""

    config = config if config is not None else load_pedagogy()
    key = getattr(unit, "value", unit)
    singular, plural = config.get("experience_units", {}).get(key, [key, key])
    return f"{value} {singular if value == 1 else plural}"
