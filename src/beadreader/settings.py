"""Playback pacing settings and their TOML loader."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Protocol

import tomllib


DEFAULT_SPEED = 1.5
DEFAULT_CUE_GAP = 0.4


class SettingsError(ValueError):
    """Raised when a settings file fails validation."""


class PacingSource(Protocol):
    """Anything the scheduler can read pacing values from."""

    speed: float
    cue_gap: float


@dataclass
class PlaybackSettings:
    """User-adjustable pacing; mutations apply to the next wait."""

    speed: float = DEFAULT_SPEED
    cue_gap: float = DEFAULT_CUE_GAP
    play_by_bead: bool = False

    def with_overrides(
        self, *, speed: float | None = None, cue_gap: float | None = None
    ) -> "PlaybackSettings":
        """Return a copy with any non-``None`` override applied."""

        updated = replace(self)
        if speed is not None:
            updated.speed = _coerce_speed(speed)
        if cue_gap is not None:
            updated.cue_gap = _coerce_gap(cue_gap)
        return updated


def load_playback_settings(config_path: Path) -> PlaybackSettings:
    """Parse and validate the ``[playback]`` table stored at ``config_path``."""

    try:
        with config_path.open("rb") as stream:
            raw_data = tomllib.load(stream)
    except tomllib.TOMLDecodeError as exc:
        raise SettingsError(f"{config_path}: {exc}") from exc

    playback = _parse_playback_section(raw_data)
    settings = PlaybackSettings()
    if "speed" in playback:
        settings.speed = _coerce_speed(playback["speed"])
    if "cue_gap" in playback:
        settings.cue_gap = _coerce_gap(playback["cue_gap"])
    if "play_by_bead" in playback:
        flag = playback["play_by_bead"]
        if not isinstance(flag, bool):
            raise SettingsError("playback.play_by_bead must be a boolean")
        settings.play_by_bead = flag
    return settings


def _parse_playback_section(data: Mapping[str, Any]) -> Mapping[str, Any]:
    playback = data.get("playback")
    if playback is None:
        return {}
    if not isinstance(playback, Mapping):
        raise SettingsError("[playback] section must be a mapping")
    return playback


def _coerce_number(raw: Any, field: str) -> float:
    if isinstance(raw, bool):
        raise SettingsError(f"playback.{field} must be a number")
    if isinstance(raw, (int, float)):
        return float(raw)
    if isinstance(raw, str):
        try:
            return float(raw.strip())
        except ValueError as exc:
            raise SettingsError(f"invalid playback.{field}: {raw!r}") from exc
    raise SettingsError(f"playback.{field} must be a number")


def _coerce_speed(raw: Any) -> float:
    speed = _coerce_number(raw, "speed")
    if not speed > 0.0:
        raise SettingsError(f"playback.speed must be positive, received {speed}")
    return speed


def _coerce_gap(raw: Any) -> float:
    gap = _coerce_number(raw, "cue_gap")
    if not gap >= 0.0:
        raise SettingsError(f"playback.cue_gap must not be negative, received {gap}")
    return gap


__all__ = [
    "DEFAULT_CUE_GAP",
    "DEFAULT_SPEED",
    "PacingSource",
    "PlaybackSettings",
    "SettingsError",
    "load_playback_settings",
]
