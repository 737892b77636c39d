from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from beadreader.settings import (
    DEFAULT_CUE_GAP,
    DEFAULT_SPEED,
    PlaybackSettings,
    SettingsError,
    load_playback_settings,
)


def write_config(tmp_path: Path, body: str) -> Path:
    config_path = tmp_path / "playback.toml"
    config_path.write_text(textwrap.dedent(body), encoding="utf-8")
    return config_path


def test_missing_playback_table_uses_defaults(tmp_path: Path) -> None:
    config_path = write_config(tmp_path, "[other]\nvalue = 1\n")

    settings = load_playback_settings(config_path)

    assert settings == PlaybackSettings(DEFAULT_SPEED, DEFAULT_CUE_GAP, False)


def test_load_playback_settings_reads_every_field(tmp_path: Path) -> None:
    config_path = write_config(
        tmp_path,
        """
        [playback]
        speed = 2
        cue_gap = 0.25
        play_by_bead = true
        """,
    )

    settings = load_playback_settings(config_path)

    assert settings.speed == 2.0
    assert isinstance(settings.speed, float)
    assert settings.cue_gap == 0.25
    assert settings.play_by_bead is True


def test_numeric_strings_are_accepted(tmp_path: Path) -> None:
    config_path = write_config(
        tmp_path,
        """
        [playback]
        speed = " 0.75 "
        cue_gap = "0"
        """,
    )

    settings = load_playback_settings(config_path)

    assert (settings.speed, settings.cue_gap) == (0.75, 0.0)


@pytest.mark.parametrize(
    "body",
    [
        "[playback]\nspeed = 0\n",
        "[playback]\nspeed = -1.5\n",
        "[playback]\nspeed = true\n",
        "[playback]\nspeed = \"fast\"\n",
        "[playback]\nspeed = [1]\n",
        "[playback]\ncue_gap = -0.1\n",
        "[playback]\nplay_by_bead = 1\n",
        "playback = 3\n",
        "[playback\n",
    ],
)
def test_invalid_settings_raise(tmp_path: Path, body: str) -> None:
    config_path = write_config(tmp_path, body)

    with pytest.raises(SettingsError):
        load_playback_settings(config_path)


def test_missing_file_raises_os_error(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        load_playback_settings(tmp_path / "absent.toml")


def test_with_overrides_returns_validated_copy() -> None:
    original = PlaybackSettings(speed=1.0, cue_gap=0.5, play_by_bead=True)

    updated = original.with_overrides(speed=3)
    unchanged = original.with_overrides()

    assert updated == PlaybackSettings(speed=3.0, cue_gap=0.5, play_by_bead=True)
    assert original.speed == 1.0
    assert unchanged == original
    assert unchanged is not original


def test_with_overrides_rejects_invalid_values() -> None:
    with pytest.raises(SettingsError):
        PlaybackSettings().with_overrides(speed=0)
    with pytest.raises(SettingsError):
        PlaybackSettings().with_overrides(cue_gap=-1)
