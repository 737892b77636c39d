from __future__ import annotations

import asyncio
import io

import pytest

from beadreader.color_catalog import ColorCatalog
from beadreader.runtime.cues import (
    ConsoleCuePlayer,
    Cue,
    CueKind,
    CueSlot,
    NullCuePlayer,
)


@pytest.mark.parametrize(
    ("cue", "identifier"),
    [
        (Cue.color("Light Blue"), "colors/light blue"),
        (Cue.count(10), "numbers/10"),
        (Cue.count(0), "numbers/0"),
        (Cue.pattern_complete(), "patterncomplete"),
    ],
)
def test_cue_identifiers(cue: Cue, identifier: str) -> None:
    assert cue.identifier == identifier


def test_cue_factories_set_kind() -> None:
    assert Cue.color("red").kind is CueKind.COLOR
    assert Cue.count(3) == Cue(CueKind.COUNT, "3")


def test_slot_begin_supersedes_previous_handle() -> None:
    async def _exercise() -> None:
        slot = CueSlot()
        first = slot.begin()
        second = slot.begin()

        assert first.done() and first.result() is False
        assert slot.active
        assert slot.finish(first) is False
        assert slot.finish(second) is True
        assert second.result() is True
        assert not slot.active

    asyncio.run(_exercise())


def test_slot_stop_is_idempotent_and_cancels_timer() -> None:
    async def _exercise() -> None:
        slot = CueSlot()
        handle = slot.begin()
        slot.finish_later(handle, 0.01)

        slot.stop()
        slot.stop()
        await asyncio.sleep(0.03)

        assert handle.result() is False
        assert slot.finish(handle) is False

    asyncio.run(_exercise())


def test_slot_finish_later_resolves_current_handle() -> None:
    async def _exercise() -> bool:
        slot = CueSlot()
        handle = slot.begin()
        slot.finish_later(handle, 0)
        return await handle

    assert asyncio.run(_exercise()) is True


def test_console_player_writes_identifiers() -> None:
    stream = io.StringIO()
    player = ConsoleCuePlayer(stream, cue_duration=0)

    async def _exercise() -> list[bool]:
        return [
            await player.play_cue(Cue.color("Red")),
            await player.play_cue(Cue.count(4)),
        ]

    assert asyncio.run(_exercise()) == [True, True]
    assert stream.getvalue() == "colors/red\nnumbers/4\n"


def test_console_player_fails_colors_missing_from_catalog() -> None:
    stream = io.StringIO()
    catalog = ColorCatalog({"red": (1.0, 0.0, 0.0, 1.0)})
    player = ConsoleCuePlayer(stream, cue_duration=0, catalog=catalog)

    async def _exercise() -> list[bool]:
        return [
            await player.play_cue(Cue.color("purple")),
            await player.play_cue(Cue.color("red")),
            await player.play_cue(Cue.count(12)),
        ]

    assert asyncio.run(_exercise()) == [False, True, True]
    assert stream.getvalue() == "colors/red\nnumbers/12\n"


def test_console_player_stop_current_reports_not_finished() -> None:
    player = ConsoleCuePlayer(io.StringIO(), cue_duration=10)

    async def _exercise() -> bool:
        pending = asyncio.ensure_future(player.play_cue(Cue.count(1)))
        await asyncio.sleep(0)
        player.stop_current()
        player.stop_current()
        return await pending

    assert asyncio.run(_exercise()) is False


def test_null_player_always_finishes() -> None:
    player = NullCuePlayer()

    assert asyncio.run(player.play_cue(Cue.pattern_complete())) is True
    player.stop_current()
