"""Cue requests and the playback collaborators that announce them."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from enum import Enum, auto
from typing import IO, Protocol

from ..color_catalog import ColorCatalog

LOGGER = logging.getLogger(__name__)


class CueKind(Enum):
    """Families of announcement a cue can belong to."""

    COLOR = auto()
    COUNT = auto()
    PATTERN_COMPLETE = auto()


@dataclass(frozen=True)
class Cue:
    """A single announcement handed to a :class:`CuePlayer`."""

    kind: CueKind
    value: str = ""

    @classmethod
    def color(cls, name: str) -> "Cue":
        return cls(CueKind.COLOR, name.lower())

    @classmethod
    def count(cls, amount: int) -> "Cue":
        return cls(CueKind.COUNT, str(amount))

    @classmethod
    def pattern_complete(cls) -> "Cue":
        return cls(CueKind.PATTERN_COMPLETE)

    @property
    def identifier(self) -> str:
        if self.kind is CueKind.COLOR:
            return f"colors/{self.value}"
        if self.kind is CueKind.COUNT:
            return f"numbers/{self.value}"
        return "patterncomplete"


class CuePlayer(Protocol):
    """Collaborator that renders cues and reports when each one is done.

    ``play_cue`` resolves exactly once per call: ``True`` when the cue played
    to the end, ``False`` when it failed or was stopped. ``stop_current`` is
    idempotent and suppresses the completion of whatever was playing.
    """

    async def play_cue(self, cue: Cue) -> bool:
        ...

    def stop_current(self) -> None:
        ...


class CueSlot:
    """Single-slot handle for the cue currently in flight.

    Starting a new cue supersedes the previous handle before anything else
    happens, and each handle resolves at most once.
    """

    def __init__(self) -> None:
        self._current: asyncio.Future[bool] | None = None
        self._timer: asyncio.TimerHandle | None = None

    @property
    def active(self) -> bool:
        return self._current is not None and not self._current.done()

    def begin(self) -> asyncio.Future[bool]:
        """Stop any in-flight handle and return a fresh one."""

        self.stop()
        self._current = asyncio.get_running_loop().create_future()
        return self._current

    def finish(self, handle: asyncio.Future[bool], ok: bool = True) -> bool:
        """Resolve ``handle`` if it is still the current one."""

        if handle is not self._current or handle.done():
            return False
        self._clear_timer()
        self._current = None
        handle.set_result(ok)
        return True

    def finish_later(self, handle: asyncio.Future[bool], delay: float) -> None:
        """Resolve ``handle`` successfully after ``delay`` seconds."""

        self._clear_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(max(0.0, delay), self.finish, handle, True)

    def stop(self) -> None:
        """Resolve the current handle as stopped and forget it."""

        self._clear_timer()
        current, self._current = self._current, None
        if current is not None and not current.done():
            current.set_result(False)

    def _clear_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class ConsoleCuePlayer:
    """Write cue identifiers to a text stream and hold each for ``cue_duration``.

    When a :class:`ColorCatalog` is supplied, color cues for names missing from
    it are reported as failures, the same way a missing audio asset would be.
    """

    def __init__(
        self,
        stream: IO[str] | None = None,
        *,
        cue_duration: float = 0.6,
        catalog: ColorCatalog | None = None,
    ) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.cue_duration = cue_duration
        self.catalog = catalog
        self._slot = CueSlot()

    async def play_cue(self, cue: Cue) -> bool:
        handle = self._slot.begin()
        if (
            cue.kind is CueKind.COLOR
            and self.catalog is not None
            and cue.value not in self.catalog
        ):
            LOGGER.warning("no cue available for color %r", cue.value)
            self._slot.finish(handle, ok=False)
        else:
            self.stream.write(cue.identifier + "\n")
            self.stream.flush()
            self._slot.finish_later(handle, self.cue_duration)
        return await handle

    def stop_current(self) -> None:
        self._slot.stop()


class NullCuePlayer:
    """Complete every cue immediately without producing output."""

    async def play_cue(self, cue: Cue) -> bool:
        await asyncio.sleep(0)
        return True

    def stop_current(self) -> None:
        return None


__all__ = [
    "ConsoleCuePlayer",
    "Cue",
    "CueKind",
    "CuePlayer",
    "CueSlot",
    "NullCuePlayer",
]
