"""Time-paced playback of a bead pattern with pause, reset and seek."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum, auto
from typing import Awaitable, Callable, Iterator

from ..pattern import EMPTY_PATTERN, Bead, BeadPlaybackState, Pattern
from ..settings import PacingSource
from .cues import Cue, CuePlayer

LOGGER = logging.getLogger(__name__)

SleepCallable = Callable[[float], Awaitable[object]]
ChangeListener = Callable[["PlaybackScheduler"], None]

GROUPING_THRESHOLD = 20
GROUP_SIZE = 10


class PlaybackState(Enum):
    """Lifecycle phases of :class:`PlaybackScheduler`."""

    IDLE = auto()
    PLAYING = auto()
    PAUSED = auto()
    FINISHED = auto()


def announcement_groups(count: int) -> Iterator[int]:
    """Yield the amounts a bead count is announced in, one cue-group at a time.

    Counts above :data:`GROUPING_THRESHOLD` become full groups of
    :data:`GROUP_SIZE` followed by the remainder; smaller counts are announced
    whole.
    """

    if count > GROUPING_THRESHOLD:
        full_groups, remainder = divmod(count, GROUP_SIZE)
        for _ in range(full_groups):
            yield GROUP_SIZE
        yield remainder
        return
    yield count


class PlaybackScheduler:
    """Walk a :class:`Pattern` announcing each bead and waiting for the user.

    One asyncio task advances the cursor while the state is ``PLAYING``. Its
    only suspension points are cue playback and the paced waits, and
    :meth:`pause` cancels both together, so an interrupted bead is never marked
    read. The cursor ranges over ``0..bead_count`` inclusive.
    """

    def __init__(
        self,
        cue_player: CuePlayer,
        pacing: PacingSource,
        *,
        pattern: Pattern | None = None,
        sleep: SleepCallable | None = None,
        on_change: ChangeListener | None = None,
    ) -> None:
        self.cue_player = cue_player
        self.pacing = pacing
        self.on_change = on_change
        self._sleep: SleepCallable = sleep or asyncio.sleep
        self._pattern: Pattern = pattern if pattern is not None else EMPTY_PATTERN
        self._cursor = 0
        self._state = PlaybackState.IDLE
        self._task: asyncio.Task[None] | None = None
        self._pattern.clear_read_flags()

    # Queries ------------------------------------------------------------

    @property
    def pattern(self) -> Pattern:
        return self._pattern

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    @property
    def is_at_end(self) -> bool:
        return self._cursor >= self._pattern.bead_count

    @property
    def current_bead(self) -> Bead | None:
        if 0 <= self._cursor < self._pattern.bead_count:
            return self._pattern.beads[self._cursor]
        return None

    @property
    def has_completed_playback(self) -> bool:
        beads = self._pattern.beads
        return bool(beads) and all(bead.read for bead in beads)

    def playback_state_for(self, index: int) -> BeadPlaybackState:
        if index < self._cursor:
            return BeadPlaybackState.READ
        if index == self._cursor:
            return BeadPlaybackState.CURRENT
        return BeadPlaybackState.UNREAD

    # Model lifecycle ----------------------------------------------------

    def load(self, pattern: Pattern) -> None:
        """Replace the pattern and start over from the first bead."""

        self._pattern = pattern
        LOGGER.info("loaded pattern %r (%d beads)", pattern.name, pattern.bead_count)
        self.reset()

    def load_if_empty(self, pattern: Pattern) -> bool:
        if not self._pattern.is_empty:
            return False
        self.load(pattern)
        return True

    # Controls -----------------------------------------------------------

    def play(self) -> None:
        """Start or resume advancing from the current cursor.

        Ignored while already playing, once finished (call :meth:`reset`
        first), and when no beads are loaded.
        """

        if self._state in (PlaybackState.PLAYING, PlaybackState.FINISHED):
            return
        if self._pattern.is_empty:
            LOGGER.debug("play ignored: no beads loaded")
            return
        loop = asyncio.get_running_loop()
        self._state = PlaybackState.PLAYING
        self._task = loop.create_task(self._advance())
        LOGGER.debug("playback started at bead %d", self._cursor)
        self._notify()

    def pause(self) -> None:
        """Abandon the in-flight step, leaving cursor and read flags untouched."""

        if self._state is not PlaybackState.PLAYING:
            return
        self._state = PlaybackState.PAUSED
        self._cancel_step()
        LOGGER.debug("playback paused at bead %d", self._cursor)
        self._notify()

    def reset(self) -> None:
        """Stop playback, clear every read flag and rewind to the first bead."""

        self._cancel_step()
        self._pattern.clear_read_flags()
        self._cursor = 0
        self._state = PlaybackState.IDLE
        self._notify()

    def seek(self, identity: int) -> None:
        """Jump to bead ``identity``, marking it and every earlier bead read.

        Ignored while playing so it never races the advancing task.
        """

        if self._state is PlaybackState.PLAYING:
            LOGGER.debug("seek to %d ignored while playing", identity)
            return
        if not 0 <= identity < self._pattern.bead_count:
            raise IndexError(
                f"bead {identity} outside 0..{self._pattern.bead_count - 1}"
            )
        self._cursor = identity
        for bead in self._pattern.beads:
            bead.read = bead.identity <= identity
        if self._state in (PlaybackState.IDLE, PlaybackState.FINISHED):
            self._state = PlaybackState.PAUSED
        self._notify()

    def toggle(self) -> None:
        """Pause when playing, otherwise play (restarting a completed pattern)."""

        if self._state is PlaybackState.PLAYING:
            self.pause()
            return
        if self.has_completed_playback:
            self.reset()
        self.play()

    async def wait_stopped(self) -> None:
        """Wait until no advancement task is running."""

        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    # Advancement --------------------------------------------------------

    async def _advance(self) -> None:
        beads = self._pattern.beads
        try:
            while self._state is PlaybackState.PLAYING:
                if self._cursor >= len(beads):
                    await self._play(Cue.pattern_complete())
                    self._state = PlaybackState.FINISHED
                    LOGGER.info("pattern %r complete", self._pattern.name)
                    self._notify()
                    return

                bead = beads[self._cursor]
                for amount in announcement_groups(bead.count):
                    await self._play(Cue.color(bead.color))
                    gap = self.pacing.cue_gap
                    if gap > 0:
                        await self._sleep(gap)
                    await self._play(Cue.count(amount))
                    # Pacing is read per wait so speed changes apply to the next one.
                    await self._sleep(self.pacing.speed * amount)

                bead.read = True
                self._cursor += 1
                self._notify()
        except asyncio.CancelledError:
            LOGGER.debug("step for bead %d interrupted", self._cursor)
        except Exception:
            LOGGER.exception("playback step for bead %d failed", self._cursor)
        finally:
            if self._state is PlaybackState.PLAYING and asyncio.current_task() is self._task:
                self._state = PlaybackState.PAUSED
                self._notify_quietly()

    async def _play(self, cue: Cue) -> None:
        try:
            finished = await self.cue_player.play_cue(cue)
        except Exception:
            LOGGER.warning("cue %s raised; continuing", cue.identifier, exc_info=True)
            return
        if not finished:
            LOGGER.warning("cue %s did not finish; continuing", cue.identifier)

    def _cancel_step(self) -> None:
        task = self._task
        if task is not None and not task.done():
            task.cancel()
        self.cue_player.stop_current()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    def _notify_quietly(self) -> None:
        try:
            self._notify()
        except Exception:
            LOGGER.exception("change listener failed")


__all__ = [
    "ChangeListener",
    "GROUPING_THRESHOLD",
    "GROUP_SIZE",
    "PlaybackScheduler",
    "PlaybackState",
    "SleepCallable",
    "announcement_groups",
]
