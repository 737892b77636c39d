"""Decoded bead pattern model shared by the loader and the playback scheduler."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterator, List, Sequence, Tuple


@dataclass(slots=True, eq=False)
class Bead:
    """One color run within a pattern.

    ``identity`` is the bead's 0-based position in the authored sequence. The
    ``read`` flag is the only field that changes once the pattern is built.
    """

    identity: int
    color: str
    count: int
    read: bool = False

    def __repr__(self) -> str:
        marker = "x" if self.read else " "
        return f"Bead(#{self.identity} [{marker}] {self.color} x{self.count})"


@dataclass(frozen=True)
class Pattern:
    """Ordered beads plus the layout metadata that travels with them."""

    name: str
    columns: int
    rows: int
    beads: Tuple[Bead, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "beads", tuple(self.beads))
        for index, bead in enumerate(self.beads):
            if bead.identity != index:
                raise ValueError(
                    f"bead identities must be dense: position {index} holds #{bead.identity}"
                )

    def __iter__(self) -> Iterator[Bead]:
        return iter(self.beads)

    def __getitem__(self, index: int) -> Bead:
        return self.beads[index]

    @property
    def bead_count(self) -> int:
        return len(self.beads)

    @property
    def total_beads(self) -> int:
        """Physical beads strung across every color run."""

        return sum(max(0, bead.count) for bead in self.beads)

    @property
    def is_empty(self) -> bool:
        return not self.beads

    def clear_read_flags(self) -> None:
        for bead in self.beads:
            bead.read = False


EMPTY_PATTERN = Pattern(name="", columns=0, rows=0)


class BeadPlaybackState(Enum):
    """Where a bead sits relative to the playback cursor."""

    READ = auto()
    CURRENT = auto()
    UNREAD = auto()


@dataclass(frozen=True)
class GridCell:
    """A single physical bead position within the rendered grid."""

    bead: Bead
    position: int = field(default=0)


def build_grid(pattern: Pattern) -> List[GridCell]:
    """Expand ``pattern`` into grid cells laid out in right-to-left rows.

    Each bead contributes ``count`` cells in stringing order. Rows hold
    ``pattern.columns`` cells and are reversed; without a positive column
    count the linear order is returned.
    """

    linear: List[GridCell] = []
    for bead in pattern.beads:
        for _ in range(max(0, bead.count)):
            linear.append(GridCell(bead=bead, position=len(linear)))

    columns = pattern.columns
    if columns <= 0:
        return linear

    cells: List[GridCell] = []
    for row_start in range(0, len(linear), columns):
        row: Sequence[GridCell] = linear[row_start : row_start + columns]
        cells.extend(reversed(row))
    return cells


def color_totals(pattern: Pattern) -> Dict[str, int]:
    """Return the physical bead count for each color in first-seen order."""

    totals: Dict[str, int] = {}
    for bead in pattern.beads:
        totals[bead.color] = totals.get(bead.color, 0) + max(0, bead.count)
    return totals


__all__ = [
    "Bead",
    "BeadPlaybackState",
    "EMPTY_PATTERN",
    "GridCell",
    "Pattern",
    "build_grid",
    "color_totals",
]
