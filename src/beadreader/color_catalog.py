"""Color-name lookup table loaded from a structured-text color list."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterator, Mapping, Tuple
from xml.etree import ElementTree as ET

LOGGER = logging.getLogger(__name__)

RGBA = Tuple[float, float, float, float]

FALLBACK_COLOR: RGBA = (0.5, 0.5, 0.5, 1.0)

_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]{6}(?:[0-9A-Fa-f]{2})?")


class ColorCatalogError(ValueError):
    """Raised when a color list cannot be parsed."""


def parse_hex_color(text: str) -> RGBA | None:
    """Decode ``#RRGGBB`` or ``#RRGGBBAA`` into unit floats, or ``None``."""

    value = text.strip()
    if value.startswith("#"):
        value = value[1:]
    if not _HEX_DIGITS.fullmatch(value):
        return None
    number = int(value, 16)
    if len(value) == 6:
        number = (number << 8) | 0xFF
    return (
        ((number >> 24) & 0xFF) / 255,
        ((number >> 16) & 0xFF) / 255,
        ((number >> 8) & 0xFF) / 255,
        (number & 0xFF) / 255,
    )


class ColorCatalog:
    """Case-insensitive mapping from color names to RGBA tuples."""

    def __init__(self, colors: Mapping[str, RGBA] | None = None) -> None:
        self._colors: Dict[str, RGBA] = {
            name.lower(): rgba for name, rgba in (colors or {}).items()
        }

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._colors

    def __len__(self) -> int:
        return len(self._colors)

    def __iter__(self) -> Iterator[str]:
        return iter(self._colors)

    def color_for(self, name: str) -> RGBA:
        return self._colors.get(name.lower(), FALLBACK_COLOR)

    @classmethod
    def from_markup(cls, data: bytes | str) -> "ColorCatalog":
        """Parse ``<colors><color><name/><value/></color>...</colors>`` markup."""

        parser = ET.XMLPullParser(events=("start", "end"))
        colors: Dict[str, RGBA] = {}
        name = ""
        value = ""
        try:
            parser.feed(data)
            parser.close()
            for event, element in parser.read_events():
                tag = element.tag.rsplit("}", 1)[-1]
                if event == "start":
                    if tag == "color":
                        name, value = "", ""
                    continue
                text = (element.text or "").strip()
                if tag == "name":
                    name += text
                elif tag == "value":
                    value += text
                elif tag == "color":
                    rgba = parse_hex_color(value)
                    if rgba is None:
                        LOGGER.debug("skipping color %r with value %r", name, value)
                    else:
                        colors[name.lower()] = rgba
                    element.clear()
        except ET.ParseError as exc:
            raise ColorCatalogError(f"malformed color list: {exc}") from exc
        return cls(colors)


def load_color_catalog(path: Path) -> ColorCatalog:
    """Read the color list stored at ``path``."""

    catalog = ColorCatalog.from_markup(path.read_bytes())
    LOGGER.info("loaded %d colors from %s", len(catalog), path)
    return catalog


__all__ = [
    "ColorCatalog",
    "ColorCatalogError",
    "FALLBACK_COLOR",
    "RGBA",
    "load_color_catalog",
    "parse_hex_color",
]
