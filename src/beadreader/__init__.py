"""Decode bead patterns and play them back one color run at a time."""
from __future__ import annotations

from . import color_catalog as _color_catalog
from . import errors as _errors
from . import inflate as _inflate
from . import itxt as _itxt
from . import pattern as _pattern
from . import pattern_loader as _pattern_loader
from . import pattern_parser as _pattern_parser
from . import png_container as _png_container
from . import runtime as _runtime
from . import settings as _settings

__version__ = "0.1.0"

_modules = [
    _errors,
    _png_container,
    _itxt,
    _inflate,
    _pattern,
    _pattern_parser,
    _pattern_loader,
    _settings,
    _color_catalog,
    _runtime,
]

__all__: list[str] = []
for _module in _modules:
    for _name in _module.__all__:
        if _name not in __all__:
            __all__.append(_name)
        globals()[_name] = getattr(_module, _name)


def __dir__() -> list[str]:
    return sorted(__all__)
