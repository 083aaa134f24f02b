"""Declarative keymap registry and per-mode command tables.

The built-in bindings live in :mod:`modal_engine.keymaps.defaults`, which
depends on the action modules and is therefore imported on demand.
"""

from .models import ActionRef, Binding, KeyEvent, KeySequence, WhenClause
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import CommandTable, KeymapResolver, ResolutionMatch, ResolutionResult

__all__ = [
    "ActionRef",
    "Binding",
    "KeyEvent",
    "KeySequence",
    "WhenClause",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "CommandTable",
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
]
