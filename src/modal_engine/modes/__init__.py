"""Modes, transitions, operator composition and key dispatch.

:class:`~modal_engine.modes.controller.ModeController` lives in
:mod:`modal_engine.modes.controller` because it loads the default keymaps.
"""

from .base_mode import (
    Mode,
    ModeBus,
    ModeContext,
    ModeHandler,
    ModeKind,
    OPERATORS,
    Transition,
    TransitionKind,
)
from .cursor import constrain, normalize
from .insert_mode import InsertMode
from .normal_mode import NormalMode
from .operator_pipeline import OperatorCompositor, OperatorOutcome
from .pending import PendingKeyBuffer

__all__ = [
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeHandler",
    "ModeKind",
    "OPERATORS",
    "Transition",
    "TransitionKind",
    "constrain",
    "normalize",
    "InsertMode",
    "NormalMode",
    "OperatorCompositor",
    "OperatorOutcome",
    "PendingKeyBuffer",
]
