"""UI-agnostic modal text-editing command interpreter."""

__all__ = [
    "adapters",
    "buffer",
    "actions",
    "modes",
    "keymaps",
    "runtime",
    "host",
]

__version__ = "0.1.0"
