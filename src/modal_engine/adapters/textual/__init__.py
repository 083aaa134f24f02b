"""Textual host: adapter, key translation and the runnable app."""

from .controller import TextualUIHooks, TextualVimAdapter, key_event_from_textual

__all__ = ["TextualUIHooks", "TextualVimAdapter", "key_event_from_textual"]
