"""Per-mode command table lookup with telemetry instrumentation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Literal, Mapping, Optional

from modal_engine.runtime.telemetry import span

from .models import ActionRef, Binding, KeyEvent
from .registry import KeymapRegistry

if TYPE_CHECKING:
    from modal_engine.modes.pending import PendingKeyBuffer


@dataclass(slots=True)
class CommandTable:
    """Bindings of one mode indexed by the token of their final key."""

    mode: str
    by_last: Dict[str, list[Binding]] = field(default_factory=dict)
    prefixes: set[str] = field(default_factory=set)

    def add_binding(self, binding: Binding) -> None:
        sequence = binding.sequence
        self.by_last.setdefault(sequence.last.token, []).append(binding)
        if sequence.prefix is not None:
            self.prefixes.add(sequence.prefix.token)


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding paired with its action."""

    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome returned from the resolver.

    ``is_prefix`` marks a miss on a key that opens a two-key command in the
    mode, i.e. a key worth holding as pending.
    """

    status: Literal["match", "miss"]
    match: Optional[ResolutionMatch] = None
    is_prefix: bool = False


class KeymapResolver:
    """Builds mode-specific command tables and resolves single key events."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._cache: Dict[str, tuple[int, CommandTable]] = {}

    @property
    def registry(self) -> KeymapRegistry:
        return self._registry

    def resolve(
        self,
        mode: str,
        key: KeyEvent,
        *,
        pending: Optional["PendingKeyBuffer"] = None,
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        """Match ``key`` against ``mode``'s table.

        Two-key bindings only match when ``pending`` holds their first key;
        they win over single-key bindings on the same final key.
        """

        ctx = context or {}
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"mode": mode, "key": key.token},
        ) as handle:
            table = self._ensure_table(mode)
            candidates = sorted(
                table.by_last.get(key.token, ()),
                key=lambda b: (-len(b.sequence.strokes), -b.priority, b.id),
            )
            for binding in candidates:
                if not binding.allows(ctx):
                    continue
                prefix = binding.sequence.prefix
                if prefix is not None and (
                    pending is None
                    or not pending.consume(key, prefix, binding.sequence.last)
                ):
                    continue
                action = self._registry.get_action(binding.action_id)
                handle.add_metadata("status", "match")
                handle.add_metadata("binding_id", binding.id)
                return ResolutionResult(
                    status="match",
                    match=ResolutionMatch(binding=binding, action=action),
                )

            handle.add_metadata("status", "miss")
            return ResolutionResult(
                status="miss", is_prefix=key.token in table.prefixes
            )

    def _ensure_table(self, mode: str) -> CommandTable:
        revision = self._registry.revision()
        cached = self._cache.get(mode)
        if cached and cached[0] == revision:
            return cached[1]

        table = CommandTable(mode=mode)
        for binding in self._registry.iter_bindings(mode):
            table.add_binding(binding)
        self._cache[mode] = (revision, table)
        return table


__all__ = [
    "CommandTable",
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
]
