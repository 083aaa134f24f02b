"""Action and binding storage behind the per-mode command tables."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, Optional

from modal_engine.runtime.telemetry import SpanHandle, span

from .models import ActionRef, Binding


@dataclass(slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    modes: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """A binding would shadow another one reachable under the same flags."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        self.binding = binding
        self.conflicts = tuple(conflicts)
        taken = ", ".join(existing.id for existing in self.conflicts)
        super().__init__(f"{binding.mode} binding '{binding.id}' clashes with {taken}")


class KeymapRegistry:
    """Actions by id, and bindings grouped by mode and key sequence.

    Every change to the bindings bumps :meth:`revision`, which resolvers use
    to decide when their cached command tables are stale.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        # mode -> key signature -> binding ids
        self._by_mode: Dict[str, Dict[str, set[str]]] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_action(self, action_id: str) -> ActionRef:
        action = self._actions.get(action_id)
        if action is None:
            raise KeyError(f"No action registered as '{action_id}'")
        return action

    def get_binding(self, binding_id: str) -> Binding:
        binding = self._bindings.get(binding_id)
        if binding is None:
            raise KeyError(f"No binding registered as '{binding_id}'")
        return binding

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        with self._span("keymaps::register_action", action_id=action.id):
            if action.id in self._actions and not replace:
                raise ValueError(f"Action '{action.id}' already registered")
            self._actions[action.id] = action
        return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        """Add ``binding`` to its mode's table.

        With ``replace`` any clashing binding, and any binding already using
        the same id, is dropped first; otherwise a clash raises
        :class:`KeymapConflictError`.
        """

        with self._span(
            "keymaps::register_binding", binding_id=binding.id, mode=binding.mode
        ) as handle:
            if binding.action_id not in self._actions:
                handle.add_metadata("missing_action", binding.action_id)
                raise KeyError(
                    f"Binding '{binding.id}' points at unknown action '{binding.action_id}'"
                )

            clashes = self.detect_conflicts(binding)
            if replace:
                stale = {clash.id for clash in clashes}
                if binding.id in self._bindings:
                    stale.add(binding.id)
                for binding_id in stale:
                    self._drop(binding_id)
            elif clashes:
                handle.add_metadata("conflicts", ",".join(c.id for c in clashes))
                raise KeymapConflictError(binding, clashes)
            elif binding.id in self._bindings:
                raise ValueError(f"Binding id '{binding.id}' already registered")

            self._bindings[binding.id] = binding
            signatures = self._by_mode.setdefault(binding.mode, {})
            signatures.setdefault(binding.key_signature, set()).add(binding.id)
            self._revision += 1
        return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        with self._span("keymaps::unregister_binding", binding_id=binding_id):
            if binding_id not in self._bindings:
                return None
            binding = self._drop(binding_id)
            self._revision += 1
        return binding

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[Binding]:
        if mode is None:
            yield from self._bindings.values()
            return
        for ids in self._by_mode.get(mode, {}).values():
            for binding_id in sorted(ids):
                yield self._bindings[binding_id]

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            modes=tuple(sorted(self._by_mode)),
        )

    def detect_conflicts(self, binding: Binding) -> list[Binding]:
        same_keys = self._by_mode.get(binding.mode, {}).get(binding.key_signature, ())
        return [
            self._bindings[other_id]
            for other_id in sorted(same_keys)
            if _reachable_together(binding, self._bindings[other_id])
        ]

    def _drop(self, binding_id: str) -> Binding:
        binding = self._bindings.pop(binding_id)
        signatures = self._by_mode.get(binding.mode, {})
        ids = signatures.get(binding.key_signature)
        if ids is not None:
            ids.discard(binding_id)
            if not ids:
                del signatures[binding.key_signature]
        if not signatures:
            self._by_mode.pop(binding.mode, None)
        return binding

    def _span(self, name: str, **metadata: Any) -> AbstractContextManager[SpanHandle]:
        return span(
            name,
            logger_name=self._logger_name,
            component="keymaps",
            metadata=metadata,
        )


def _reachable_together(left: Binding, right: Binding) -> bool:
    """True when some flag assignment lets both bindings match."""

    if not left.when and not right.when:
        return True
    if not left.when or not right.when:
        # An unconditional binding only clashes with another unconditional one.
        return False
    left_map, right_map = left.when_map, right.when_map
    if any(
        flag in right_map and right_map[flag] != wanted
        for flag, wanted in left_map.items()
    ):
        return False
    return left_map == right_map


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
]
