from __future__ import annotations

from modal_engine.keymaps import (
    ActionRef,
    Binding,
    KeyEvent,
    KeySequence,
    KeymapRegistry,
    KeymapResolver,
    WhenClause,
)
from modal_engine.modes.pending import PendingKeyBuffer


def make_action(action_id: str) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    binding_id: str,
    *,
    mode: str = "normal",
    keys: tuple[str, ...] = ("g", "g"),
    action_id: str = "core.test",
    when: tuple[WhenClause, ...] = (),
    priority: int = 0,
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.from_strings(*keys),
        action_id=action_id,
        when=when,
        priority=priority,
    )


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    action_ids = {binding.action_id for binding in bindings}
    for action_id in action_ids:
        registry.register_action(make_action(action_id))
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def test_resolver_matches_single_key() -> None:
    binding = make_binding("normal.G", keys=("G",))
    resolver = KeymapResolver(build_registry([binding]))

    result = resolver.resolve("normal", KeyEvent("G"))

    assert result.status == "match"
    assert result.match is not None
    assert result.match.binding.id == binding.id


def test_resolver_matches_two_key_sequence_through_pending() -> None:
    binding = make_binding("normal.gg")
    resolver = KeymapResolver(build_registry([binding]))
    pending = PendingKeyBuffer(KeyEvent("g"))

    result = resolver.resolve("normal", KeyEvent("g"), pending=pending)

    assert result.status == "match"
    assert result.match is not None
    assert result.match.binding.id == "normal.gg"
    assert pending.key is None


def test_resolver_reports_prefix_on_first_key() -> None:
    binding = make_binding("normal.gg")
    resolver = KeymapResolver(build_registry([binding]))

    result = resolver.resolve("normal", KeyEvent("g"), pending=PendingKeyBuffer())

    assert result.status == "miss"
    assert result.is_prefix is True


def test_resolver_prefers_two_key_binding_over_single_key() -> None:
    single = make_binding("normal.g", keys=("g",), action_id="core.single")
    double = make_binding("normal.gg", action_id="core.double")
    resolver = KeymapResolver(build_registry([single, double]))

    first = resolver.resolve("normal", KeyEvent("g"), pending=PendingKeyBuffer())
    second = resolver.resolve(
        "normal", KeyEvent("g"), pending=PendingKeyBuffer(KeyEvent("g"))
    )

    assert first.match is not None and first.match.binding.id == "normal.g"
    assert second.match is not None and second.match.binding.id == "normal.gg"


def test_resolver_requires_exact_modifiers() -> None:
    binding = make_binding("normal.redo", keys=("ctrl+r",), action_id="edit.redo")
    resolver = KeymapResolver(build_registry([binding]))

    assert resolver.resolve("normal", KeyEvent("r")).status == "miss"
    assert resolver.resolve("normal", KeyEvent("r", ctrl=True)).status == "match"
    assert (
        resolver.resolve("normal", KeyEvent("r", ctrl=True, alt=True)).status == "miss"
    )


def test_resolver_honors_when_clauses() -> None:
    gating = make_binding(
        "operator.dd",
        mode="operator",
        keys=("d",),
        when=(WhenClause("operator_d"),),
        action_id="operator.whole_line",
    )
    resolver = KeymapResolver(build_registry([gating]))

    miss = resolver.resolve("operator", KeyEvent("d"), context={"operator_y": True})
    assert miss.status == "miss"

    hit = resolver.resolve("operator", KeyEvent("d"), context={"operator_d": True})
    assert hit.status == "match"


def test_resolver_priority_breaks_ties() -> None:
    low = make_binding(
        "normal.low",
        keys=("x",),
        action_id="core.low",
        when=(WhenClause("a"),),
    )
    high = make_binding(
        "normal.high",
        keys=("x",),
        action_id="core.high",
        when=(WhenClause("b"),),
        priority=5,
    )
    resolver = KeymapResolver(build_registry([low, high]))

    result = resolver.resolve("normal", KeyEvent("x"), context={"a": True, "b": True})

    assert result.match is not None
    assert result.match.binding.id == "normal.high"


def test_resolver_rebuilds_table_after_registry_change() -> None:
    binding = make_binding("normal.G", keys=("G",))
    registry = build_registry([binding])
    resolver = KeymapResolver(registry)
    assert resolver.resolve("normal", KeyEvent("G")).status == "match"

    registry.unregister_binding("normal.G")

    assert resolver.resolve("normal", KeyEvent("G")).status == "miss"
