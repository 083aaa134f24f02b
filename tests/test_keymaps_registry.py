import pytest

from modal_engine.keymaps import (
    ActionRef,
    Binding,
    KeySequence,
    KeymapConflictError,
    KeymapRegistry,
    WhenClause,
)
from modal_engine.keymaps.defaults import (
    COMMAND_TABLE_MODES,
    SHARED_COMMANDS,
    load_default_keymaps,
)


def make_action(action_id: str = "core.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_sequence(*keys: str) -> KeySequence:
    return KeySequence.from_strings(*keys)


def make_binding(
    *,
    binding_id: str,
    mode: str = "normal",
    sequence: KeySequence | None = None,
    action_id: str = "core.test",
    when: tuple[WhenClause, ...] = (),
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=sequence or make_sequence("g", "g"),
        action_id=action_id,
        when=when,
    )


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    action = make_action()
    registry.register_action(action)
    binding = make_binding(binding_id="normal.gg")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings(mode="normal")) == [binding]


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    binding = make_binding(binding_id="normal.gg")
    registry.register_binding(binding)

    with pytest.raises(KeymapConflictError):
        registry.register_binding(make_binding(binding_id="normal.gg.duplicate"))


def test_register_binding_unknown_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="normal.gg"))


def test_register_binding_non_overlapping_when() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    binding_default = make_binding(binding_id="default")
    binding_panel = make_binding(
        binding_id="panel",
        when=(WhenClause("panel_open"),),
    )
    binding_no_panel = make_binding(
        binding_id="no_panel",
        when=(WhenClause.parse("!panel_open"),),
    )

    registry.register_binding(binding_default)
    registry.register_binding(binding_panel)
    registry.register_binding(binding_no_panel)

    assert registry.stats().binding_count == 3


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding")

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]


def test_replace_evicts_clashing_binding_under_other_id() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    original = make_binding(binding_id="normal.gg")
    registry.register_binding(original)

    with pytest.raises(KeymapConflictError) as excinfo:
        registry.register_binding(make_binding(binding_id="normal.gg.user"))
    assert excinfo.value.conflicts == (original,)

    override = make_binding(binding_id="normal.gg.user")
    registry.register_binding(override, replace=True)

    assert list(registry.iter_bindings("normal")) == [override]
    assert registry.detect_conflicts(original) == [override]


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)
    before = registry.revision()

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0
    assert registry.revision() == before + 1


def test_key_sequence_rejects_three_strokes() -> None:
    with pytest.raises(ValueError):
        make_sequence("g", "g", "g")


def test_load_default_keymaps_covers_every_table_mode() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    stats = registry.stats()
    assert set(COMMAND_TABLE_MODES) | {"insert"} == set(stats.modes)
    for mode in COMMAND_TABLE_MODES:
        tokens = {
            binding.sequence.tokens for binding in registry.iter_bindings(mode)
        }
        for keys, _action_id, _description in SHARED_COMMANDS:
            assert keys in tokens


def test_load_default_keymaps_include_filters() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(
        registry,
        include_actions=("core.enter_insert",),
        include_bindings=("normal.core.enter_insert",),
    )

    assert registry.stats().binding_count == 1
    binding = registry.get_binding("normal.core.enter_insert")
    assert binding.action_id == "core.enter_insert"


def test_load_default_keymaps_per_mode_override() -> None:
    registry = KeymapRegistry()
    custom_binding = Binding(
        id="normal.core.enter_insert",
        mode="normal",
        sequence=KeySequence.from_strings("ctrl+i"),
        action_id="core.enter_insert",
    )

    load_default_keymaps(
        registry,
        per_mode_overrides={"normal": (custom_binding,)},
    )

    binding = registry.get_binding("normal.core.enter_insert")
    assert binding.sequence.tokens == ("ctrl+i",)


def test_load_default_keymaps_override_mode_mismatch() -> None:
    registry = KeymapRegistry()
    stray = Binding(
        id="visual.stray",
        mode="visual",
        sequence=KeySequence.from_strings("Z"),
        action_id="core.quit",
    )

    with pytest.raises(ValueError):
        load_default_keymaps(registry, per_mode_overrides={"normal": (stray,)})
