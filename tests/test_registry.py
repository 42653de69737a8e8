"""
Step registry tests - ordering, duplicates and strict/lenient removal.
"""

import dataclasses

import pytest

from requestify import NotRegisteredError, PipelineRegistry, TransformStep, define_step


def _step(name: str) -> TransformStep:
    return define_step(name, after=lambda value: value)


def test_register_keeps_insertion_order():
    registry = PipelineRegistry()
    registry.register(_step("a")).register(_step("b")).register(_step("c"))

    assert registry.list() == ["a", "b", "c"]
    assert len(registry) == 3


def test_duplicate_names_are_accepted_and_removed_together():
    registry = PipelineRegistry([_step("dup"), _step("other"), _step("dup")])
    assert registry.list() == ["dup", "other", "dup"]

    registry.remove("dup")

    assert registry.list() == ["other"]


def test_get_returns_first_match():
    first = _step("dup")
    registry = PipelineRegistry([first, _step("dup")])

    assert registry.get("dup") is first
    assert registry.get("missing") is None


def test_remove_without_name_clears_everything():
    registry = PipelineRegistry([_step("a"), _step("b")])

    registry.remove()

    assert registry.list() == []


def test_strict_remove_of_unknown_name_raises():
    registry = PipelineRegistry([_step("a")], strict=True)

    with pytest.raises(NotRegisteredError) as exc_info:
        registry.remove("missing")

    assert exc_info.value.name == "missing"
    assert registry.list() == ["a"]


def test_lenient_remove_of_unknown_name_is_noop():
    registry = PipelineRegistry([_step("a"), _step("b")], strict=False)

    registry.remove("missing")

    assert len(registry) == 2


def test_per_call_strict_override():
    registry = PipelineRegistry([_step("a")], strict=True)
    registry.remove("missing", strict=False)
    assert registry.list() == ["a"]


def test_snapshot_is_detached_from_later_edits():
    registry = PipelineRegistry([_step("a")])
    snapshot = registry.snapshot()

    registry.register(_step("b"))

    assert [s.name for s in snapshot] == ["a"]


def test_step_name_is_immutable():
    step = _step("fixed")
    with pytest.raises(dataclasses.FrozenInstanceError):
        step.name = "changed"


def test_inert_step_is_legal():
    step = define_step("noop")
    assert step.inert
    assert PipelineRegistry([step]).list() == ["noop"]


@pytest.mark.parametrize("bad_name", ["", None])
def test_step_requires_name(bad_name):
    with pytest.raises(ValueError):
        TransformStep(name=bad_name)


def test_registry_rejects_non_steps():
    with pytest.raises(TypeError):
        PipelineRegistry().register(object())


def test_class_based_steps_are_accepted():
    class Stamp:
        name = "stamp"
        before = None

        def after(self, value):
            return value

    registry = PipelineRegistry([Stamp()])
    assert "stamp" in registry
