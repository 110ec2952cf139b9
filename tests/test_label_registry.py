"""
Tests for Label values and the label registry.
"""

import pytest

from statelabel.labels import Label, LabelRegistry


def test_labels_compare_by_value():
    assert Label("init", "initial") == Label("init", "initial")
    assert hash(Label("init", "initial")) == hash(Label("init", "initial"))
    assert Label("init", "initial") != Label("init", "first state")


def test_label_is_immutable():
    label = Label("end", "end")
    with pytest.raises(AttributeError):
        label.name = "other"


def test_label_renders_as_its_name():
    assert str(Label("true__toggle_value", "toggle.value = True")) == "true__toggle_value"


def test_intern_deduplicates():
    """Re-interning an equal label returns the index it already has."""
    registry = LabelRegistry()
    assert registry.intern(Label("a", "A")) == 0
    assert registry.intern(Label("b", "B")) == 1
    assert registry.intern(Label("a", "A")) == 0
    assert registry.count() == 2
    assert len(registry) == 2


def test_indices_are_stable():
    """An index never changes, whatever is interned afterwards."""
    registry = LabelRegistry()
    first = registry.intern(Label("x", "x"))
    for i in range(50):
        registry.intern(Label(f"l{i}", f"label {i}"))
        assert registry.intern(Label("x", "x")) == first


def test_order_is_first_seen_not_lexical():
    registry = LabelRegistry()
    for name in ["zeta", "alpha", "mu"]:
        registry.intern(Label(name, name))
    assert [label.name for label in registry] == ["zeta", "alpha", "mu"]
    assert registry.get(1) == Label("alpha", "alpha")


def test_same_name_different_description_are_distinct():
    registry = LabelRegistry()
    assert registry.intern(Label("n", "one")) != registry.intern(Label("n", "two"))


def test_index_of_and_contains():
    registry = LabelRegistry()
    registry.intern(Label("a", "A"))
    assert registry.index_of(Label("a", "A")) == 0
    assert registry.index_of(Label("b", "B")) is None
    assert Label("a", "A") in registry
    assert Label("b", "B") not in registry


def test_registry_is_built_empty():
    """A registry cannot be seeded with a label list and index map that disagree."""
    with pytest.raises(TypeError):
        LabelRegistry([Label("a", "A")], {})
    registry = LabelRegistry()
    assert len(registry) == 0
    assert "0 labels" in repr(registry)
