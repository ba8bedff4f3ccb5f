"""
Tests for the identity-keyed weak map.
"""
import gc

import pytest

from microfx.core.errors import ElementContractError
from microfx.elements.element import AnimatedElement
from microfx.utils.identity import WeakIdentityMap


def test_equal_objects_get_separate_entries():
    """Test that value-equal dataclasses do not share a slot."""
    first = AnimatedElement()
    second = AnimatedElement()
    assert first == second

    entries = WeakIdentityMap()
    entries[first] = "first"
    entries[second] = "second"

    assert len(entries) == 2
    assert entries[first] == "first"
    assert entries[second] == "second"


def test_entry_disappears_with_its_object():
    collected = []
    entries = WeakIdentityMap(on_collect=collected.append)
    element = AnimatedElement()
    entries[element] = "value"

    del element
    gc.collect()

    assert len(entries) == 0
    assert collected == ["value"]


def test_missing_lookups():
    entries = WeakIdentityMap()
    element = AnimatedElement()

    assert entries.get(element) is None
    assert entries.get(element, "fallback") == "fallback"
    assert element not in entries
    assert entries.pop(element) is None
    with pytest.raises(KeyError):
        entries[element]


def test_setdefault_and_pop():
    entries = WeakIdentityMap()
    element = AnimatedElement()

    created = entries.setdefault(element, dict)
    assert entries.setdefault(element, dict) is created

    assert entries.pop(element) is created
    assert element not in entries


def test_overwrite_keeps_single_entry():
    entries = WeakIdentityMap()
    element = AnimatedElement()

    entries[element] = 1
    entries[element] = 2

    assert len(entries) == 1
    assert list(entries.items()) == [(element, 2)]


def test_clear():
    entries = WeakIdentityMap()
    keep = [AnimatedElement(), AnimatedElement()]
    for element in keep:
        entries[element] = element.name

    entries.clear()

    assert len(entries) == 0


def test_unreferenceable_object_is_rejected():
    class Slotted:
        __slots__ = ("value",)

    with pytest.raises(ElementContractError):
        WeakIdentityMap()[Slotted()] = 1
