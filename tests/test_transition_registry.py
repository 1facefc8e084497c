#!/usr/bin/env python3
"""
Transition Registry Tests

Validates effect registration, lookup and caching.
"""

import pytest

from core.errors import UnknownTransitionError
from core.transition_registry import (
    BUILTIN_EFFECTS,
    EffectDescriptor,
    TransitionRegistry,
    get_transition_registry,
)


class TestBuiltins:
    """Tests for the built-in effects"""

    def test_builtins_registered(self, registry):
        assert registry.list_effects() == sorted(BUILTIN_EFFECTS)

    def test_empty_registry(self):
        assert TransitionRegistry(register_builtins=False).list_effects() == []

    def test_builtin_resolves_to_descriptor(self, registry):
        assert registry.resolve("dissolve") == EffectDescriptor("dissolve")


class TestRegistration:
    """Tests for register / unregister"""

    def test_custom_factory(self, registry):
        registry.register("spin", lambda effect_id: {"shader": effect_id})
        assert registry.is_registered("spin")
        assert registry.resolve("spin") == {"shader": "spin"}

    def test_replace_drops_cached_effect(self, registry):
        before = registry.resolve("fade")
        registry.register("fade", lambda effect_id: "custom-fade")
        assert registry.resolve("fade") == "custom-fade"
        assert before != "custom-fade"

    def test_unregister(self, registry):
        assert registry.unregister("zoom")
        assert not registry.is_registered("zoom")
        assert not registry.unregister("zoom")

    def test_none_is_never_registered(self, registry):
        assert not registry.is_registered(None)


class TestResolve:
    """Tests for resolve"""

    def test_resolved_effect_is_cached(self, registry):
        calls = []

        def factory(effect_id):
            calls.append(effect_id)
            return object()

        registry.register("spin", factory)
        assert registry.resolve("spin") is registry.resolve("spin")
        assert calls == ["spin"]

    def test_unknown_id_raises(self, registry):
        with pytest.raises(UnknownTransitionError) as exc_info:
            registry.resolve("spin")
        assert exc_info.value.effect_id == "spin"


def test_global_registry_is_shared():
    assert get_transition_registry() is get_transition_registry()
