"""
Transition Registry

Maps transition effect ids to renderable effects. The layout engine only
needs to know that an id resolves; what the factory returns is opaque to it
and is handed to the renderer untouched on each transition instruction.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from utils.logger import logger

from .errors import UnknownTransitionError


EffectFactory = Callable[[str], Any]


@dataclass(frozen=True)
class EffectDescriptor:
    """Default renderable form of a built-in effect"""
    effect_id: str
    params: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


BUILTIN_EFFECTS = [
    "fade",
    "dissolve",
    "wipe_left",
    "wipe_right",
    "slide_left",
    "slide_right",
    "zoom",
]


class TransitionRegistry:
    """
    Registry for transition effects.

    Resolved effects are cached per id so that every instruction using the
    same effect gets the same object.
    """

    def __init__(self, register_builtins: bool = True):
        self._factories: Dict[str, EffectFactory] = {}
        self._resolved: Dict[str, Any] = {}

        if register_builtins:
            self._register_builtin_effects()

    def _register_builtin_effects(self) -> None:
        for effect_id in BUILTIN_EFFECTS:
            self.register(effect_id, EffectDescriptor)

    def register(self, effect_id: str, factory: EffectFactory) -> None:
        """Register (or replace) the factory for an effect id"""
        self._factories[effect_id] = factory
        self._resolved.pop(effect_id, None)
        logger.debug(f"Registered transition effect: {effect_id}")

    def unregister(self, effect_id: str) -> bool:
        """Remove an effect. Returns False if it wasn't registered."""
        self._resolved.pop(effect_id, None)
        return self._factories.pop(effect_id, None) is not None

    def is_registered(self, effect_id: Optional[str]) -> bool:
        return effect_id is not None and effect_id in self._factories

    def list_effects(self) -> List[str]:
        return sorted(self._factories)

    def resolve(self, effect_id: str) -> Any:
        """
        Get the renderable effect for an id.

        Raises:
            UnknownTransitionError: If the id isn't registered
        """
        if effect_id not in self._factories:
            raise UnknownTransitionError(effect_id)

        if effect_id not in self._resolved:
            self._resolved[effect_id] = self._factories[effect_id](effect_id)
        return self._resolved[effect_id]


# Global registry instance
_transition_registry: Optional[TransitionRegistry] = None


def get_transition_registry() -> TransitionRegistry:
    """Get the global transition registry"""
    global _transition_registry
    if _transition_registry is None:
        _transition_registry = TransitionRegistry()
    return _transition_registry
