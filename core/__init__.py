"""Core logic for LayerLine"""

from .errors import (
    LayoutError,
    InvalidLayerRangeError,
    DuplicateLayerIdError,
    UnknownTransitionError,
)
from .timeline_layout import TimelineLayout, layout
from .transition_registry import TransitionRegistry, EffectDescriptor, get_transition_registry

__all__ = [
    "LayoutError",
    "InvalidLayerRangeError",
    "DuplicateLayerIdError",
    "UnknownTransitionError",
    "TimelineLayout",
    "layout",
    "TransitionRegistry",
    "EffectDescriptor",
    "get_transition_registry",
]
