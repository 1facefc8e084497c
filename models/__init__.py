"""Data models for LayerLine"""

from .time_range import TimeRange, quantize
from .layer import Layer, MediaKind, PitchAlgorithm, Transition
from .composition import (
    AudioMixInput,
    CompositionLayout,
    Instruction,
    LayerPlacement,
    LayoutNotice,
    LayoutResult,
    NoticeKind,
    Track,
    TrackRole,
)

__all__ = [
    "TimeRange",
    "quantize",
    "Layer",
    "MediaKind",
    "PitchAlgorithm",
    "Transition",
    "AudioMixInput",
    "CompositionLayout",
    "Instruction",
    "LayerPlacement",
    "LayoutNotice",
    "LayoutResult",
    "NoticeKind",
    "Track",
    "TrackRole",
]
