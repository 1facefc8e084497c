#!/usr/bin/env python3
"""
Pytest Configuration and Shared Fixtures

Provides layer factories and helpers shared by all tests.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.layer import Layer, MediaKind, Transition
from core.transition_registry import TransitionRegistry


EPSILON = 0.001  # Tolerance for floating point comparisons


def assert_close(actual, expected, msg=""):
    """Assert two values are close within EPSILON tolerance"""
    assert abs(actual - expected) < EPSILON, f"{msg}: Expected {expected}, got {actual}"


# ============================================================================
# LAYER FACTORIES
# ============================================================================

def video(layer_id, start, end, z=0, transition=None, **kwargs):
    """Video layer with video and audio streams"""
    return Layer(
        id=layer_id, name=layer_id, kind=MediaKind.VIDEO,
        start=start, end=end, z_level=z,
        transition=transition or Transition.NONE,
        **kwargs
    )


def image(layer_id, start, end, z=0, transition=None):
    """Image layer (no streams)"""
    return Layer(
        id=layer_id, name=layer_id, kind=MediaKind.IMAGE,
        start=start, end=end, z_level=z,
        transition=transition or Transition.NONE,
    )


def audio(layer_id, start, end, **kwargs):
    """Audio-only layer"""
    return Layer(id=layer_id, name=layer_id, kind=MediaKind.AUDIO, start=start, end=end, **kwargs)


def group(layer_id, children, z=0, transition=None):
    """Group layer wrapping children"""
    return Layer(
        id=layer_id, name=layer_id, kind=MediaKind.GROUP,
        z_level=z, children=list(children),
        transition=transition or Transition.NONE,
    )


def fade(duration=1.0):
    return Transition(effect_id="fade", duration=duration)


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def registry():
    """Fresh transition registry with built-in effects"""
    return TransitionRegistry()


@pytest.fixture
def two_clips():
    """Two back-to-back 5s video clips, no transition"""
    return [video("a", 0.0, 5.0), video("b", 5.0, 10.0)]


@pytest.fixture
def two_clips_with_fade():
    """Two 5s video clips joined by a 1s fade"""
    return [video("a", 0.0, 5.0, transition=fade(1.0)), video("b", 5.0, 10.0)]
