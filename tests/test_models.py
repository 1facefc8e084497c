#!/usr/bin/env python3
"""
Model Tests

Validates the value types the layout engine works on:
- TimeRange math (duration, overlap, intersection, quantisation)
- Transition identity and validation
- Layer stream defaults, group ranges and serialization
"""

import math
import pytest

from models.time_range import TimeRange, quantize
from models.layer import Layer, MediaKind, PitchAlgorithm, Transition
from models.composition import CompositionLayout, Instruction

from tests.conftest import assert_close, video, image, audio, group, fade


# ============================================================================
# SECTION 1: TIME RANGE
# ============================================================================

class TestTimeRange:
    """Tests for TimeRange math"""

    def test_duration(self):
        assert_close(TimeRange(2.0, 7.5).duration, 5.5, "Duration")

    def test_inverted_range_has_zero_duration(self):
        time_range = TimeRange(5.0, 3.0)
        assert time_range.duration == 0.0
        assert time_range.is_empty

    def test_half_open_ranges_touching_do_not_overlap(self):
        assert not TimeRange(0.0, 5.0).overlaps(TimeRange(5.0, 10.0))
        assert TimeRange(0.0, 5.0).intersection(TimeRange(5.0, 10.0)) is None

    def test_intersection(self):
        result = TimeRange(0.0, 5.0).intersection(TimeRange(4.0, 9.0))
        assert result == TimeRange(4.0, 5.0)

    def test_union_covers_gap(self):
        assert TimeRange(0.0, 2.0).union(TimeRange(4.0, 6.0)) == TimeRange(0.0, 6.0)

    def test_contains(self):
        outer = TimeRange(4.0, 5.0)
        assert outer.contains(TimeRange(4.0, 4.5))
        assert outer.contains(outer)
        assert not outer.contains(TimeRange(3.9, 4.5))

    def test_contains_time_is_half_open(self):
        time_range = TimeRange(1.0, 2.0)
        assert time_range.contains_time(1.0)
        assert not time_range.contains_time(2.0)

    def test_from_duration(self):
        assert TimeRange.from_duration(4.0, 5.0) == TimeRange(4.0, 9.0)

    def test_quantisation_makes_float_noise_equal(self):
        """0.1 + 0.2 and 0.3 must land on the same instant"""
        assert TimeRange(0.1 + 0.2, 1.0) == TimeRange(0.3, 1.0)
        assert quantize(0.1 + 0.2) == quantize(0.3)

    def test_hashable(self):
        ranges = {TimeRange(0.0, 1.0), TimeRange(0.0, 1.0), TimeRange(1.0, 2.0)}
        assert len(ranges) == 2

    def test_round_trip_dict(self):
        time_range = TimeRange(1.5, 3.25)
        assert TimeRange.from_dict(time_range.to_dict()) == time_range


# ============================================================================
# SECTION 2: TRANSITION
# ============================================================================

class TestTransition:
    """Tests for Transition"""

    def test_none_is_not_animated(self):
        assert not Transition.NONE.is_animated

    def test_effect_with_duration_is_animated(self):
        assert fade(1.0).is_animated

    def test_zero_duration_is_not_animated(self):
        assert not Transition(effect_id="fade", duration=0.0).is_animated

    def test_missing_effect_is_not_animated(self):
        assert not Transition(effect_id=None, duration=2.0).is_animated

    def test_default_duration(self):
        assert_close(Transition(effect_id="fade").duration, 1.5, "Default transition duration")

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError):
            Transition(effect_id="fade", duration=-1.0)

    def test_equality_by_effect(self):
        assert fade(1.0) == fade(2.0)
        assert fade(1.0) != Transition(effect_id="wipe_left", duration=1.0)

    def test_with_duration(self):
        clamped = fade(3.0).with_duration(1.0)
        assert clamped.effect_id == "fade"
        assert_close(clamped.duration, 1.0)

    def test_from_empty_dict_is_none(self):
        assert Transition.from_dict(None) is Transition.NONE


# ============================================================================
# SECTION 3: LAYER
# ============================================================================

class TestLayerStreams:
    """Tests for stream defaults by media kind"""

    def test_video_has_both_streams(self):
        layer = video("v", 0.0, 1.0)
        assert layer.has_video_stream
        assert layer.has_audio_stream

    def test_image_has_no_streams(self):
        layer = image("i", 0.0, 1.0)
        assert not layer.has_video_stream
        assert not layer.has_audio_stream

    def test_audio_has_audio_only(self):
        layer = audio("s", 0.0, 1.0)
        assert not layer.has_video_stream
        assert layer.has_audio_stream

    def test_override_missing_video_stream(self):
        layer = video("v", 0.0, 1.0, has_video_stream=False)
        assert not layer.has_video_stream
        assert layer.is_visual

    def test_silent_video(self):
        assert not video("v", 0.0, 1.0, has_audio_stream=False).has_audio_stream


class TestLayerRanges:
    """Tests for layer and group time ranges"""

    def test_plain_layer_range(self):
        layer = video("v", 2.0, 6.0)
        assert layer.time_range == TimeRange(2.0, 6.0)
        assert_close(layer.duration, 4.0)

    def test_group_range_is_union_of_children(self):
        layer = group("g", [video("a", 2.0, 4.0), image("b", 3.0, 8.0)])
        assert layer.time_range == TimeRange(2.0, 8.0)

    def test_nested_group_range(self):
        inner = group("inner", [video("a", 10.0, 12.0)])
        outer = group("outer", [video("b", 5.0, 6.0), inner])
        assert outer.time_range == TimeRange(5.0, 12.0)

    def test_empty_group_has_no_range(self):
        layer = group("g", [])
        assert layer.time_range is None
        assert layer.duration == 0.0


class TestLayerAudio:
    """Tests for audio gain"""

    def test_unity_gain(self):
        assert_close(video("v", 0.0, 1.0).get_gain_db(), 0.0)

    def test_half_volume(self):
        layer = video("v", 0.0, 1.0, volume=50)
        assert_close(layer.get_gain_db(), -6.0206, "Half volume")

    def test_muted(self):
        assert video("v", 0.0, 1.0, volume=0).get_gain_db() == -math.inf


class TestLayerSerialization:
    """Tests for Layer.to_dict / from_dict"""

    def test_group_tree_round_trip(self):
        original = group("g", [
            video("a", 0.0, 3.0, z=2, transition=fade(0.5), volume=80,
                  pitch_algorithm=PitchAlgorithm.TIME_DOMAIN),
            image("b", 1.0, 2.0, z=1),
        ])
        restored = Layer.from_dict(original.to_dict())

        assert restored.kind == MediaKind.GROUP
        assert [c.id for c in restored.children] == ["a", "b"]
        child = restored.children[0]
        assert child.z_level == 2
        assert child.transition.effect_id == "fade"
        assert_close(child.transition.duration, 0.5)
        assert child.volume == 80
        assert child.pitch_algorithm == PitchAlgorithm.TIME_DOMAIN
        assert not restored.children[1].has_video_stream

    def test_from_dict_defaults(self):
        layer = Layer.from_dict({"id": "x", "start": 0.0, "end": 2.0})
        assert layer.kind == MediaKind.VIDEO
        assert layer.transition is Transition.NONE
        assert layer.has_video_stream


# ============================================================================
# SECTION 4: COMPOSITION VALUES
# ============================================================================

class TestCompositionLayout:
    """Tests for CompositionLayout classification"""

    def setup_method(self):
        self.layout = CompositionLayout(
            breakpoints=(0.0, 4.0, 5.0, 9.0),
            passthrough_ranges=(TimeRange(0.0, 4.0), TimeRange(5.0, 9.0)),
            transition_ranges=(TimeRange(4.0, 5.0),),
        )

    def test_segments(self):
        segments = [segment for _, segment in self.layout.segments()]
        assert segments == [TimeRange(0.0, 4.0), TimeRange(4.0, 5.0), TimeRange(5.0, 9.0)]

    def test_classify(self):
        assert self.layout.classify(TimeRange(0.0, 4.0)) == "passthrough"
        assert self.layout.classify(TimeRange(4.0, 5.0)) == "transition"
        assert self.layout.classify(TimeRange(9.0, 10.0)) is None

    def test_span(self):
        assert self.layout.span == TimeRange(0.0, 9.0)

    def test_unrecorded_window_has_no_transition(self):
        assert self.layout.transition_for_range(TimeRange(4.0, 5.0)) is Transition.NONE

    def test_recorded_window_transition(self):
        layout = CompositionLayout(
            breakpoints=self.layout.breakpoints,
            passthrough_ranges=self.layout.passthrough_ranges,
            transition_ranges=self.layout.transition_ranges,
            transitions=(fade(1.0),),
        )
        assert layout.transition_for_range(TimeRange(4.0, 5.0)) == fade(1.0)
        assert layout.to_dict()["transitions"] == [fade(1.0).to_dict()]


class TestInstructionProgress:
    """Tests for transition progress"""

    def test_progress_is_linear_and_clamped(self):
        instruction = Instruction(
            index=1,
            time_range=TimeRange(4.0, 5.0),
            is_transition=True,
            transition=fade(1.0),
            transition_range=TimeRange(4.0, 5.0),
        )
        assert_close(instruction.progress_at(4.0), 0.0)
        assert_close(instruction.progress_at(4.25), 0.25)
        assert_close(instruction.progress_at(5.0), 1.0)
        assert_close(instruction.progress_at(3.0), 0.0, "Clamped below")
        assert_close(instruction.progress_at(7.0), 1.0, "Clamped above")

    def test_passthrough_progress_is_zero(self):
        instruction = Instruction(index=0, time_range=TimeRange(0.0, 4.0))
        assert instruction.progress_at(2.0) == 0.0
        assert instruction.is_empty
