"""
Composition models - Values produced by a layout pass

Tracks, the composition layout (breakpoints plus range classification),
per-layer placements and the instruction sequence consumed by the renderer
and mixer. Everything here is built fresh on each pass and owned by the
caller afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .layer import Layer, MediaKind, Transition
from .time_range import TimeRange


class TrackRole(Enum):
    """What a physical track is used for"""
    LAYER = "layer"            # Carries layer content
    TRANSITION = "transition"  # One of the two reserved cross-fade tracks
    FILLER = "filler"          # Neutral blank content spanning the timeline


class NoticeKind(Enum):
    """Recoverable conditions normalized during a pass"""
    UNRESOLVED_GROUP = "unresolved_group"
    DEGENERATE_TRANSITION = "degenerate_transition"


@dataclass
class Track:
    """
    A physical, time-disjoint channel.

    For LAYER tracks `occupied` holds one range per layer placed on it, in
    allocation order. FILLER tracks record the inserted blank source length
    and the factor it is stretched by to reach the track span.
    """
    id: int
    media_kind: MediaKind
    role: TrackRole = TrackRole.LAYER
    occupied: List[TimeRange] = field(default_factory=list)
    layer_ids: List[str] = field(default_factory=list)

    # Filler only
    source_duration: Optional[float] = None
    scale: float = 1.0

    @property
    def last_occupied_end(self) -> Optional[float]:
        if not self.occupied:
            return None
        return self.occupied[-1].end

    @property
    def time_range(self) -> Optional[TimeRange]:
        if not self.occupied:
            return None
        result = self.occupied[0]
        for occupied in self.occupied[1:]:
            result = result.union(occupied)
        return result

    def occupy(self, layer_id: Optional[str], time_range: TimeRange):
        self.occupied.append(time_range)
        if layer_id is not None:
            self.layer_ids.append(layer_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "media_kind": self.media_kind.value,
            "role": self.role.value,
            "occupied": [r.to_dict() for r in self.occupied],
            "layer_ids": list(self.layer_ids),
            "source_duration": self.source_duration,
            "scale": self.scale,
        }

    def __str__(self) -> str:
        ranges = ", ".join(repr(r) for r in self.occupied)
        return f"({self.id}) {self.media_kind.value}/{self.role.value} {ranges}"


@dataclass(frozen=True)
class CompositionLayout:
    """
    Breakpoints and range classification of the laid-out timeline.

    Consecutive breakpoints partition [breakpoints[0], breakpoints[-1]];
    every such segment is either inside a transition range, inside a
    passthrough range, or unclassified (no layer claims it).

    `transitions` runs parallel to `transition_ranges`: the clamped
    transition of the slot that opened each window.
    """
    breakpoints: Tuple[float, ...]
    passthrough_ranges: Tuple[TimeRange, ...]
    transition_ranges: Tuple[TimeRange, ...]
    transitions: Tuple[Transition, ...] = ()

    def segments(self) -> Iterator[Tuple[int, TimeRange]]:
        """Yield (index, segment) for each consecutive breakpoint pair."""
        for index in range(len(self.breakpoints) - 1):
            yield index, TimeRange(self.breakpoints[index], self.breakpoints[index + 1])

    def transition_range_for(self, segment: TimeRange) -> Optional[TimeRange]:
        for transition_range in self.transition_ranges:
            if transition_range.contains(segment):
                return transition_range
        return None

    def transition_for_range(self, transition_range: TimeRange) -> Transition:
        """Transition that owns a transition window, NONE if not recorded."""
        for index, candidate in enumerate(self.transition_ranges):
            if candidate == transition_range and index < len(self.transitions):
                return self.transitions[index]
        return Transition.NONE

    def classify(self, segment: TimeRange) -> Optional[str]:
        """Return "transition", "passthrough" or None for a segment."""
        if self.transition_range_for(segment) is not None:
            return "transition"
        for passthrough_range in self.passthrough_ranges:
            if passthrough_range.contains(segment):
                return "passthrough"
        return None

    @property
    def span(self) -> Optional[TimeRange]:
        if len(self.breakpoints) < 2:
            return None
        return TimeRange(self.breakpoints[0], self.breakpoints[-1])

    def to_dict(self) -> dict:
        return {
            "breakpoints": list(self.breakpoints),
            "passthrough_ranges": [r.to_dict() for r in self.passthrough_ranges],
            "transition_ranges": [r.to_dict() for r in self.transition_ranges],
            "transitions": [t.to_dict() for t in self.transitions],
        }


@dataclass(frozen=True)
class LayerPlacement:
    """
    Where a layer ends up in the output timeline.

    `slot_id` is the top-level layer (itself, or its outermost group) whose
    sequential position the layer inherits. `transition` is that slot's
    transition after clamping to the neighbouring slot durations.
    """
    layer: Layer
    time_range: TimeRange
    slot_id: str
    transition: Transition = Transition.NONE
    order: int = 0

    @property
    def layer_id(self) -> str:
        return self.layer.id

    @property
    def z_level(self) -> int:
        return self.layer.z_level


@dataclass(frozen=True)
class LayoutNotice:
    """A recoverable normalization applied during the pass"""
    kind: NoticeKind
    layer_id: str
    message: str

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "layer_id": self.layer_id, "message": self.message}


@dataclass(frozen=True)
class Instruction:
    """
    The unit of rendering work for one sub-interval of the timeline.

    `layers` are sorted by descending z-level. For transition instructions
    the two reserved transition tracks are split into foreground/background
    roles; `progress_at` gives the blend progress inside the transition
    window.
    """
    index: int
    time_range: TimeRange
    layers: Tuple[Layer, ...] = ()
    is_transition: bool = False
    transition: Transition = Transition.NONE
    transition_range: Optional[TimeRange] = None
    foreground_track_id: Optional[int] = None
    background_track_id: Optional[int] = None
    required_track_ids: Tuple[int, ...] = ()
    passthrough_track_id: Optional[int] = None
    effect: Any = None

    @property
    def is_empty(self) -> bool:
        return not self.layers

    @property
    def layer_ids(self) -> List[str]:
        return [layer.id for layer in self.layers]

    def progress_at(self, time: float) -> float:
        """Blend progress in [0, 1] at a timeline instant."""
        if not self.is_transition or self.transition_range is None:
            return 0.0
        duration = self.transition_range.duration
        if duration <= 0:
            return 1.0
        progress = (time - self.transition_range.start) / duration
        return min(1.0, max(0.0, progress))

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "time_range": self.time_range.to_dict(),
            "layer_ids": self.layer_ids,
            "is_transition": self.is_transition,
            "transition": self.transition.to_dict() if self.is_transition else None,
            "transition_range": self.transition_range.to_dict() if self.transition_range else None,
            "foreground_track_id": self.foreground_track_id,
            "background_track_id": self.background_track_id,
            "required_track_ids": list(self.required_track_ids),
            "passthrough_track_id": self.passthrough_track_id,
        }

    def describe(self) -> str:
        lines = [
            f"[Instruction {self.index}] ({self.passthrough_track_id}) {list(self.required_track_ids)}",
            f"    ForegroundTrackId: [{self.foreground_track_id}] "
            f"BackgroundTrackId: [{self.background_track_id}]",
            f"    TimeRange: {self.time_range!r}",
            f"    Layers: {', '.join(self.layer_ids) or '-'}",
        ]
        if self.is_transition:
            lines.append(f"    Transition: {self.transition}")
        return "\n".join(lines)


@dataclass(frozen=True)
class AudioMixInput:
    """Mix parameters for a single audio track"""
    track_id: int
    layer_id: str
    time_range: TimeRange
    volume: int
    gain_db: float
    pitch_algorithm: str

    def to_dict(self) -> dict:
        return {
            "track_id": self.track_id,
            "layer_id": self.layer_id,
            "time_range": self.time_range.to_dict(),
            "volume": self.volume,
            "gain_db": self.gain_db,
            "pitch_algorithm": self.pitch_algorithm,
        }


@dataclass
class LayoutResult:
    """Everything a layout pass produces"""
    tracks: List[Track]
    video_track_ids: Dict[str, int]
    audio_track_ids: Dict[str, int]
    transition_track_ids: Tuple[int, int]
    layout: CompositionLayout
    placements: Dict[str, LayerPlacement]
    instructions: List[Instruction]
    filler_track_id: Optional[int] = None
    audio_mix: List[AudioMixInput] = field(default_factory=list)
    notices: List[LayoutNotice] = field(default_factory=list)

    @property
    def total_duration(self) -> float:
        span = self.layout.span
        return span.duration if span else 0.0

    def track_for(self, layer_id: str, media_kind: MediaKind = MediaKind.VIDEO) -> Optional[int]:
        """Track id carrying a layer's video or audio, if it has one."""
        if media_kind == MediaKind.AUDIO:
            return self.audio_track_ids.get(layer_id)
        return self.video_track_ids.get(layer_id)

    def get_track(self, track_id: int) -> Optional[Track]:
        for track in self.tracks:
            if track.id == track_id:
                return track
        return None

    def instruction_at(self, time: float) -> Optional[Instruction]:
        for instruction in self.instructions:
            if instruction.time_range.contains_time(time):
                return instruction
        return None

    def to_dict(self) -> dict:
        return {
            "tracks": [track.to_dict() for track in self.tracks],
            "video_track_ids": dict(self.video_track_ids),
            "audio_track_ids": dict(self.audio_track_ids),
            "transition_track_ids": list(self.transition_track_ids),
            "filler_track_id": self.filler_track_id,
            "layout": self.layout.to_dict(),
            "placements": {
                layer_id: placement.time_range.to_dict()
                for layer_id, placement in self.placements.items()
            },
            "instructions": [instruction.to_dict() for instruction in self.instructions],
            "audio_mix": [entry.to_dict() for entry in self.audio_mix],
            "notices": [notice.to_dict() for notice in self.notices],
        }
