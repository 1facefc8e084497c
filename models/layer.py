"""Layer model - Timed pieces of content placed on the timeline"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional
from uuid import uuid4

from config import settings
from .time_range import TimeRange


class MediaKind(Enum):
    """Kind of content a layer carries"""
    VIDEO = "video"
    AUDIO = "audio"
    IMAGE = "image"
    GROUP = "group"


class PitchAlgorithm(Enum):
    """Pitch handling requested for a layer's audio when its rate changes"""
    LOW_QUALITY_ZERO_LATENCY = "low_quality_zero_latency"
    TIME_DOMAIN = "time_domain"
    SPECTRAL = "spectral"
    VARISPEED = "varispeed"


@dataclass(frozen=True)
class Transition:
    """
    Cross-transition applied at the tail of a layer into the next one.

    A transition with no effect or zero duration is the identity: it trims
    nothing and claims no transition tracks.
    """
    effect_id: Optional[str] = None
    duration: float = field(default_factory=lambda: settings.DEFAULT_TRANSITION_DURATION)

    NONE: ClassVar['Transition']

    def __post_init__(self):
        if self.duration < 0:
            raise ValueError(f"Transition duration must be non-negative, got {self.duration}")

    @property
    def is_animated(self) -> bool:
        return self.effect_id is not None and self.duration > 0

    def with_duration(self, duration: float) -> 'Transition':
        return Transition(effect_id=self.effect_id, duration=duration)

    def __eq__(self, other):
        if not isinstance(other, Transition):
            return NotImplemented
        return self.effect_id == other.effect_id

    def __hash__(self):
        return hash(self.effect_id)

    def to_dict(self) -> dict:
        return {"effect_id": self.effect_id, "duration": self.duration}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'Transition':
        if not data:
            return cls.NONE
        return cls(
            effect_id=data.get("effect_id"),
            duration=data.get("duration", settings.DEFAULT_TRANSITION_DURATION),
        )

    def __str__(self) -> str:
        if not self.is_animated:
            return "Transition(none)"
        return f"Transition({self.effect_id}, {self.duration:.2f}s)"


Transition.NONE = Transition(effect_id=None, duration=0.0)


@dataclass
class Layer:
    """
    A single timed piece of content on the timeline.

    Timeline positioning:
    - start/end: where the layer sits on the editing timeline (seconds)
    - for groups, start/end are ignored; the range is the union of children

    Stack info:
    - z_level: higher levels render on top (composited last)

    Stream info:
    - has_video_stream / has_audio_stream default from the media kind and can
      be overridden for sources with missing or undecodable streams
    """
    id: str = field(default_factory=lambda: str(uuid4()))
    name: str = ""
    kind: MediaKind = MediaKind.VIDEO

    start: float = 0.0
    end: float = 0.0

    z_level: int = 0
    transition: Transition = Transition.NONE
    children: List['Layer'] = field(default_factory=list)

    has_video_stream: Optional[bool] = None
    has_audio_stream: Optional[bool] = None

    # Audio mix properties
    volume: int = 100  # Volume percentage (0-200), 100 = unity gain
    pitch_algorithm: PitchAlgorithm = PitchAlgorithm.SPECTRAL

    def __post_init__(self):
        if self.has_video_stream is None:
            self.has_video_stream = self.kind == MediaKind.VIDEO
        if self.has_audio_stream is None:
            self.has_audio_stream = self.kind in (MediaKind.VIDEO, MediaKind.AUDIO)

    @property
    def is_group(self) -> bool:
        return self.kind == MediaKind.GROUP

    @property
    def is_visual(self) -> bool:
        """Video and image layers are the ones laid out and composited"""
        return self.kind in (MediaKind.VIDEO, MediaKind.IMAGE)

    @property
    def time_range(self) -> Optional[TimeRange]:
        """
        Range on the editing timeline.

        Returns None for a group without any resolvable children.
        """
        if not self.is_group:
            return TimeRange(self.start, self.end)

        result = None
        for child in self.children:
            child_range = child.time_range
            if child_range is None:
                continue
            result = child_range if result is None else result.union(child_range)
        return result

    @property
    def duration(self) -> float:
        time_range = self.time_range
        return time_range.duration if time_range else 0.0

    def get_gain_db(self) -> float:
        """Convert volume percentage to a gain in dB (100% = 0dB)"""
        if self.volume <= 0:
            return -math.inf
        return 20 * math.log10(self.volume / 100)

    def to_dict(self) -> dict:
        """Serialize to dictionary"""
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "start": self.start,
            "end": self.end,
            "z_level": self.z_level,
            "transition": self.transition.to_dict() if self.transition.is_animated else None,
            "children": [child.to_dict() for child in self.children],
            "has_video_stream": self.has_video_stream,
            "has_audio_stream": self.has_audio_stream,
            "volume": self.volume,
            "pitch_algorithm": self.pitch_algorithm.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Layer':
        """Deserialize from dictionary"""
        return cls(
            id=data.get("id", str(uuid4())),
            name=data.get("name", ""),
            kind=MediaKind(data.get("kind", MediaKind.VIDEO.value)),
            start=data.get("start", 0.0),
            end=data.get("end", 0.0),
            z_level=data.get("z_level", 0),
            transition=Transition.from_dict(data.get("transition")),
            children=[cls.from_dict(child) for child in data.get("children", [])],
            has_video_stream=data.get("has_video_stream"),
            has_audio_stream=data.get("has_audio_stream"),
            volume=data.get("volume", 100),
            pitch_algorithm=PitchAlgorithm(
                data.get("pitch_algorithm", PitchAlgorithm.SPECTRAL.value)
            ),
        )

    def __str__(self) -> str:
        label = self.name or self.id
        return f"Layer({label}, {self.kind.value}, {self.start}s-{self.end}s, z={self.z_level})"
