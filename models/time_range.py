"""TimeRange model - Half-open time intervals on the timeline"""

from dataclasses import dataclass
from typing import Optional

from config import settings


def quantize(seconds: float) -> float:
    """
    Round a time value to the configured timescale.

    Keeps breakpoints comparable with == so that 4.0 computed as 5.0 - 1.0
    and 4.0 computed as 3.9 + 0.1 land on the same instant.
    """
    scale = settings.TIMESCALE
    return round(seconds * scale) / scale


@dataclass(frozen=True)
class TimeRange:
    """A time range [start, end) in seconds"""
    start: float
    end: float

    def __post_init__(self):
        object.__setattr__(self, 'start', quantize(self.start))
        object.__setattr__(self, 'end', quantize(self.end))

    @classmethod
    def from_duration(cls, start: float, duration: float) -> 'TimeRange':
        return cls(start, start + duration)

    @property
    def duration(self) -> float:
        return max(0.0, quantize(self.end - self.start))

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    def overlaps(self, other: 'TimeRange') -> bool:
        """Check if this range overlaps with another"""
        return self.start < other.end and other.start < self.end

    def intersection(self, other: 'TimeRange') -> Optional['TimeRange']:
        """Get intersection with another range, or None if no overlap"""
        if not self.overlaps(other):
            return None
        return TimeRange(
            start=max(self.start, other.start),
            end=min(self.end, other.end)
        )

    def union(self, other: 'TimeRange') -> 'TimeRange':
        """Smallest range covering both ranges (gaps included)"""
        return TimeRange(
            start=min(self.start, other.start),
            end=max(self.end, other.end)
        )

    def contains_time(self, time: float) -> bool:
        return self.start <= time < self.end

    def contains(self, other: 'TimeRange') -> bool:
        return self.start <= other.start and other.end <= self.end

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end}

    @classmethod
    def from_dict(cls, data: dict) -> 'TimeRange':
        return cls(start=data["start"], end=data["end"])

    def __repr__(self):
        return f"[{self.start:.2f}s-{self.end:.2f}s]"
