"""
Track Allocator - Assigns physical track ids to placed layers

Rules:
- One id counter, shared by every media kind, so ids are globally unique
- Video tracks are reused when the previous occupant ended strictly before
  the new layer starts; candidates are scanned lowest id first so the
  result never depends on dict ordering
- Audio tracks are never reused: downstream mix parameters (pitch, volume)
  are keyed one-to-one by track id
- Two video tracks are reserved for cross-transitions, and a single filler
  track of blank content covers the timeline when some visual layer has no
  real video stream
"""

from typing import Dict, List, Optional, Tuple

from models.layer import MediaKind
from models.time_range import TimeRange
from models.composition import Track, TrackRole
from utils.logger import logger


class TrackAllocator:
    """Allocates track ids for a single layout pass"""

    def __init__(self):
        self._last_track_id: int = 0
        self._tracks: Dict[int, Track] = {}
        self._transition_pair: Optional[Tuple[int, int]] = None
        self._filler_track_id: Optional[int] = None

    def _increase_track_id(self) -> int:
        self._last_track_id += 1
        return self._last_track_id

    def _new_track(self, media_kind: MediaKind, role: TrackRole) -> Track:
        track = Track(id=self._increase_track_id(), media_kind=media_kind, role=role)
        self._tracks[track.id] = track
        return track

    def allocate_transition_pair(self) -> Tuple[int, int]:
        """
        Reserve the two video tracks carrying all cross-fade content.

        Calling this again returns the same pair.
        """
        if self._transition_pair is None:
            first = self._new_track(MediaKind.VIDEO, TrackRole.TRANSITION)
            second = self._new_track(MediaKind.VIDEO, TrackRole.TRANSITION)
            self._transition_pair = (first.id, second.id)
            logger.debug(f"Reserved transition tracks {self._transition_pair}")
        return self._transition_pair

    def allocate_video(self, layer_id: str, time_range: TimeRange) -> int:
        """
        Get a video track for a layer.

        Reuses the lowest-id layer track whose last occupant ended strictly
        before `time_range.start`, otherwise opens a new track.
        """
        for track_id in sorted(self._tracks):
            track = self._tracks[track_id]
            if track.media_kind != MediaKind.VIDEO or track.role != TrackRole.LAYER:
                continue
            if track.last_occupied_end is not None and track.last_occupied_end < time_range.start:
                track.occupy(layer_id, time_range)
                logger.debug(f"Video layer '{layer_id}' {time_range!r} reuses track {track.id}")
                return track.id

        track = self._new_track(MediaKind.VIDEO, TrackRole.LAYER)
        track.occupy(layer_id, time_range)
        logger.debug(f"Video layer '{layer_id}' {time_range!r} opens track {track.id}")
        return track.id

    def allocate_audio(self, layer_id: str, time_range: TimeRange) -> int:
        """Open a new audio track for a layer. Audio ids are never reused."""
        track = self._new_track(MediaKind.AUDIO, TrackRole.LAYER)
        track.occupy(layer_id, time_range)
        logger.debug(f"Audio layer '{layer_id}' {time_range!r} opens track {track.id}")
        return track.id

    def allocate_filler(self, span: TimeRange, source_duration: float) -> int:
        """
        Open the blank video track covering `span`.

        The inserted blank source is clipped to the span and, when shorter,
        time-scaled up to fill it.
        """
        if self._filler_track_id is not None:
            return self._filler_track_id

        track = self._new_track(MediaKind.VIDEO, TrackRole.FILLER)
        track.occupy(None, span)

        inserted = min(source_duration, span.duration)
        track.source_duration = inserted
        track.scale = span.duration / inserted if inserted > 0 else 1.0

        self._filler_track_id = track.id
        logger.debug(
            f"Filler track {track.id} spans {span!r} "
            f"(source {inserted:.2f}s, scale x{track.scale:.3f})"
        )
        return track.id

    @property
    def transition_pair(self) -> Optional[Tuple[int, int]]:
        return self._transition_pair

    @property
    def filler_track_id(self) -> Optional[int]:
        return self._filler_track_id

    @property
    def tracks(self) -> List[Track]:
        """All tracks ordered by id"""
        return [self._tracks[track_id] for track_id in sorted(self._tracks)]
