"""
Timeline Layout - Turns a layer timeline into tracks and instructions

This is the entry point of the layout engine:

1. Validate layer ranges and ids
2. Flatten groups into sequential layout slots
3. Reserve the two transition tracks
4. Place slots, collecting breakpoints and passthrough/transition ranges
5. Allocate video tracks (placement order), the blank filler track if some
   visual layer has no video stream, then one audio track per audio source
6. Generate one instruction per pair of consecutive breakpoints
7. Build the audio mix table

Every pass starts from fresh allocator and builder state, so laying out the
same layers twice yields identical results.
"""

import logging
import traceback
from typing import Dict, Iterable, List, Optional

from config import settings
from models.layer import Layer
from models.time_range import TimeRange
from models.composition import LayerPlacement, LayoutResult
from utils.logger import logger

from .audio_mix import build_audio_mix
from .errors import LayoutError
from .instruction_generator import InstructionGenerator
from .layer_tree import flatten_layers, validate_layers
from .layout_builder import LayoutBuilder
from .track_allocator import TrackAllocator
from .transition_registry import TransitionRegistry


class TimelineLayout:
    """
    Computes tracks, layout and instructions for a list of layers.

    The optional `log` replaces the package logger as the tracing sink.
    """

    def __init__(
        self,
        layers: Iterable[Layer],
        registry: Optional[TransitionRegistry] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.layers: List[Layer] = list(layers)
        self.registry = registry
        self._log = log or logger
        self._result: Optional[LayoutResult] = None
        self._is_built: bool = False

    def build(self) -> LayoutResult:
        """
        Run a layout pass.

        Raises:
            LayoutError: If the layers can't be laid out
        """
        try:
            self._log.info("=" * 60)
            self._log.info("TIMELINE LAYOUT: Building")
            self._log.info("=" * 60)

            self._result = self._build()
            self._is_built = True

            self._log_summary()
            if settings.DEBUG_DUMP:
                self._log.debug("\n" + self.get_debug_info())

            return self._result

        except LayoutError as e:
            self._log.error(f"Timeline layout failed: {e}")
            self._log.debug(traceback.format_exc())
            self._is_built = False
            raise

    def _build(self) -> LayoutResult:
        validate_layers(self.layers)
        flattened = flatten_layers(self.layers)

        allocator = TrackAllocator()
        transition_track_ids = allocator.allocate_transition_pair()

        built = LayoutBuilder(flattened.slots).build()

        # Video tracks, in placement order
        video_track_ids: Dict[str, int] = {}
        for placement in built.placements:
            if placement.layer.has_video_stream:
                video_track_ids[placement.layer_id] = allocator.allocate_video(
                    placement.layer_id, placement.time_range
                )

        # Blank track for layers with nothing to decode (images, broken sources)
        filler_track_id = None
        if any(not p.layer.has_video_stream for p in built.placements):
            span = TimeRange(
                min(p.time_range.start for p in built.placements),
                max(p.time_range.end for p in built.placements),
            )
            filler_track_id = allocator.allocate_filler(span, settings.BLANK_SOURCE_DURATION)

        # Audio tracks, one per audio source, never shared
        audio_placements = [p for p in built.placements if p.layer.has_audio_stream]
        audio_placements += [p for p in built.audio_placements if p.layer.has_audio_stream]
        audio_placements += [
            LayerPlacement(layer=layer, time_range=layer.time_range, slot_id=layer.id)
            for layer in flattened.audio_layers
            if layer.has_audio_stream
        ]
        audio_placements.sort(key=lambda p: p.time_range.start)

        audio_track_ids: Dict[str, int] = {}
        for placement in audio_placements:
            audio_track_ids[placement.layer_id] = allocator.allocate_audio(
                placement.layer_id, placement.time_range
            )

        instructions = InstructionGenerator(
            layout=built.layout,
            placements=built.placements,
            video_track_ids=video_track_ids,
            transition_track_ids=transition_track_ids,
            filler_track_id=filler_track_id,
            registry=self.registry,
        ).generate()

        placements: Dict[str, LayerPlacement] = {}
        for slot in flattened.slots:
            if slot.layer.is_group:
                placements[slot.id] = LayerPlacement(
                    layer=slot.layer,
                    time_range=built.slot_ranges[slot.id],
                    slot_id=slot.id,
                )
        for placement in built.placements + audio_placements:
            placements.setdefault(placement.layer_id, placement)

        return LayoutResult(
            tracks=allocator.tracks,
            video_track_ids=video_track_ids,
            audio_track_ids=audio_track_ids,
            transition_track_ids=transition_track_ids,
            layout=built.layout,
            placements=placements,
            instructions=instructions,
            filler_track_id=filler_track_id,
            audio_mix=build_audio_mix(audio_placements, audio_track_ids),
            notices=flattened.notices + built.notices,
        )

    def _log_summary(self):
        """Log a summary of the layout."""
        result = self._result
        self._log.info("=" * 60)
        self._log.info("TIMELINE LAYOUT: Summary")
        self._log.info("=" * 60)
        self._log.info(f"Total Duration: {result.total_duration:.2f}s")
        self._log.info(f"Layers: {len(self.layers)}")
        self._log.info(f"Tracks: {len(result.tracks)}")
        self._log.info(f"Breakpoints: {len(result.layout.breakpoints)}")
        self._log.info(f"Transition Ranges: {len(result.layout.transition_ranges)}")
        self._log.info(f"Instructions: {len(result.instructions)}")
        if result.notices:
            self._log.info(f"Notices: {len(result.notices)}")
        self._log.info("=" * 60)

    # ========== Public API ==========

    @property
    def is_built(self) -> bool:
        return self._is_built

    @property
    def result(self) -> Optional[LayoutResult]:
        return self._result

    def get_debug_info(self) -> str:
        """Get detailed debug information."""
        if self._result is None:
            return "TIMELINE LAYOUT: not built"

        result = self._result
        time_info = settings.get_time_info()
        lines = [
            "=" * 70,
            "TIMELINE LAYOUT DEBUG INFO",
            "=" * 70,
            f"Total Duration: {result.total_duration:.2f}s",
            f"Timescale: {time_info['timescale']} "
            f"(resolution {time_info['resolution_seconds']:.6f}s)",
            "",
            "PLACEMENTS:",
            "-" * 50,
        ]

        for layer_id, placement in result.placements.items():
            video = result.track_for(layer_id)
            audio = result.audio_track_ids.get(layer_id)
            lines.append(
                f"  [{video if video is not None else '-'}|{audio if audio is not None else '-'}] "
                f"{placement.layer.name or layer_id}: {placement.time_range!r} "
                f"(z={placement.z_level}, {placement.transition})"
            )

        lines.extend(["", "TRACKS:", "-" * 50])
        for track in result.tracks:
            lines.append(f"  {track}")

        lines.extend(["", "TRANSITIONS:", "-" * 50])
        for time_range in result.layout.transition_ranges:
            lines.append(f"  {time_range!r}")

        lines.extend(["", "PASSTHROUGH:", "-" * 50])
        for time_range in result.layout.passthrough_ranges:
            lines.append(f"  {time_range!r}")

        lines.extend(["", "INSTRUCTIONS:", "-" * 50])
        for instruction in result.instructions:
            lines.append(instruction.describe())

        if result.notices:
            lines.extend(["", "NOTICES:", "-" * 50])
            for notice in result.notices:
                lines.append(f"  {notice.kind.value}: {notice.message}")

        lines.append("=" * 70)

        return "\n".join(lines)


def layout(
    layers: Iterable[Layer],
    registry: Optional[TransitionRegistry] = None,
    log: Optional[logging.Logger] = None,
) -> LayoutResult:
    """Lay out a timeline. See `TimelineLayout.build`."""
    return TimelineLayout(layers, registry=registry, log=log).build()
