"""
Instruction Generator - Turns breakpoints into per-interval instructions

Each pair of consecutive breakpoints becomes one instruction listing the
layers active in that interval, top-most first. Intervals inside a
transition window also get foreground/background roles taken from the two
reserved transition tracks. The roles alternate with the index of the first
interval of each transition window:

  index 0 -> fg=pair[1], bg=pair[0]
  index 1 -> fg=pair[0], bg=pair[1]

so two tracks carry every cross-fade on the timeline. The transition is
the one the layout recorded for the window.
"""

from typing import Dict, List, Optional, Tuple

from models.time_range import TimeRange
from models.composition import CompositionLayout, Instruction, LayerPlacement
from utils.logger import logger

from .transition_registry import TransitionRegistry


class InstructionGenerator:
    """Generates the instruction sequence for one layout pass"""

    def __init__(
        self,
        layout: CompositionLayout,
        placements: List[LayerPlacement],
        video_track_ids: Dict[str, int],
        transition_track_ids: Tuple[int, int],
        filler_track_id: Optional[int] = None,
        registry: Optional[TransitionRegistry] = None,
    ):
        self.layout = layout
        self.placements = sorted(placements, key=lambda p: p.order)
        self.video_track_ids = video_track_ids
        self.transition_track_ids = transition_track_ids
        self.filler_track_id = filler_track_id
        self.registry = registry

    def _placements_intersecting(self, segment: TimeRange) -> List[LayerPlacement]:
        return [
            p for p in self.placements
            if p.time_range.intersection(segment) is not None
        ]

    def _track_for(self, placement: LayerPlacement) -> Optional[int]:
        track_id = self.video_track_ids.get(placement.layer_id)
        if track_id is None and not placement.layer.has_video_stream:
            return self.filler_track_id
        return track_id

    def generate(self) -> List[Instruction]:
        instructions: List[Instruction] = []
        window_first_index: Dict[TimeRange, int] = {}

        for index, segment in self.layout.segments():
            contributing = self._placements_intersecting(segment)
            stacked = sorted(contributing, key=lambda p: p.z_level, reverse=True)
            layers = tuple(p.layer for p in stacked)
            transition_range = self.layout.transition_range_for(segment)

            if transition_range is not None:
                # Roles are fixed for the whole window, even when it is split
                alternating_index = window_first_index.setdefault(transition_range, index) % 2
                transition = self.layout.transition_for_range(transition_range)
                effect = None
                if self.registry is not None and transition.is_animated:
                    effect = self.registry.resolve(transition.effect_id)

                instruction = Instruction(
                    index=index,
                    time_range=segment,
                    layers=layers,
                    is_transition=True,
                    transition=transition,
                    transition_range=transition_range,
                    foreground_track_id=self.transition_track_ids[1 - alternating_index],
                    background_track_id=self.transition_track_ids[alternating_index],
                    required_track_ids=tuple(self.transition_track_ids),
                    effect=effect,
                )
            else:
                track_ids = [self._track_for(p) for p in stacked]
                required = tuple(sorted({t for t in track_ids if t is not None}))
                passthrough_track_id = next(
                    (t for t in reversed(track_ids) if t is not None), None
                )
                instruction = Instruction(
                    index=index,
                    time_range=segment,
                    layers=layers,
                    required_track_ids=required,
                    passthrough_track_id=passthrough_track_id,
                )

            if instruction.is_empty:
                logger.debug(f"Gap in timeline: {segment!r} has no contributing layers")

            instructions.append(instruction)

        return instructions
