"""
Layout Builder - Sequential placement of layout slots

Slots are laid end to end from time zero in start-time order. A slot with a
transition lets the next slot begin inside its tail, so every transition
consumes screen time instead of adding it:

  A (5s, 1s transition) then B (5s)

  0s ---- A passthrough ---- 4s == A x B == 5s ---- B passthrough ---- 9s

The builder records:
- breakpoints: every placed start/end (slots and group members), plus 0
- passthrough ranges: the part of each slot not shared with a neighbour
- transition ranges: the overlap windows [next.start, previous.end), each
  with the clamped transition of the slot that opened it
"""

from dataclasses import dataclass, field
from typing import Dict, List, Set

from models.layer import Transition
from models.time_range import TimeRange, quantize
from models.composition import CompositionLayout, LayerPlacement, LayoutNotice, NoticeKind
from utils.logger import logger

from .layer_tree import LayoutSlot


@dataclass
class BuiltLayout:
    """Output of the layout builder"""
    layout: CompositionLayout
    placements: List[LayerPlacement] = field(default_factory=list)
    slot_ranges: Dict[str, TimeRange] = field(default_factory=dict)
    audio_placements: List[LayerPlacement] = field(default_factory=list)
    notices: List[LayoutNotice] = field(default_factory=list)


class LayoutBuilder:
    """Builds the composition layout for one pass"""

    def __init__(self, slots: List[LayoutSlot]):
        self.slots = slots
        self._notices: List[LayoutNotice] = []

    def _effective_transition_durations(self) -> List[float]:
        """
        Transition duration actually applied at the tail of each slot.

        A transition can't be longer than what is left of its own slot after
        the leading overlap, nor longer than the following slot. Longer
        requests are clamped. The last slot has nobody to hand its tail to,
        so it keeps its full length.
        """
        durations: List[float] = []
        lead = 0.0
        count = len(self.slots)

        for idx, slot in enumerate(self.slots):
            transition = slot.transition
            trail = 0.0

            if transition.is_animated and idx < count - 1:
                limit = min(slot.duration - lead, self.slots[idx + 1].duration)
                trail = quantize(max(0.0, min(transition.duration, limit)))
                if trail < quantize(transition.duration):
                    message = (
                        f"Transition '{transition.effect_id}' on '{slot.layer.name or slot.id}' "
                        f"clamped from {transition.duration:.3f}s to {trail:.3f}s"
                    )
                    logger.warning(message)
                    self._notices.append(LayoutNotice(
                        kind=NoticeKind.DEGENERATE_TRANSITION,
                        layer_id=slot.id,
                        message=message,
                    ))
            elif transition.is_animated:
                logger.debug(
                    f"Last slot '{slot.id}' transition tail folded back into passthrough"
                )

            durations.append(trail)
            lead = trail

        return durations

    def build(self) -> BuiltLayout:
        """Place every slot and classify the resulting timeline."""
        self._notices = []
        trails = self._effective_transition_durations()

        breakpoints: Set[float] = {0.0}
        passthrough_ranges: List[TimeRange] = []
        transition_ranges: List[TimeRange] = []
        window_transitions: List[Transition] = []
        result = BuiltLayout(layout=CompositionLayout((0.0,), (), ()))

        next_start = 0.0
        previous_was_transition = False
        previous_end = 0.0
        previous_transition = Transition.NONE
        lead = 0.0
        order = 0

        for idx, slot in enumerate(self.slots):
            trail = trails[idx]
            slot_range = TimeRange.from_duration(next_start, slot.duration)

            # Close the overlap window opened by the previous slot
            if previous_was_transition:
                transition_ranges.append(TimeRange(slot_range.start, previous_end))
                window_transitions.append(previous_transition)

            passthrough = TimeRange(slot_range.start + lead, slot_range.end - trail)
            if not passthrough.is_empty:
                passthrough_ranges.append(passthrough)

            breakpoints.add(slot_range.start)
            breakpoints.add(slot_range.end)

            slot_transition = slot.transition.with_duration(trail) if trail > 0 else Transition.NONE
            for member in slot.members:
                placed = TimeRange.from_duration(slot_range.start + member.offset, member.duration)
                breakpoints.add(placed.start)
                breakpoints.add(placed.end)
                result.placements.append(LayerPlacement(
                    layer=member.layer,
                    time_range=placed,
                    slot_id=slot.id,
                    transition=slot_transition,
                    order=order,
                ))
                order += 1

            for member in slot.audio_members:
                placed = TimeRange.from_duration(slot_range.start + member.offset, member.duration)
                result.audio_placements.append(LayerPlacement(
                    layer=member.layer,
                    time_range=placed,
                    slot_id=slot.id,
                ))

            result.slot_ranges[slot.id] = slot_range

            logger.debug(
                f"Slot '{slot.id}': placed {slot_range!r}, passthrough {passthrough!r}, "
                f"transition tail {trail:.3f}s"
            )

            next_start = slot_range.end - trail
            previous_was_transition = trail > 0
            previous_end = slot_range.end
            previous_transition = slot_transition
            lead = trail

        result.layout = CompositionLayout(
            breakpoints=tuple(sorted(breakpoints)),
            passthrough_ranges=tuple(passthrough_ranges),
            transition_ranges=tuple(transition_ranges),
            transitions=tuple(window_transitions),
        )
        result.notices = list(self._notices)

        logger.debug(f"Transitions: {list(transition_ranges)}")
        logger.debug(f"Passthrough: {list(passthrough_ranges)}")
        return result
