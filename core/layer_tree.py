"""
Layer Tree - Validates and flattens nested layer groups

Groups are trees of layers-within-layers. Before layout the tree is
flattened with an explicit stack (no recursion) into top-level layout slots:

- A plain visual layer is a slot with a single member at offset 0
- A group is one slot spanning the union of its children, whose members are
  its visual leaf descendants with offsets relative to the group start
  (offsets carry through nested groups)

Audio-only leaves never go through layout. Children are owned strictly by
their parent; the only way back from a leaf to its group is the
`group_index` built here after flattening.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from models.layer import Layer, MediaKind, Transition
from models.time_range import TimeRange, quantize
from models.composition import LayoutNotice, NoticeKind
from utils.logger import logger

from .errors import DuplicateLayerIdError, InvalidLayerRangeError


@dataclass
class SlotMember:
    """A leaf layer positioned relative to the start of its slot"""
    layer: Layer
    offset: float = 0.0

    @property
    def duration(self) -> float:
        return self.layer.duration


@dataclass
class LayoutSlot:
    """
    One entry of the sequential layout.

    `members` are the visual leaves placed with the slot; `audio_members`
    are audio-only leaves of a group that follow the group's placement.
    """
    layer: Layer
    time_range: TimeRange
    members: List[SlotMember] = field(default_factory=list)
    audio_members: List[SlotMember] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.layer.id

    @property
    def duration(self) -> float:
        return self.time_range.duration

    @property
    def transition(self) -> Transition:
        return self.layer.transition


@dataclass
class FlattenedTimeline:
    """Result of flattening a layer list"""
    slots: List[LayoutSlot] = field(default_factory=list)
    audio_layers: List[Layer] = field(default_factory=list)
    group_index: Dict[str, str] = field(default_factory=dict)
    notices: List[LayoutNotice] = field(default_factory=list)

    def group_of(self, layer_id: str) -> Optional[str]:
        """Top-level group a layer was flattened out of, if any."""
        return self.group_index.get(layer_id)


def iter_layer_tree(layers: Iterable[Layer]) -> Iterable[Layer]:
    """Depth-first walk over every layer in the tree, groups included."""
    stack = list(reversed(list(layers)))
    while stack:
        layer = stack.pop()
        yield layer
        if layer.is_group:
            stack.extend(reversed(layer.children))


def validate_layers(layers: List[Layer]) -> None:
    """
    Reject layers that can't be laid out.

    Raises:
        InvalidLayerRangeError: a non-group layer with start < 0 or end <= start
        DuplicateLayerIdError: two layers share an id
    """
    seen: Set[str] = set()
    for layer in iter_layer_tree(layers):
        if layer.id in seen:
            raise DuplicateLayerIdError(layer.id)
        seen.add(layer.id)

        if layer.is_group:
            continue
        if layer.start < 0 or quantize(layer.end) <= quantize(layer.start):
            raise InvalidLayerRangeError(layer.id, layer.start, layer.end)


def flatten_layers(layers: List[Layer]) -> FlattenedTimeline:
    """
    Flatten groups into layout slots sorted by start time.

    Sorting is stable so layers starting at the same instant keep their input
    order. Empty groups contribute zero duration and are reported as notices.
    """
    flattened = FlattenedTimeline()

    for layer in layers:
        if not layer.is_group:
            if layer.is_visual:
                flattened.slots.append(
                    LayoutSlot(layer=layer, time_range=layer.time_range,
                               members=[SlotMember(layer=layer)])
                )
            elif layer.kind == MediaKind.AUDIO:
                flattened.audio_layers.append(layer)
            continue

        group_range = layer.time_range
        if group_range is None:
            _report_unresolved_group(flattened, layer)
            continue

        slot = LayoutSlot(layer=layer, time_range=group_range)
        stack = list(reversed(layer.children))
        while stack:
            child = stack.pop()
            if child.is_group:
                if child.time_range is None:
                    _report_unresolved_group(flattened, child)
                    continue
                flattened.group_index[child.id] = layer.id
                stack.extend(reversed(child.children))
                continue

            flattened.group_index[child.id] = layer.id
            member = SlotMember(layer=child, offset=quantize(child.start - group_range.start))
            if child.is_visual:
                slot.members.append(member)
            elif child.kind == MediaKind.AUDIO:
                slot.audio_members.append(member)

        slot.members.sort(key=lambda m: m.offset)
        slot.audio_members.sort(key=lambda m: m.offset)

        if slot.members:
            flattened.slots.append(slot)
        else:
            # Audio-only group: nothing to lay out, audio keeps its own range
            flattened.audio_layers.extend(m.layer for m in slot.audio_members)

    flattened.slots.sort(key=lambda s: s.time_range.start)
    flattened.audio_layers.sort(key=lambda l: l.start)

    logger.debug(
        f"Flattened {len(layers)} layers into {len(flattened.slots)} slots, "
        f"{len(flattened.audio_layers)} standalone audio layers"
    )
    return flattened


def _report_unresolved_group(flattened: FlattenedTimeline, group: Layer) -> None:
    message = f"Group '{group.name or group.id}' has no resolvable children; treated as zero duration"
    logger.warning(message)
    flattened.notices.append(
        LayoutNotice(kind=NoticeKind.UNRESOLVED_GROUP, layer_id=group.id, message=message)
    )
