"""
In-flight drag tracking.

The host delivers sensor events in order on one thread: start, any number of
hovers, then exactly one end or cancel. A completed drag produces a single
immutable DragEndDescriptor; a cancelled drag produces nothing.
"""

from enum import Enum
from logging import getLogger
from typing import Any, Callable

from navtree.data_models.dnd import DragEndDescriptor, DragKind, InsertionSide

logger = getLogger(__name__)

# Payload type tags emitted by older sidebar builds
LEGACY_KIND_TAGS = {
    "website": DragKind.item,
    "secondaryGroup": DragKind.group,
}


class DragState(str, Enum):
    idle = "idle"
    dragging = "dragging"


def classify_drag_kind(payload: dict[str, Any] | None) -> DragKind:
    """Infer what is being dragged from the data attached to the element.

    The explicit `type` tag wins; otherwise the presence of an `item` or
    `group` entry decides. Unknown payloads are treated as group drags.
    """
    if not payload:
        return DragKind.group

    tag = payload.get("type")
    if tag in (DragKind.item.value, DragKind.group.value):
        return DragKind(tag)
    if tag in LEGACY_KIND_TAGS:
        return LEGACY_KIND_TAGS[tag]

    if payload.get("item") is not None or payload.get("website") is not None:
        return DragKind.item
    return DragKind.group


def insertion_side(pointer_center_y: float, target_center_y: float) -> InsertionSide:
    if pointer_center_y < target_center_y:
        return InsertionSide.above
    return InsertionSide.below


class DragSession:
    """
    State machine for one sidebar's drag interactions.

    Usage:
        session = DragSession(on_drag_end=handle_descriptor)
        session.start("item-1", {"type": "item"})
        session.over("item-2", pointer_center_y=10, target_center_y=20)
        session.end("item-2")
    """

    def __init__(
        self,
        on_drag_end: Callable[[DragEndDescriptor], None] | None = None,
        on_drag_start: Callable[[str, DragKind], None] | None = None,
    ):
        self.on_drag_end = on_drag_end
        self.on_drag_start = on_drag_start
        self._reset()

    def _reset(self) -> None:
        self.state = DragState.idle
        self.active_id: str | None = None
        self.over_id: str | None = None
        self.drag_kind: DragKind | None = None
        self.insertion_side: InsertionSide | None = None

    @property
    def is_dragging(self) -> bool:
        return self.state == DragState.dragging

    def start(self, active_id: str, payload: dict[str, Any] | None = None) -> None:
        if self.is_dragging:
            logger.warning(
                f"Drag of {active_id} started while {self.active_id} was in flight; "
                "discarding the previous drag"
            )
        self._reset()
        self.state = DragState.dragging
        self.active_id = active_id
        self.drag_kind = classify_drag_kind(payload)

        if self.on_drag_start:
            self.on_drag_start(active_id, self.drag_kind)

    def over(
        self,
        over_id: str | None,
        pointer_center_y: float | None = None,
        target_center_y: float | None = None,
    ) -> None:
        """Record the hovered target and which half of it the pointer is on."""
        if not self.is_dragging:
            return

        self.over_id = over_id
        if over_id is None or pointer_center_y is None or target_center_y is None:
            return
        self.insertion_side = insertion_side(pointer_center_y, target_center_y)

    def end(self, over_id: str | None) -> DragEndDescriptor | None:
        """Finish the drag and emit its descriptor.

        Args:
            over_id: Drop target reported by the sensor layer, None when the
                pointer was released outside every droppable region

        Returns:
            The descriptor, or None if no drag was in flight
        """
        if not self.is_dragging or self.active_id is None:
            logger.debug("Drag end received while idle; ignoring")
            return None

        descriptor = DragEndDescriptor(
            activeId=self.active_id,
            overId=over_id,
            dragKind=self.drag_kind or DragKind.group,
            insertionSide=self.insertion_side or InsertionSide.below,
        )
        self._reset()

        if self.on_drag_end:
            self.on_drag_end(descriptor)
        return descriptor

    def cancel(self) -> None:
        if self.is_dragging:
            logger.debug(f"Drag of {self.active_id} cancelled")
        self._reset()
