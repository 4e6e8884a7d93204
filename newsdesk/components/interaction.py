"""
Outside Interaction Signal.

Page-wide pointer-down notifications for components that must react to
clicks outside their own region (dropdowns closing themselves).

Targets and regions are slash-separated element paths: a target lies
inside a region when it equals the region or descends from it, so
``"record-tags/list/3"`` is inside ``"record-tags"`` but
``"record-tags-help"`` is not.
"""

from collections.abc import Callable

from newsdesk.core.logging import get_logger

logger = get_logger(__name__)

PointerListener = Callable[[str], None]


def is_within(target: str, region: str) -> bool:
    """Whether element path ``target`` lies inside ``region``."""
    return target == region or target.startswith(region.rstrip("/") + "/")


class OutsideInteractionSignal:
    """Document-wide pointer-down dispatcher."""

    def __init__(self) -> None:
        self._listeners: list[PointerListener] = []

    def subscribe(self, listener: PointerListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: PointerListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def pointer_down(self, target: str) -> None:
        """Deliver a pointer-down on ``target`` to every listener."""
        logger.debug("Pointer down", extra={"target": target, "listeners": len(self._listeners)})
        for listener in list(self._listeners):
            listener(target)
