"""
Notification Service.

Collects the transient, non-blocking messages a form shows after user
actions (the "toasts"). Messages are rendered once and then dropped; every
message is also logged with source="forms".

Usage:
    center = NotificationCenter()
    center.error("Title and URL are required!")

    # Per-submission view that still forwards to the form's center
    scope = center.scope()
    scope.warning("Attempt 1 failed. Retrying in 10 seconds...")
    scope.items        # only this submission's messages
    center.drain()     # everything pending for the page, then cleared
"""

from newsdesk.core.logging import get_logger, log_with_source
from newsdesk.schemas.submission import Notification, NotificationLevel

logger = get_logger(__name__)

_LOG_LEVELS = {
    NotificationLevel.INFO: "info",
    NotificationLevel.SUCCESS: "info",
    NotificationLevel.WARNING: "warning",
    NotificationLevel.ERROR: "error",
}


class NotificationCenter:
    """
    Queue of pending notifications for one mounted form or page.

    Scopes created with ``scope()`` record their own messages and forward
    each one to their parent, so overlapping submissions never see each
    other's messages in their results while the page still shows all of them.
    """

    def __init__(self, parent: "NotificationCenter | None" = None) -> None:
        self._parent = parent
        self._items: list[Notification] = []

    @property
    def items(self) -> list[Notification]:
        """Messages pushed to this center that have not been drained."""
        return list(self._items)

    def push(self, level: NotificationLevel, message: str) -> Notification:
        notification = Notification(level=level, message=message)
        self._record(notification)
        log_with_source(logger, "forms", _LOG_LEVELS[level], message, notification=level.value)
        return notification

    def _record(self, notification: Notification) -> None:
        self._items.append(notification)
        if self._parent is not None:
            self._parent._record(notification)

    def info(self, message: str) -> Notification:
        return self.push(NotificationLevel.INFO, message)

    def success(self, message: str) -> Notification:
        return self.push(NotificationLevel.SUCCESS, message)

    def warning(self, message: str) -> Notification:
        return self.push(NotificationLevel.WARNING, message)

    def error(self, message: str) -> Notification:
        return self.push(NotificationLevel.ERROR, message)

    def scope(self) -> "NotificationCenter":
        """Child center for a single operation."""
        return NotificationCenter(parent=self)

    def drain(self) -> list[Notification]:
        """Return pending messages and forget them."""
        items, self._items = self._items, []
        return items
