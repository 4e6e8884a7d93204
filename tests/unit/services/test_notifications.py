"""Unit tests for NotificationCenter."""

from newsdesk.schemas.submission import NotificationLevel
from newsdesk.services.notifications import NotificationCenter


class TestNotificationCenter:
    def test_levels(self):
        center = NotificationCenter()

        center.info("i")
        center.success("s")
        center.warning("w")
        center.error("e")

        assert [n.level for n in center.items] == [
            NotificationLevel.INFO,
            NotificationLevel.SUCCESS,
            NotificationLevel.WARNING,
            NotificationLevel.ERROR,
        ]

    def test_scope_forwards_to_parent(self):
        page = NotificationCenter()
        first = page.scope()
        second = page.scope()

        first.warning("Attempt 1 failed. Retrying in 10 seconds...")
        second.success("Tag created")

        assert [n.message for n in first.items] == ["Attempt 1 failed. Retrying in 10 seconds..."]
        assert [n.message for n in second.items] == ["Tag created"]
        assert len(page.items) == 2

    def test_drain_empties(self):
        center = NotificationCenter()
        center.error("x")

        drained = center.drain()

        assert [n.message for n in drained] == ["x"]
        assert center.items == []
