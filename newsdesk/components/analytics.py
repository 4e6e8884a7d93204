"""
Analytics Beacon.

Matomo page-view tracking. The page loads the tracker script
asynchronously and replays the directives queued here; nothing the
tracker does is observable from this side.

Directives are appended to a single process-wide queue that is created
once and never cleared. Each directive is a list whose first element is
the command name:

    ["trackPageView"]
    ["enableLinkTracking"]
    ["setTrackerUrl", "<tracker_url>/matomo.php"]
    ["setSiteId", "<site_id>"]
"""

from dataclasses import dataclass

from newsdesk.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

Directive = list[str]

_event_queue: list[Directive] = []


def get_event_queue() -> list[Directive]:
    """The process-wide directive queue (``_paq`` on the page)."""
    return _event_queue


def tracking_directives(site_id: str, tracker_url: str) -> list[Directive]:
    """Directives pushed on every mount, in order."""
    base = tracker_url.rstrip("/")
    return [
        ["trackPageView"],
        ["enableLinkTracking"],
        ["setTrackerUrl", f"{base}/matomo.php"],
        ["setSiteId", site_id],
    ]


@dataclass(frozen=True)
class ScriptElement:
    """Script tag to inject into the page body."""

    src: str
    type: str = "text/javascript"
    is_async: bool = True
    defer: bool = True


class AnalyticsBeacon:
    """
    Tracker component for one page.

    ``mount`` acts on the first call and again whenever the site id or
    tracker URL changes; calling it again with the same parameters does
    nothing.
    """

    def __init__(self) -> None:
        self._params: tuple[str, str] | None = None
        self._script: ScriptElement | None = None

    @property
    def script(self) -> ScriptElement | None:
        return self._script

    def mount(self, site_id: str, tracker_url: str) -> ScriptElement:
        params = (site_id, tracker_url)
        if self._script is not None and params == self._params:
            return self._script

        base = tracker_url.rstrip("/")
        self._script = ScriptElement(src=f"{base}/matomo.js")
        self._params = params
        get_event_queue().extend(tracking_directives(site_id, tracker_url))

        log_with_source(
            logger, "analytics", "debug", "Tracker mounted", site_id=site_id, tracker_url=base
        )
        return self._script
