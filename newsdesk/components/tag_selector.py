"""
Tag Selector.

Multi-select dropdown state over a form's tag directory: current
selection, open/closed flag and (for the tag form) a name filter.
The selector never talks to the network.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from newsdesk.components.interaction import OutsideInteractionSignal, is_within
from newsdesk.schemas.tag import Tag
from newsdesk.services.tag_directory import TagDirectory


def filter_tags(tags: Iterable[Tag], query: str) -> list[Tag]:
    """
    Tags whose name contains ``query``, ignoring case.

    An empty query matches every tag; tags without a name never match a
    non-empty query.
    """
    needle = query.casefold()
    if not needle:
        return list(tags)
    return [tag for tag in tags if tag.name is not None and needle in tag.name.casefold()]


@dataclass(frozen=True)
class Chip:
    """A selected tag as shown above the dropdown."""

    id: int
    name: str | None


@dataclass(frozen=True)
class TagOption:
    """One row of the dropdown list."""

    id: int
    name: str | None
    checked: bool


class TagSelector:
    """
    Selection state for one tag dropdown.

    The selection has set semantics: ``toggle`` adds an absent id and
    removes a present one, so toggling twice restores the original set.
    """

    def __init__(
        self,
        directory: TagDirectory,
        region: str,
        selected: Iterable[int] = (),
        filterable: bool = False,
    ) -> None:
        self.directory = directory
        self.region = region
        self.filterable = filterable
        self.is_open = False
        self.query = ""
        self._selected: list[int] = list(dict.fromkeys(selected))
        self._signal: OutsideInteractionSignal | None = None

    @property
    def selected(self) -> list[int]:
        return list(self._selected)

    def is_selected(self, tag_id: int) -> bool:
        return tag_id in self._selected

    def toggle(self, tag_id: int) -> list[int]:
        """Add or remove ``tag_id``; returns the new selection."""
        if tag_id in self._selected:
            self._selected.remove(tag_id)
        else:
            self._selected.append(tag_id)
        return self.selected

    def chips(self) -> list[Chip]:
        """Selected ids resolved against the directory."""
        chips = []
        for tag_id in self._selected:
            tag = self.directory.get(tag_id)
            chips.append(Chip(id=tag_id, name=tag.name if tag else None))
        return chips

    def options(self) -> list[TagOption]:
        """Every directory tag, with its checkbox state."""
        return [
            TagOption(id=tag.id, name=tag.name, checked=tag.id in self._selected)
            for tag in self.directory
        ]

    def set_query(self, query: str) -> None:
        self.query = query

    def filtered(self, query: str | None = None) -> list[Tag]:
        """Directory tags matching ``query`` (the stored query if None)."""
        return filter_tags(self.directory, self.query if query is None else query)

    def visible_tags(self) -> list[Tag]:
        """Tags shown in the chip area: filtered for the tag form, all otherwise."""
        if self.filterable:
            return self.filtered()
        return self.directory.tags

    def activate(self) -> bool:
        """Toggle the dropdown from its arrow; returns the new state."""
        self.is_open = not self.is_open
        return self.is_open

    def close(self) -> None:
        self.is_open = False

    def _on_pointer_down(self, target: str) -> None:
        if not is_within(target, self.region):
            self.close()

    def mount(self, signal: OutsideInteractionSignal) -> None:
        """Start closing on pointer-downs outside ``region``."""
        if self._signal is not None:
            self._signal.unsubscribe(self._on_pointer_down)
        self._signal = signal
        signal.subscribe(self._on_pointer_down)

    def unmount(self) -> None:
        if self._signal is not None:
            self._signal.unsubscribe(self._on_pointer_down)
            self._signal = None
