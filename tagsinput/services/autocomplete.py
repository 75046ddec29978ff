"""Autocomplete side of the tag input.

The candidate list is resolved by the host; this module only filters it
against the current tags, tracks the highlighted suggestion and turns a
selection into a tag through the input's bridge.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable

from tagsinput.domain.events import INPUT_BLUR, INPUT_KEYDOWN, TAG_ADDED, KeyEvent
from tagsinput.domain.keys import KEYS
from tagsinput.domain.options import TagsInputOptions
from tagsinput.domain.rules import find_in_tag_list
from tagsinput.domain.tag_shape import Tag, resolve_tag_shape
from tagsinput.services.event_bus import EventHandler
from tagsinput.services.text_util import safe_highlight

if TYPE_CHECKING:
    from tagsinput.services.tags_input import TagsInput

logger = logging.getLogger(__name__)


class AutocompleteBridge:
    """What a tag input exposes to its autocomplete."""

    def __init__(self, tags_input: TagsInput) -> None:
        self._tags_input = tags_input

    def add_tag(self, tag: Tag) -> Tag:
        return self._tags_input.tag_list.add(tag)

    def focus_input(self) -> None:
        self._tags_input.focus()

    def get_tags(self) -> list[Tag]:
        return self._tags_input.tag_list.items

    def get_current_tag_text(self) -> str:
        return self._tags_input.text

    def get_options(self) -> TagsInputOptions:
        return self._tags_input.options

    def on(self, names: str, handler: EventHandler) -> "AutocompleteBridge":
        self._tags_input.events.on(names, handler)
        return self


class AutocompleteMatch:
    """Display helpers for one rendered suggestion."""

    def __init__(self, options: TagsInputOptions, query: str = "") -> None:
        self.options = options
        self.query = query
        self._shape = resolve_tag_shape(options)

    def display_text(self, candidate: Tag) -> str:
        return self._shape.text_of(candidate)

    def highlight(self, text: str) -> str:
        if self.options.highlight_matched_text:
            return safe_highlight(text, self.query)
        return text


class SuggestionList:
    def __init__(self, bridge: AutocompleteBridge, max_results: int = 10) -> None:
        self.bridge = bridge
        self.max_results = max_results
        self.items: list[Tag] = []
        self.index = -1
        self.query = ""
        self.visible = False
        self._shape = resolve_tag_shape(bridge.get_options())
        bridge.on(INPUT_KEYDOWN, self._on_keydown).on(f"{TAG_ADDED} {INPUT_BLUR}", self._on_hide)

    @property
    def selected(self) -> Tag | None:
        if 0 <= self.index < len(self.items):
            return self.items[self.index]
        return None

    def load(self, candidates: Iterable[Tag], query: str = "") -> None:
        """Show ``candidates`` minus the ones already present as tags."""
        current = self.bridge.get_tags()
        fresh = [c for c in candidates if find_in_tag_list(current, c, self._shape) is None]
        self.items = fresh[: self.max_results]
        self.query = query
        self.index = -1
        self.visible = bool(self.items)
        if self.visible:
            self.select(0)

    def matches(self) -> list[str]:
        match = AutocompleteMatch(self.bridge.get_options(), self.query)
        return [match.highlight(match.display_text(item)) for item in self.items]

    def select(self, index: int) -> None:
        if not self.items:
            self.index = -1
            return
        if index < 0:
            index = len(self.items) - 1
        elif index >= len(self.items):
            index = 0
        self.index = index

    def select_next(self) -> None:
        self.select(self.index + 1)

    def select_prior(self) -> None:
        self.select(self.index - 1)

    def add_selected(self) -> bool:
        tag = self.selected
        if tag is None:
            return False
        # records are copied so text normalization never edits the host's candidate
        self.bridge.add_tag(dict(tag) if isinstance(tag, dict) else tag)
        self.reset()
        return True

    def reset(self) -> None:
        self.items = []
        self.index = -1
        self.visible = False

    def _on_hide(self, _payload: Any) -> None:
        self.reset()

    def _on_keydown(self, event: KeyEvent) -> Any:
        if not self.visible or event.modifier_on:
            return None

        key = event.key_code
        handled = False
        if key == KEYS["down"]:
            self.select_next()
            handled = True
        elif key == KEYS["up"]:
            self.select_prior()
            handled = True
        elif key in (KEYS["enter"], KEYS["tab"]):
            handled = self.add_selected()

        if handled:
            event.prevent_default()
            # stop the tag input from also treating this key
            return False
        return None
