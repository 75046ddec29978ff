"""Bridge between the host's model value and the tag list.

The host holds either a separator-joined string (raw mode) or a list
(structured mode). Every external change reseeds the list wholesale; every
add/remove writes the list back in the host's shape.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from tagsinput.domain.events import TAG_ADDED, TAG_REMOVED, TagEvent
from tagsinput.domain.options import TagsInputOptions
from tagsinput.services.event_bus import EventBus
from tagsinput.services.tag_list import TagList

logger = logging.getLogger(__name__)


def make_object_array(value: Any, options: TagsInputOptions) -> list[Any]:
    """Normalize a host model value into tag-shaped entries.

    Accepts:
    - None / empty -> []
    - str (raw mode) -> parts split on the model separator, empties dropped
    - list (raw mode) -> unchanged
    - list of primitives (structured mode) -> records keyed by key/display property
    - list of records (structured mode) -> unchanged
    """
    if not value:
        return []
    if options.raw_string:
        if isinstance(value, (list, tuple)):
            return list(value)
        if isinstance(value, str):
            return [part for part in value.split(options.model_separator) if part]
        return []

    if not isinstance(value, (list, tuple)):
        logger.warning("Structured tag model must be a list, got %s", type(value).__name__)
        return []
    if isinstance(value[0], dict):
        return list(value)
    key = options.tag_key_property
    return [{key: item} for item in value]


class HostModelAdapter:
    def __init__(
        self,
        tag_list: TagList,
        on_change: Callable[[Any], None] | None = None,
    ) -> None:
        self.tag_list = tag_list
        self.on_change = on_change
        self.value: Any = None
        self.dirty = False

    @property
    def options(self) -> TagsInputOptions:
        return self.tag_list.options

    def attach(self, events: EventBus) -> None:
        events.on(f"{TAG_ADDED} {TAG_REMOVED}", self._write_back)

    def set_model(self, value: Any) -> None:
        """External model change: reseed the tag list from ``value``."""
        if not value:
            self.tag_list.reset_items([])
            self.value = value
            return
        self.tag_list.reset_items(make_object_array(value, self.options))
        self.value = self.serialize()

    def clear(self) -> None:
        """Empty the list and publish the empty model to the host."""
        self.tag_list.reset_items([])
        self._publish()

    def serialize(self) -> Any:
        items = self.tag_list.items
        if self.options.raw_string:
            return self.options.model_separator.join(str(item) for item in items)
        return list(items)

    def _write_back(self, event: TagEvent) -> None:
        self._publish()

    def _publish(self) -> None:
        self.value = self.serialize()
        self.dirty = True
        if self.on_change is not None:
            self.on_change(self.value)
