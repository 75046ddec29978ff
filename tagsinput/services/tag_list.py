"""Ordered tag collection with a keyboard selection cursor.

``add`` is optimistic: it returns the (normalized) candidate immediately and
runs admission as an asyncio task. The collection only changes when that task
finishes with an admit; until then nothing is provisionally inserted, so the
returned tag is no promise of insertion. Use ``wait_pending`` to await every
admission in flight.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable

from tagsinput.core.errors import OutOfRangeIndexError
from tagsinput.core.logging import list_context
from tagsinput.domain.events import INVALID_TAG, TAG_ADDED, TAG_REMOVED, TagEvent
from tagsinput.domain.options import TagsInputOptions
from tagsinput.domain.rules import RejectReason, find_in_tag_list
from tagsinput.domain.tag_shape import Tag, resolve_tag_shape
from tagsinput.services.event_bus import EventBus
from tagsinput.services.text_util import replace_spaces_with_dashes
from tagsinput.services.validation_service import (
    AddingVeto,
    RemovingVeto,
    TagValidationPipeline,
    ValidationOutcome,
    removal_approved,
)

logger = logging.getLogger(__name__)

NO_SELECTION = -1


class TagList:
    def __init__(
        self,
        options: TagsInputOptions,
        events: EventBus,
        on_tag_adding: AddingVeto | None = None,
        on_tag_removing: RemovingVeto | None = None,
        list_id: str = "",
    ) -> None:
        self.options = options
        self.events = events
        self.shape = resolve_tag_shape(options)
        self.pipeline = TagValidationPipeline(options, self.shape, on_tag_adding)
        self.on_tag_removing = on_tag_removing
        self.list_id = list_id
        self.items: list[Tag] = []
        self.index = NO_SELECTION
        # Bumped on every reseed so admissions started earlier can be recognised.
        self._generation = 0
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def selected(self) -> Tag | None:
        if 0 <= self.index < len(self.items):
            return self.items[self.index]
        return None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def text_of(self, tag: Tag) -> str:
        return self.shape.text_of(tag)

    def reconfigure(self, options: TagsInputOptions) -> None:
        self.options = options
        self.pipeline.options = options

    def reset_items(self, items: Iterable[Tag]) -> None:
        """Replace the whole collection (host reseed); selection is dropped."""
        self.items = list(items)
        self.clear_selection()
        self._generation += 1

    def add_text(self, text: str) -> Tag:
        return self.add(self.shape.from_text(text))

    def add(self, tag: Tag) -> Tag:
        """Start admission of ``tag`` and return it without waiting.

        Must be called from a running event loop.
        """
        if self.options.replace_spaces_with_dashes:
            tag = self.shape.with_text(tag, replace_spaces_with_dashes(self.shape.text_of(tag)))

        task = asyncio.get_running_loop().create_task(self._admit(tag, self._generation))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return tag

    async def _admit(self, tag: Tag, generation: int) -> None:
        with list_context(self.list_id):
            outcome = await self.pipeline.validate(tag, self.items)

            if generation != self._generation and self.options.discard_stale_validations:
                logger.info("Dropping admission started before reseed | text=%r", self.text_of(tag))
                return

            # An equal candidate may have been admitted while this one awaited the veto.
            if outcome.admitted and find_in_tag_list(self.items, tag, self.shape) is not None:
                outcome = ValidationOutcome(admitted=False, reason=RejectReason.duplicate)

            if outcome.admitted:
                self.items.append(tag)
                self.clear_selection()
                logger.debug("Tag added | text=%r | count=%d", self.text_of(tag), len(self.items))
                self.events.trigger(TAG_ADDED, TagEvent(tag, list(self.items)))
            else:
                self.events.trigger(INVALID_TAG, TagEvent(tag, list(self.items), outcome.reason))

    async def wait_pending(self) -> None:
        """Wait for every admission in flight, including ones started meanwhile."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def remove(self, index: int) -> Tag | None:
        if not 0 <= index < len(self.items):
            raise OutOfRangeIndexError(index, len(self.items))

        tag = self.items[index]
        if not removal_approved(self.on_tag_removing, tag, list(self.items)):
            logger.debug("Removal denied by host | text=%r", self.text_of(tag))
            return None

        del self.items[index]
        self.clear_selection()
        self.events.trigger(TAG_REMOVED, TagEvent(tag, list(self.items)))
        return tag

    def select(self, index: int) -> None:
        if not self.items:
            self.clear_selection()
            return
        # wrap around rather than clamp
        if index < 0:
            index = len(self.items) - 1
        elif index >= len(self.items):
            index = 0
        self.index = index

    def select_prior(self) -> None:
        self.select(self.index - 1)

    def select_next(self) -> None:
        self.select(self.index + 1)

    def remove_selected(self) -> Tag | None:
        if self.index == NO_SELECTION:
            return None
        return self.remove(self.index)

    def clear_selection(self) -> None:
        self.index = NO_SELECTION
