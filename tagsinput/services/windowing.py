from __future__ import annotations

import logging
from typing import Any, Sequence

logger = logging.getLogger(__name__)


class OverflowWindow:
    """Display-only truncation of a long tag list.

    Overflow latches once the list reaches ``display_limit`` and stays latched
    when the list shrinks again, until ``reset``. While latched and collapsed
    only the most recent ``display_limit`` tags are visible (tail-only).
    """

    def __init__(self, display_limit: int = 0) -> None:
        self.display_limit = display_limit
        self.overflow = False
        self.expanded = False
        self.total = 0

    def observe(self, length: int) -> None:
        """Recompute for the current collection length."""
        self.total = length
        if not self.display_limit or length < self.display_limit:
            return
        if self.overflow and self.expanded:
            return
        if not self.overflow:
            logger.debug("Overflow latched | length=%d | limit=%d", length, self.display_limit)
        self.overflow = True
        self.expanded = False

    @property
    def collapsed(self) -> bool:
        return self.overflow and not self.expanded

    @property
    def visible_count(self) -> int:
        if self.collapsed:
            return min(self.total, self.display_limit)
        return self.total

    @property
    def hidden_count(self) -> int:
        return max(0, self.total - self.visible_count)

    def visible(self, items: Sequence[Any]) -> list[Any]:
        if self.collapsed:
            return list(items[-self.display_limit:])
        return list(items)

    def expand(self) -> None:
        self.expanded = True

    def collapse(self) -> None:
        self.expanded = False

    def reset(self) -> None:
        self.overflow = False
        self.expanded = False
