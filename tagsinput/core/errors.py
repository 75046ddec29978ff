from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tagsinput.domain.rules import RejectReason


class TagsInputError(Exception):
    """Base class for errors raised by the tag input core."""


class ValidationRejected(TagsInputError):
    """Raised by an admission rule when a candidate tag may not be added.

    Never escapes the tag list: the rejection is reported as an ``invalid-tag``
    event instead.
    """

    def __init__(self, reason: RejectReason, text: str = ""):
        self.reason = reason
        self.text = text
        super().__init__(f"Tag '{text}' rejected: {reason.value}")


class OutOfRangeIndexError(TagsInputError, IndexError):
    """Raised when a tag index outside the current collection is used."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"Tag index {index} out of range for {length} tag(s)")
