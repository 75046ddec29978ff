from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Sequence

from tagsinput.core.errors import ValidationRejected
from tagsinput.domain.options import TagsInputOptions
from tagsinput.domain.tag_shape import TagShape
from tagsinput.services.text_util import default_comparer


class RejectReason(str, Enum):
    empty = "empty"
    length = "length"
    pattern = "pattern"
    duplicate = "duplicate"
    vetoed = "vetoed"


class AdmissionRule(ABC):
    @abstractmethod
    def check(
        self,
        text: str,
        tag: Any,
        items: Sequence[Any],
        shape: TagShape,
        options: TagsInputOptions,
    ) -> None:  # noqa: D401
        """Raise ValidationRejected when the candidate may not be added."""
        raise NotImplementedError


class NonEmptyRule(AdmissionRule):
    def check(self, text, tag, items, shape, options) -> None:  # type: ignore[no-untyped-def]
        if not text:
            raise ValidationRejected(RejectReason.empty, text)


class LengthRule(AdmissionRule):
    def check(self, text, tag, items, shape, options) -> None:  # type: ignore[no-untyped-def]
        if not options.min_length <= len(text) <= options.max_length:
            raise ValidationRejected(RejectReason.length, text)


class AllowedPatternRule(AdmissionRule):
    def check(self, text, tag, items, shape, options) -> None:  # type: ignore[no-untyped-def]
        # search anywhere, not a full match
        if not options.allowed_tags_pattern.search(text):
            raise ValidationRejected(RejectReason.pattern, text)


class DuplicateRule(AdmissionRule):
    def check(self, text, tag, items, shape, options) -> None:  # type: ignore[no-untyped-def]
        if find_in_tag_list(items, tag, shape) is not None:
            raise ValidationRejected(RejectReason.duplicate, text)


def find_in_tag_list(items: Sequence[Any], tag: Any, shape: TagShape) -> Any | None:
    """Return the first item comparing equal to ``tag`` (case-insensitive), else None."""
    wanted = shape.identity_of(tag)
    for item in items:
        if default_comparer(shape.identity_of(item), wanted):
            return item
    return None


RULES: list[AdmissionRule] = [NonEmptyRule(), LengthRule(), AllowedPatternRule(), DuplicateRule()]
