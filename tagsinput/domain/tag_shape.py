"""Display-text resolution for the two tag shapes.

A list holds either plain strings (raw mode) or dict records (structured
mode). The shape is chosen once from the options and every read or write of
a tag's text goes through it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from tagsinput.domain.options import TagsInputOptions
from tagsinput.services.text_util import safe_to_string

Tag = Any


class TagShape(ABC):
    @abstractmethod
    def text_of(self, tag: Tag) -> str:
        """Trimmed display text of ``tag``."""

    @abstractmethod
    def with_text(self, tag: Tag, text: str) -> Tag:
        """Write ``text`` back into ``tag`` and return the resulting tag."""

    @abstractmethod
    def from_text(self, text: str) -> Tag:
        """Build a new tag whose display text is ``text``."""

    @abstractmethod
    def identity_of(self, tag: Tag) -> Any:
        """Value compared when looking for duplicates."""


class RawStringShape(TagShape):
    def text_of(self, tag: Tag) -> str:
        return safe_to_string(tag)

    def with_text(self, tag: Tag, text: str) -> Tag:
        return text

    def from_text(self, text: str) -> Tag:
        return text

    def identity_of(self, tag: Tag) -> Any:
        return tag


class RecordShape(TagShape):
    def __init__(self, display_property: str, key_property: str = "") -> None:
        self.display_property = display_property
        self.key_property = key_property or display_property

    def text_of(self, tag: Tag) -> str:
        return safe_to_string(tag.get(self.display_property))

    def with_text(self, tag: Tag, text: str) -> Tag:
        tag[self.display_property] = text
        return tag

    def from_text(self, text: str) -> Tag:
        return {self.display_property: text}

    def identity_of(self, tag: Tag) -> Any:
        return tag.get(self.key_property)


def resolve_tag_shape(options: TagsInputOptions) -> TagShape:
    if options.raw_string:
        return RawStringShape()
    return RecordShape(options.display_property, options.key_property)
