from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from tagsinput.domain.keys import KEYS

if TYPE_CHECKING:
    from tagsinput.domain.rules import RejectReason

TAG_ADDED = "tag-added"
INVALID_TAG = "invalid-tag"
TAG_REMOVED = "tag-removed"
TAG_CLICKED = "tag-clicked"
INPUT_CHANGE = "input-change"
INPUT_FOCUS = "input-focus"
INPUT_BLUR = "input-blur"
INPUT_KEYDOWN = "input-keydown"
INPUT_PASTE = "input-paste"
OPTION_CHANGE = "option-change"


@dataclass(frozen=True)
class TagEvent:
    """Payload of tag lifecycle events.

    ``tag_list`` is a snapshot of the collection taken when the event fired.
    ``reason`` is only set on ``invalid-tag``.
    """

    tag: Any
    tag_list: list[Any] = field(default_factory=list)
    reason: RejectReason | None = None


@dataclass(frozen=True)
class OptionChange:
    name: str
    new_value: Any


@dataclass
class KeyEvent:
    key_code: int
    shift: bool = False
    ctrl: bool = False
    alt: bool = False
    meta: bool = False
    default_prevented: bool = False

    @classmethod
    def for_key(cls, name: str, **modifiers: bool) -> "KeyEvent":
        return cls(key_code=KEYS[name], **modifiers)

    @property
    def modifier_on(self) -> bool:
        return self.shift or self.ctrl or self.alt or self.meta

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass
class PasteEvent:
    text: str
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True
