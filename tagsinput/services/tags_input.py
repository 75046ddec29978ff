"""Tag input controller: wires raw input events into the tag list.

Construction builds the parts (event bus, tag list, overflow window, host
model adapter); ``link`` subscribes the handlers. Collaborators such as the
autocomplete register between the two so their handlers run first and can
stop the input's own handling by returning ``False``. ``TagsInput.create``
does both steps for callers that need no collaborator.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from tagsinput.adapters.host_model import HostModelAdapter
from tagsinput.core.config import settings
from tagsinput.core.logging import list_context
from tagsinput.domain.events import (
    INPUT_BLUR,
    INPUT_CHANGE,
    INPUT_FOCUS,
    INPUT_KEYDOWN,
    INPUT_PASTE,
    INVALID_TAG,
    OPTION_CHANGE,
    TAG_ADDED,
    TAG_CLICKED,
    TAG_REMOVED,
    KeyEvent,
    OptionChange,
    PasteEvent,
    TagEvent,
)
from tagsinput.domain.keys import HOTKEYS, KEYS
from tagsinput.domain.option_defaults_provider import load_default_options
from tagsinput.domain.options import (
    SHAPE_OPTIONS,
    VALIDATION_OPTIONS,
    TagsInputOptions,
    canonical_option_name,
    resolve_options,
)
from tagsinput.domain.tag_shape import Tag
from tagsinput.services.autocomplete import AutocompleteBridge
from tagsinput.services.event_bus import EventBus, EventHandler
from tagsinput.services.tag_list import TagList
from tagsinput.services.validation_service import AddingVeto, RemovingVeto
from tagsinput.services.windowing import OverflowWindow

logger = logging.getLogger(__name__)


@dataclass
class TagsInputValidity:
    max_tags: bool = True
    min_tags: bool = True
    leftover_text: bool = True
    invalid_tag: bool = True

    @property
    def valid(self) -> bool:
        return self.max_tags and self.min_tags and self.leftover_text and self.invalid_tag


class TagsInput:
    def __init__(
        self,
        options: TagsInputOptions | Mapping[str, Any] | None = None,
        *,
        on_tag_adding: AddingVeto | None = None,
        on_tag_removing: RemovingVeto | None = None,
        on_tag_added: EventHandler | None = None,
        on_invalid_tag: EventHandler | None = None,
        on_tag_removed: EventHandler | None = None,
        on_tag_clicked: EventHandler | None = None,
        on_tag_change: EventHandler | None = None,
        on_model_change: Callable[[Any], None] | None = None,
        defaults: Mapping[str, Any] | None = None,
    ) -> None:
        if not isinstance(options, TagsInputOptions):
            if defaults is None:
                defaults = load_default_options(settings.OPTION_DEFAULTS_PATH)
            options = resolve_options(options, defaults)

        self.list_id = uuid.uuid4().hex[:8]
        self.options = options
        self.events = EventBus(trace=settings.LOG_EVENTS)
        self.tag_list = TagList(
            options,
            self.events,
            on_tag_adding=on_tag_adding,
            on_tag_removing=on_tag_removing,
            list_id=self.list_id,
        )
        self.window = OverflowWindow(options.display_limit)
        self.model = HostModelAdapter(self.tag_list, on_change=on_model_change)
        self.validity = TagsInputValidity()
        self.invalid: bool | None = None
        self.has_focus = False
        self.disabled = False
        self._text = ""
        self._hooks = {
            TAG_ADDED: on_tag_added,
            INVALID_TAG: on_invalid_tag,
            TAG_REMOVED: on_tag_removed,
            TAG_CLICKED: on_tag_clicked,
        }
        self._on_tag_change = on_tag_change
        self._linked = False

    @classmethod
    def create(cls, options: TagsInputOptions | Mapping[str, Any] | None = None, **kwargs: Any) -> "TagsInput":
        instance = cls(options, **kwargs)
        instance.link()
        return instance

    def link(self) -> None:
        if self._linked:
            return
        self.model.attach(self.events)
        (
            self.events.on(TAG_ADDED, lambda _e: self.set_text(""))
            .on(f"{TAG_ADDED} {TAG_REMOVED}", self._on_collection_change)
            .on(INVALID_TAG, self._on_invalid_tag)
            .on(OPTION_CHANGE, self._on_option_change)
            .on(INPUT_CHANGE, self._on_input_change)
            .on(INPUT_FOCUS, self._on_input_focus)
            .on(INPUT_BLUR, self._on_input_blur)
            .on(INPUT_KEYDOWN, self._on_input_keydown)
            .on(INPUT_PASTE, self._on_input_paste)
        )
        # Host hooks run after internal wiring so the model is already written back.
        for topic, hook in self._hooks.items():
            if hook is not None:
                self.events.on(topic, hook)
        self._linked = True

    def register_autocomplete(self) -> AutocompleteBridge:
        if self._linked:
            logger.warning("Autocomplete registered after link; its key handling runs last")
        return AutocompleteBridge(self)

    # --- input text ---

    @property
    def text(self) -> str:
        return self._text

    def set_text(self, value: str) -> None:
        self._text = value
        self.events.trigger(INPUT_CHANGE, value)

    # --- host model ---

    def set_model(self, value: Any) -> None:
        with list_context(self.list_id):
            self.model.set_model(value)
            self.window.observe(len(self.tag_list.items))
            self._update_validity()

    @property
    def visible_tags(self) -> list[Tag]:
        return self.window.visible(self.tag_list.items)

    def show_overflow_tags(self) -> None:
        self.window.expand()

    def hide_overflow_tags(self) -> None:
        self.window.collapse()

    def reset(self) -> None:
        """Manual reset: empty the model and release the overflow latch."""
        with list_context(self.list_id):
            self.model.clear()
            self.window.reset()
            self.window.observe(0)
            self._update_validity()
            logger.info("Tag input reset")

    def update_option(self, name: str, value: Any) -> None:
        """Reconfigure one option at runtime and announce it as ``option-change``."""
        name = canonical_option_name(name)
        if name in SHAPE_OPTIONS:
            raise ValueError(f"Option '{name}' fixes the tag shape and cannot change after creation")
        if name not in TagsInputOptions.model_fields:
            logger.debug("Ignoring unknown option %r", name)
            return

        self.options = self.options.with_changes(**{name: value})
        self.tag_list.reconfigure(self.options)
        if name == "display_limit":
            self.window.display_limit = self.options.display_limit
            if not self.options.display_limit:
                self.window.reset()
            self.window.observe(len(self.tag_list.items))
        self.events.trigger(OPTION_CHANGE, OptionChange(name, getattr(self.options, name)))

    # --- raw input events ---

    def keydown(self, event: KeyEvent) -> None:
        with list_context(self.list_id):
            if event.key_code == KEYS["escape"]:
                self.blur()
            self.events.trigger(INPUT_KEYDOWN, event)

    def paste(self, event: PasteEvent) -> None:
        with list_context(self.list_id):
            self.events.trigger(INPUT_PASTE, event)

    def focus(self) -> None:
        if self.has_focus:
            return
        self.has_focus = True
        self.events.trigger(INPUT_FOCUS)

    def blur(self) -> None:
        self.tag_list.clear_selection()
        self.has_focus = False
        self.events.trigger(INPUT_BLUR)

    def click_tag(self, tag: Tag) -> None:
        self.events.trigger(TAG_CLICKED, TagEvent(tag, list(self.tag_list.items)))

    def remove_tag(self, index: int) -> Tag | None:
        """Remove action of a rendered tag item."""
        if self.disabled:
            return None
        return self.tag_list.remove(index)

    # --- handlers ---

    def _update_validity(self) -> None:
        count = len(self.tag_list.items)
        self.validity.max_tags = count <= self.options.max_tags
        self.validity.min_tags = count >= self.options.min_tags
        self.validity.leftover_text = (
            True if self.has_focus or self.options.allow_leftover_text else not self._text
        )

    def _on_collection_change(self, event: TagEvent) -> None:
        self.window.observe(len(self.tag_list.items))
        self._update_validity()
        if self._on_tag_change is not None:
            self._on_tag_change(event)

    def _on_invalid_tag(self, event: TagEvent) -> None:
        self.set_text("")
        self.invalid = True
        self.validity.invalid_tag = False

    def _on_option_change(self, change: OptionChange) -> None:
        if change.name in VALIDATION_OPTIONS:
            self._update_validity()

    def _on_input_change(self, _value: str) -> None:
        self.tag_list.clear_selection()
        self.invalid = None
        self.validity.invalid_tag = True

    def _on_input_focus(self, _payload: Any) -> None:
        self.validity.leftover_text = True

    def _on_input_blur(self, _payload: Any) -> None:
        if self.options.add_on_blur and not self.options.add_from_autocomplete_only and self._text:
            self.tag_list.add_text(self._text)
        self._update_validity()

    def _on_input_keydown(self, event: KeyEvent) -> None:
        key = event.key_code
        if event.modifier_on or key not in HOTKEYS:
            return

        options = self.options
        add_keys = {
            KEYS["enter"]: options.add_on_enter,
            KEYS["comma"]: options.add_on_comma,
            KEYS["space"]: options.add_on_space,
        }
        empty = not self._text
        should_add = not options.add_from_autocomplete_only and add_keys.get(key, False)
        should_remove = (
            key in (KEYS["backspace"], KEYS["delete"]) and self.tag_list.selected is not None
        )
        should_edit_last = key == KEYS["backspace"] and empty and options.enable_editing_last_tag
        should_select = (
            key in (KEYS["backspace"], KEYS["left"], KEYS["right"])
            and empty
            and not options.enable_editing_last_tag
        )

        if should_add:
            self.tag_list.add_text(self._text)
        elif should_edit_last:
            self.tag_list.select_prior()
            tag = self.tag_list.remove_selected()
            if tag is not None:
                self.set_text(self.tag_list.text_of(tag))
        elif should_remove:
            self.tag_list.remove_selected()
        elif should_select:
            if key in (KEYS["left"], KEYS["backspace"]):
                self.tag_list.select_prior()
            else:
                self.tag_list.select_next()

        if should_add or should_select or should_remove or should_edit_last:
            event.prevent_default()

    def _on_input_paste(self, event: PasteEvent) -> None:
        if not self.options.add_on_paste:
            return
        fragments = [f for f in self.options.paste_split_pattern.split(event.text) if f]
        # collapse repeats by raw equality, keeping first-seen order
        for fragment in dict.fromkeys(fragments):
            self.tag_list.add_text(fragment)
        event.prevent_default()
