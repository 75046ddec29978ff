"""Per-instance options of a tag input.

Options arrive from the host as camelCase attributes (``addOnEnter``) or
snake_case keyword arguments. Each value is validated against its declared
type; a value that fails validation falls back to the field default and a
warning is logged, so a bad attribute never breaks the control.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Mapping, Pattern

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic.alias_generators import to_camel

from tagsinput.domain.keys import MAX_SAFE_INTEGER, SUPPORTED_INPUT_TYPES

logger = logging.getLogger(__name__)

# Options that decide the tag shape; fixed for the lifetime of a list.
SHAPE_OPTIONS = frozenset({"raw_string", "display_property", "key_property"})

# Options whose change affects the model validity flags.
VALIDATION_OPTIONS = frozenset({"min_tags", "max_tags", "allow_leftover_text"})

_EXTRA_CHECKS: dict[str, Callable[[Any], bool]] = {
    "type": lambda v: v in SUPPORTED_INPUT_TYPES,
    "min_length": lambda v: v >= 0,
    "max_length": lambda v: v >= 0,
    "min_tags": lambda v: v >= 0,
    "max_tags": lambda v: v >= 0,
    "display_limit": lambda v: v >= 0,
    "model_separator": lambda v: bool(v),
}


class TagsInputOptions(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        protected_namespaces=(),
    )

    raw_string: bool = True
    display_property: str = "text"
    key_property: str = ""
    min_length: int = 2
    max_length: int = MAX_SAFE_INTEGER
    min_tags: int = 0
    max_tags: int = MAX_SAFE_INTEGER
    allowed_tags_pattern: Pattern[str] = re.compile(".+")
    replace_spaces_with_dashes: bool = True
    enable_editing_last_tag: bool = False
    add_from_autocomplete_only: bool = False
    add_on_enter: bool = True
    add_on_space: bool = False
    add_on_comma: bool = True
    add_on_blur: bool = True
    add_on_paste: bool = False
    paste_split_pattern: Pattern[str] = re.compile(",")
    display_limit: int = Field(
        default=0,
        validation_alias=AliasChoices("displayLimit", "showTagsLimit", "display_limit"),
        description="Maximum number of tags shown before collapsing; 0 shows all",
    )
    allow_leftover_text: bool = True
    model_separator: str = ";"
    type: str = "text"
    placeholder: str = "Add a tag"
    tabindex: int | None = None
    spellcheck: bool = True
    highlight_matched_text: bool = True
    discard_stale_validations: bool = Field(
        default=False,
        description="Drop pending admissions that finish after the list was reseeded",
    )

    @field_validator("*", mode="wrap")
    @classmethod
    def _coerce_or_default(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        name = info.field_name or ""
        default = cls.model_fields[name].get_default(call_default_factory=True)
        try:
            result = handler(value)
        except ValidationError:
            logger.warning("Option %s=%r has the wrong type; using default %r", name, value, default)
            return default
        check = _EXTRA_CHECKS.get(name)
        if check is not None and not check(result):
            logger.warning("Option %s=%r is not allowed; using default %r", name, value, default)
            return default
        return result

    @property
    def tag_key_property(self) -> str:
        """Record field that identifies a structured tag."""
        return self.key_property or self.display_property

    def with_changes(self, **changes: Any) -> "TagsInputOptions":
        """Return a copy with ``changes`` validated like host-supplied options."""
        merged = self.model_dump()
        merged.update(changes)
        return TagsInputOptions.model_validate(merged)


def resolve_options(
    overrides: Mapping[str, Any] | None = None,
    defaults: Mapping[str, Any] | None = None,
) -> TagsInputOptions:
    """Resolve options once at list creation: global defaults, then per-instance values."""
    merged: dict[str, Any] = {}
    for source in (defaults or {}, overrides or {}):
        for key, value in source.items():
            merged[canonical_option_name(key)] = value
    return TagsInputOptions.model_validate(merged)


def canonical_option_name(key: str) -> str:
    if key in ("displayLimit", "showTagsLimit"):
        return "display_limit"
    for name, field in TagsInputOptions.model_fields.items():
        if key == name or key == field.alias:
            return name
    return key
