"""Tag input core.

State machine, admission pipeline and event wiring behind a tag-editing
input control. Rendering and the real text widget live with the host.
"""

from tagsinput.adapters.host_model import HostModelAdapter, make_object_array
from tagsinput.core.errors import OutOfRangeIndexError, TagsInputError, ValidationRejected
from tagsinput.domain.events import KeyEvent, OptionChange, PasteEvent, TagEvent
from tagsinput.domain.options import TagsInputOptions, resolve_options
from tagsinput.domain.rules import RejectReason
from tagsinput.services.autocomplete import AutocompleteBridge, AutocompleteMatch, SuggestionList
from tagsinput.services.event_bus import EventBus
from tagsinput.services.tag_list import TagList
from tagsinput.services.tags_input import TagsInput, TagsInputValidity
from tagsinput.services.validation_service import TagValidationPipeline, ValidationOutcome
from tagsinput.services.windowing import OverflowWindow

__all__ = [
    # Controller
    "TagsInput",
    "TagsInputValidity",
    # State machine and collaborators
    "TagList",
    "EventBus",
    "TagValidationPipeline",
    "ValidationOutcome",
    "OverflowWindow",
    "HostModelAdapter",
    "make_object_array",
    "AutocompleteBridge",
    "AutocompleteMatch",
    "SuggestionList",
    # Options and payloads
    "TagsInputOptions",
    "resolve_options",
    "TagEvent",
    "OptionChange",
    "KeyEvent",
    "PasteEvent",
    "RejectReason",
    # Errors
    "TagsInputError",
    "ValidationRejected",
    "OutOfRangeIndexError",
]
