"""Key codes and limits shared by the input controller and autocomplete."""

from __future__ import annotations

KEYS: dict[str, int] = {
    "backspace": 8,
    "tab": 9,
    "enter": 13,
    "escape": 27,
    "space": 32,
    "left": 37,
    "up": 38,
    "right": 39,
    "down": 40,
    "delete": 46,
    # the separator key is ';' to match the model separator
    "comma": 186,
}

# Keys the tag list itself reacts to; tab and escape are left to other subscribers.
HOTKEYS: frozenset[int] = frozenset(
    KEYS[name] for name in ("enter", "comma", "space", "backspace", "delete", "left", "right")
)

MAX_SAFE_INTEGER = 9007199254740991
SUPPORTED_INPUT_TYPES = ("text", "email", "url")
