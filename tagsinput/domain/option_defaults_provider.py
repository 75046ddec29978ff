from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


class OptionDefaultsProvider(ABC):
    @abstractmethod
    def get_defaults(self, directive: str = "tagsInput") -> dict[str, Any]:
        """Returns global option defaults for one control, keyed by option name."""
        raise NotImplementedError


class JsonFileOptionDefaultsProvider(OptionDefaultsProvider):
    """Reads defaults from a JSON file shaped like ``{"tagsInput": {"minLength": 3}}``."""

    def __init__(self, json_path: Path) -> None:
        self._json_path = json_path

    def get_defaults(self, directive: str = "tagsInput") -> dict[str, Any]:
        if not self._json_path.exists():
            logger.warning("Option defaults file not found: %s", self._json_path)
            return {}

        try:
            data = json.loads(self._json_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Failed to parse option defaults file %s: %s", self._json_path, exc)
            return {}

        if not isinstance(data, dict):
            return {}
        section = data.get(directive, {})
        if not isinstance(section, dict):
            return {}

        result: dict[str, Any] = {}
        for key, value in section.items():
            if not isinstance(key, str) or not key.strip():
                continue
            result[key.strip()] = value
        return result


def load_default_options(path: str | None) -> dict[str, Any]:
    if not path:
        return {}
    return JsonFileOptionDefaultsProvider(Path(path)).get_defaults()
