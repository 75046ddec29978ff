from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], Any]


class EventBus:
    """Synchronous publish/subscribe scoped to one tag input.

    ``on`` accepts a space-separated list of topics. Handlers run in
    subscription order; a handler returning exactly ``False`` stops the
    remaining handlers for that trigger.

    Example:
        bus = EventBus()
        bus.on("tag-added tag-removed", sync_model).on("invalid-tag", flag_invalid)
        bus.trigger("tag-added", payload)
    """

    def __init__(self, trace: bool = False) -> None:
        self._handlers: DefaultDict[str, List[EventHandler]] = defaultdict(list)
        self._trace = trace

    def on(self, names: str, handler: EventHandler) -> "EventBus":
        for name in names.split():
            self._handlers[name].append(handler)
        return self

    def trigger(self, name: str, payload: Any = None) -> "EventBus":
        if self._trace:
            logger.debug("trigger %s | payload=%r", name, payload)
        for handler in list(self._handlers.get(name, [])):
            if handler(payload) is False:
                break
        return self
