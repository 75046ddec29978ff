"""Admission pipeline for candidate tags.

Checks run in order and stop at the first failure:

1. display text is non-empty
2. ``min_length <= len(text) <= max_length``
3. text matches ``allowed_tags_pattern`` (search, not full match)
4. no existing tag compares equal, case-insensitively, on the key field
5. the host's ``on_tag_adding`` veto, which may be async

The caller only learns admitted/rejected; ``reason`` is diagnostic.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Sequence, Union

from tagsinput.core.errors import ValidationRejected
from tagsinput.domain.options import TagsInputOptions
from tagsinput.domain.rules import RULES, AdmissionRule, RejectReason
from tagsinput.domain.tag_shape import TagShape

logger = logging.getLogger(__name__)

AddingVeto = Callable[[Any, list[Any]], Union[Awaitable[Any], Any]]
RemovingVeto = Callable[[Any, list[Any]], Any]


@dataclass(frozen=True)
class ValidationOutcome:
    admitted: bool
    reason: RejectReason | None = None


ADMIT = ValidationOutcome(admitted=True)


class TagValidationPipeline:
    def __init__(
        self,
        options: TagsInputOptions,
        shape: TagShape,
        on_tag_adding: AddingVeto | None = None,
        rules: list[AdmissionRule] | None = None,
    ) -> None:
        self.options = options
        self.shape = shape
        self.on_tag_adding = on_tag_adding
        self.rules = list(RULES if rules is None else rules)

    def check_rules(self, tag: Any, items: Sequence[Any]) -> ValidationOutcome:
        """Run the synchronous checks (1-4) only."""
        text = self.shape.text_of(tag)
        try:
            for rule in self.rules:
                rule.check(text, tag, items, self.shape, self.options)
        except ValidationRejected as e:
            logger.debug("Candidate rejected | text=%r | reason=%s", text, e.reason.value)
            return ValidationOutcome(admitted=False, reason=e.reason)
        return ADMIT

    async def validate(self, tag: Any, items: Sequence[Any]) -> ValidationOutcome:
        outcome = self.check_rules(tag, items)
        if not outcome.admitted:
            return outcome
        if await self._host_approves(tag, list(items)):
            return ADMIT
        logger.debug("Candidate vetoed by host | text=%r", self.shape.text_of(tag))
        return ValidationOutcome(admitted=False, reason=RejectReason.vetoed)

    async def _host_approves(self, tag: Any, snapshot: list[Any]) -> bool:
        if self.on_tag_adding is None:
            return True
        try:
            result = self.on_tag_adding(tag, snapshot)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            # a failed veto behaves like a rejected promise
            logger.info("on_tag_adding raised; treating as rejection: %s", exc)
            return False
        return result is not False


def removal_approved(veto: RemovingVeto | None, tag: Any, snapshot: list[Any]) -> bool:
    """Synchronous removal veto; ``None`` from the host means approve."""
    if veto is None:
        return True
    result = veto(tag, snapshot)
    return True if result is None else bool(result)
