"""
Module: engine.textfill.filler

Purpose:
    Run the slot text-fill protocol: one request for the whole run,
    validated strictly, with exactly one retry that tells the model what
    was wrong.

Key Classes:
    - SlotTextFiller: State machine around a TextClient

State Machine:
    idle -> requesting -> done
                       -> retrying -> done
                                   -> failed (TextFillError raised)

Dependencies:
    - engine.textfill.prompt, engine.textfill.protocol
    - engine.textfill.client: TextClient protocol

Used By:
    - engine.controller: TemplateAssembler
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .client import TextClient, TextClientError
from .models import SlotRequest, TextFillError, TextFillResult, TextFillState
from .prompt import build_prompt
from .protocol import parse_overrides

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2


class SlotTextFiller:
    """
    Requests generated text for every slot/module key of a run.

    Example:
        >>> filler = SlotTextFiller(client)
        >>> result = filler.fill("meeting summary", requests, ["Two column"])
        >>> result.overrides["slot_1|mod_a"].headers
        ('Weekly Sync',)
    """

    def __init__(self, client: TextClient):
        self._client = client
        self._state = TextFillState.IDLE
        self.last_prompt: Optional[str] = None
        self.last_raw: Optional[str] = None
        self.last_error: Optional[str] = None

    @property
    def state(self) -> TextFillState:
        return self._state

    def fill(
        self,
        topic: str,
        requests: Sequence[SlotRequest],
        layout_names: Sequence[str],
    ) -> TextFillResult:
        """
        Fill all requests with one call, retrying once on a bad response.

        Args:
            topic: User topic
            requests: Slot/module keys to fill
            layout_names: Layout names shown to the model

        Returns:
            TextFillResult with an override for every request key

        Raises:
            TextFillError: If both attempts fail
        """
        expected = {r.key: r.expected for r in requests}
        if not requests:
            self._state = TextFillState.DONE
            return TextFillResult(attempts=0, model=self._client.model)

        error: Optional[str] = None
        for attempt in range(MAX_ATTEMPTS):
            self._state = TextFillState.REQUESTING if attempt == 0 else TextFillState.RETRYING
            prompt = build_prompt(topic, layout_names, requests, attempt, error)
            self.last_prompt = prompt
            self.last_raw = None
            try:
                raw = self._client.complete(prompt)
                self.last_raw = raw
                overrides = parse_overrides(raw, expected)
            except (TextFillError, TextClientError) as e:
                error = str(e)
                self.last_error = error
                logger.warning(f"Text fill attempt {attempt + 1} failed: {error}")
                continue

            self._state = TextFillState.DONE
            self.last_error = None
            logger.info(f"Text fill succeeded for {len(overrides)} key(s) on attempt {attempt + 1}")
            return TextFillResult(
                overrides=overrides,
                attempts=attempt + 1,
                model=self._client.model,
                prompt=prompt,
                raw=raw,
            )

        self._state = TextFillState.FAILED
        raise TextFillError(error or "Text fill failed.", raw=self.last_raw)
