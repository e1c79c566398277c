"""Text-generation clients.

The filler depends only on the ``TextClient`` protocol: one prompt in,
raw text out. ``OpenAITextClient`` is the production implementation;
tests pass a scripted fake.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Protocol

from dotenv import load_dotenv
from openai import OpenAI, OpenAIError

logger = logging.getLogger(__name__)


class TextClientError(Exception):
    """Raised when the text-generation service cannot be reached or fails."""


class TextClient(Protocol):
    """Anything that turns a prompt into raw response text."""

    model: str

    def complete(self, prompt: str) -> str:
        ...


class OpenAITextClient:
    """OpenAI Responses API client with token accounting."""

    def __init__(self, api_key: str, model: str = "gpt-5.2"):
        self._client = OpenAI(api_key=api_key)
        self.model = model
        self.total_input_tokens = 0
        self.total_output_tokens = 0

    def complete(self, prompt: str) -> str:
        """Send one prompt and return the response text.

        Raises:
            TextClientError: On any API or transport failure.
        """
        try:
            response = self._client.responses.create(
                model=self.model,
                input=[{"role": "user", "content": prompt}],
            )
        except OpenAIError as e:
            raise TextClientError(f"Text generation request failed: {e}") from e

        usage = response.usage
        if usage is not None:
            self.total_input_tokens += usage.input_tokens
            self.total_output_tokens += usage.output_tokens
            logger.info(f"Text fill ({self.model}): input={usage.input_tokens}, output={usage.output_tokens}")

        return response.output_text or ""

    def get_token_totals(self) -> tuple[int, int]:
        """Return accumulated (input, output) tokens."""
        return self.total_input_tokens, self.total_output_tokens


def create_text_client(model: str, api_key: Optional[str] = None) -> OpenAITextClient:
    """Build the OpenAI client, reading OPENAI_API_KEY from the environment/.env.

    Raises:
        TextClientError: If no API key is available.
    """
    load_dotenv()
    api_key = api_key or os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise TextClientError("OPENAI_API_KEY is not set")
    return OpenAITextClient(api_key=api_key, model=model)
