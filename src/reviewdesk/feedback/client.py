"""Claude API client for writing feedback."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

import anthropic
from pydantic import ValidationError

from reviewdesk.feedback.models import FeedbackError, FeedbackResult
from reviewdesk.feedback.prompt import SYSTEM_PROMPT, build_user_prompt

if TYPE_CHECKING:
    from reviewdesk.feedback.models import FeedbackRequest

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


def parse_reply(text: str) -> FeedbackResult:
    """Parse Claude's JSON reply, tolerating a surrounding code fence.

    Raises:
        FeedbackError: If the text is not a valid feedback object.
    """
    cleaned = _FENCE.sub("", text.strip())
    try:
        return FeedbackResult.model_validate_json(cleaned)
    except ValidationError as e:
        raise FeedbackError(f"Unparseable feedback reply: {e}") from e


class ClaudeFeedbackGenerator:
    """Feedback generator backed by the Anthropic Messages API.

    Uses the async Anthropic client for non-blocking API calls. SDK errors
    propagate unchanged; there is no retry.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 2048,
    ) -> None:
        """Initialize the generator.

        Args:
            api_key: Anthropic API key.
            model: Model identifier to use.
            max_tokens: Upper bound on reply length.

        Raises:
            ValueError: If no API key is given.
        """
        if not api_key:
            raise ValueError("API key required. Set LLM__API_KEY.")
        self.model = model
        self.max_tokens = max_tokens
        self._client = anthropic.AsyncAnthropic(api_key=api_key)

    async def generate(self, request: FeedbackRequest) -> FeedbackResult:
        """Request feedback and parse the structured reply.

        Raises:
            FeedbackError: If Claude returns no text or unparseable JSON.
        """
        response = await self._client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": build_user_prompt(request)}],
        )

        text = "".join(
            block.text for block in response.content if block.type == "text"
        )
        if not text:
            raise FeedbackError("Empty response from Claude API")

        logger.info(
            "Feedback generated for %d dimensions (%d chars)",
            len(request.dimensions),
            len(text),
        )
        return parse_reply(text).for_dimensions(request.dimensions)
