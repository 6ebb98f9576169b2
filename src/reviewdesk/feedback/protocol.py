"""Protocol defining the feedback generator interface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from reviewdesk.feedback.models import FeedbackRequest, FeedbackResult


class FeedbackGeneratorProtocol(Protocol):
    """Produces structured writing feedback for a document."""

    async def generate(self, request: FeedbackRequest) -> FeedbackResult:
        """Generate feedback covering exactly ``request.dimensions``.

        Raises:
            FeedbackError: If the reply cannot be parsed.
        """
        ...
