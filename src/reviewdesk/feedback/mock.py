"""Canned feedback generator for demo mode and tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reviewdesk.feedback.models import FeedbackResult

if TYPE_CHECKING:
    from reviewdesk.feedback.models import FeedbackRequest

MOCK_FEEDBACK = FeedbackResult(
    grammar=(
        "The essay demonstrates good grammar overall. Consider varying sentence "
        "structure for more engaging writing. Watch for comma splices in "
        "paragraphs 2 and 4."
    ),
    structure=(
        "Strong introduction and conclusion. The body paragraphs could be better "
        "organized with clearer topic sentences."
    ),
    content=(
        "The thesis is clear and well-supported with evidence. Consider adding "
        "more analysis to connect your evidence to your main points."
    ),
    vocabulary=(
        "Good use of domain-specific vocabulary. Consider replacing generic terms "
        "like 'good' and 'bad' with more precise alternatives."
    ),
    overall=(
        "This is a well-written essay with clear ideas and good supporting "
        "evidence. With some refinement in structure and vocabulary, it could "
        "be even stronger."
    ),
    improvements=[
        "Add clearer topic sentences to each paragraph",
        "Vary sentence structure for more engaging writing",
        "Replace generic descriptors with more specific language",
        "Add more analysis connecting evidence to main points",
    ],
)


class MockFeedbackGenerator:
    """Returns MOCK_FEEDBACK trimmed to the requested dimensions.

    Only the most recent request is kept.
    """

    def __init__(self) -> None:
        self.last_request: FeedbackRequest | None = None

    async def generate(self, request: FeedbackRequest) -> FeedbackResult:
        self.last_request = request
        return MOCK_FEEDBACK.for_dimensions(request.dimensions)
