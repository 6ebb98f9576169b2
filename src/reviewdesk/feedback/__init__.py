"""Writing feedback generation."""

from __future__ import annotations

from reviewdesk.feedback.mock import MockFeedbackGenerator
from reviewdesk.feedback.models import (
    DIMENSION_LABELS,
    DIMENSIONS,
    Dimension,
    FeedbackError,
    FeedbackRequest,
    FeedbackResult,
)
from reviewdesk.feedback.protocol import FeedbackGeneratorProtocol

__all__ = [
    "DIMENSIONS",
    "DIMENSION_LABELS",
    "Dimension",
    "FeedbackError",
    "FeedbackGeneratorProtocol",
    "FeedbackRequest",
    "FeedbackResult",
    "MockFeedbackGenerator",
]
