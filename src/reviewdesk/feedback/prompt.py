"""Prompt assembly for feedback generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reviewdesk.feedback.models import DIMENSION_LABELS

if TYPE_CHECKING:
    from reviewdesk.feedback.models import FeedbackRequest

SYSTEM_PROMPT = (
    "You are an experienced writing teacher providing constructive feedback "
    "to students. Focus on being encouraging while providing specific areas "
    "for improvement."
)

_REPLY_FORMAT = """\
Reply with a single JSON object and nothing else, using these keys:
{keys}
  "overall": a short paragraph of overall feedback,
  "improvements": a list of 3 to 5 concrete suggested improvements (strings)"""


def build_user_prompt(request: FeedbackRequest) -> str:
    """Build the user turn asking for feedback on the requested dimensions.

    Args:
        request: Document text and rubric dimensions.

    Returns:
        The prompt text, with the document fenced in <document> tags.
    """
    rubric = "\n".join(f"- {DIMENSION_LABELS[d]}" for d in request.dimensions)
    keys = "\n".join(
        f'  "{d}": feedback on {DIMENSION_LABELS[d].lower()},'
        for d in request.dimensions
    )
    return (
        "Analyze the following student writing sample and provide "
        "constructive feedback.\n\n"
        f"<document>\n{request.document_text}\n</document>\n\n"
        f"Please provide feedback on:\n{rubric}\n\n"
        + _REPLY_FORMAT.format(keys=keys)
    )
