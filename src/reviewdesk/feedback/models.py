"""Request and result models for writing feedback."""

from __future__ import annotations

from typing import Literal, get_args

from pydantic import BaseModel, Field, field_validator

Dimension = Literal["grammar", "structure", "content", "vocabulary"]
DIMENSIONS: tuple[str, ...] = get_args(Dimension)

DIMENSION_LABELS: dict[str, str] = {
    "grammar": "Grammar and mechanics",
    "structure": "Structure and organization",
    "content": "Content and ideas",
    "vocabulary": "Vocabulary and word choice",
}


class FeedbackError(Exception):
    """Raised when a feedback reply cannot be turned into a FeedbackResult."""


class FeedbackRequest(BaseModel):
    """What to review and which rubric dimensions to cover."""

    document_text: str
    dimensions: list[Dimension] = Field(default_factory=lambda: list(DIMENSIONS))

    @field_validator("dimensions")
    @classmethod
    def at_least_one_dimension(cls, value: list[Dimension]) -> list[Dimension]:
        if not value:
            msg = "Select at least one feedback dimension"
            raise ValueError(msg)
        # Keep rubric order and drop duplicates
        return [d for d in DIMENSIONS if d in value]  # type: ignore[misc]


class FeedbackResult(BaseModel):
    """Feedback stored on a document.

    Dimension fields are None when that dimension was not requested.
    ``source`` records whether a teacher wrote it or it was generated.
    """

    grammar: str | None = None
    structure: str | None = None
    content: str | None = None
    vocabulary: str | None = None
    overall: str
    improvements: list[str] = Field(default_factory=list)
    source: Literal["ai", "teacher"] = "ai"

    def for_dimensions(self, dimensions: list[Dimension]) -> FeedbackResult:
        """Copy with every unrequested dimension cleared."""
        cleared = {d: None for d in DIMENSIONS if d not in dimensions}
        return self.model_copy(update=cleared)

    def sections(self) -> list[tuple[str, str]]:
        """(label, text) pairs for the dimensions that have feedback."""
        return [
            (DIMENSION_LABELS[d], text)
            for d in DIMENSIONS
            if (text := getattr(self, d))
        ]
