"""Offset model for annotations.

An annotation is a half-open character range ``[start_index, end_index)``
over the *plain* document text, never over rendered markup. Ranges are
validated when constructed and again against the document they point into.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, get_args

Category = Literal["highlight", "comment", "suggestion", "issue"]
CATEGORIES: tuple[str, ...] = get_args(Category)


class InvalidAnnotationError(ValueError):
    """Raised when an annotation cannot be constructed."""


class InvalidRangeError(InvalidAnnotationError):
    """Raised for empty, reversed, negative, or out-of-bounds ranges."""


class OverlappingAnnotationError(InvalidAnnotationError):
    """Raised when two annotation ranges share at least one character."""

    def __init__(self, first: TextRange, second: TextRange) -> None:
        self.first = first
        self.second = second
        super().__init__(
            f"Range [{second.start}, {second.end}) overlaps "
            f"[{first.start}, {first.end})"
        )


def requires_comment(category: str) -> bool:
    """Whether the UI should insist on comment text for this category."""
    return category != "highlight"


@dataclass(frozen=True, order=True)
class TextRange:
    """Validated half-open range over plain document text."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            msg = f"Range start must be >= 0, got {self.start}"
            raise InvalidRangeError(msg)
        if self.end <= self.start:
            msg = f"Range end ({self.end}) must be greater than start ({self.start})"
            raise InvalidRangeError(msg)

    def __len__(self) -> int:
        return self.end - self.start

    def overlaps(self, other: TextRange) -> bool:
        """True if the ranges share a character. Adjacent ranges do not."""
        return self.start < other.end and other.start < self.end

    def check_within(self, length: int) -> None:
        """Raise InvalidRangeError if the range runs past ``length``."""
        if self.end > length:
            msg = f"Range end ({self.end}) exceeds document length ({length})"
            raise InvalidRangeError(msg)

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


@dataclass(frozen=True)
class AnnotationDraft:
    """An annotation that has not been persisted yet (no identifier).

    Attributes:
        start_index: First character of the range (inclusive).
        end_index: End of the range (exclusive).
        category: One of CATEGORIES.
        text: The document substring at creation time.
        comment: Optional free text from the annotator.
    """

    start_index: int
    end_index: int
    category: Category
    text: str
    comment: str | None = None

    def __post_init__(self) -> None:
        # Constructing the range runs the bounds validation.
        TextRange(self.start_index, self.end_index)
        if self.category not in CATEGORIES:
            msg = f"Unknown annotation category: {self.category!r}"
            raise InvalidAnnotationError(msg)

    @classmethod
    def from_selection(
        cls,
        document_text: str,
        start_index: int,
        end_index: int,
        category: Category,
        comment: str | None = None,
    ) -> AnnotationDraft:
        """Build a draft for a selection, capturing the selected text.

        Raises:
            InvalidRangeError: If the range is empty or outside the document.
            InvalidAnnotationError: If the category is unknown.
        """
        text_range = TextRange(start_index, end_index)
        text_range.check_within(len(document_text))
        return cls(
            start_index=start_index,
            end_index=end_index,
            category=category,
            text=text_range.slice(document_text),
            comment=comment or None,
        )

    @property
    def range(self) -> TextRange:
        return TextRange(self.start_index, self.end_index)

    def validate_against(self, document_text: str) -> None:
        """Raise InvalidRangeError if the range does not fit the document."""
        self.range.check_within(len(document_text))

    def is_stale(self, document_text: str) -> bool:
        """True if the document no longer holds ``text`` at this range."""
        if self.end_index > len(document_text):
            return True
        return document_text[self.start_index : self.end_index] != self.text


@dataclass(frozen=True, kw_only=True)
class Annotation(AnnotationDraft):
    """A persisted annotation. ``id`` is assigned by the store."""

    id: str


def check_no_overlap(
    candidate: TextRange, existing: list[AnnotationDraft] | list[Annotation]
) -> None:
    """Raise OverlappingAnnotationError if ``candidate`` overlaps ``existing``."""
    for other in existing:
        if candidate.overlaps(other.range):
            raise OverlappingAnnotationError(other.range, candidate)
