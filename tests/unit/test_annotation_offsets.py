"""Tests for annotation ranges, drafts, and overlap checks."""

from __future__ import annotations

import pytest

from reviewdesk.annotation import (
    Annotation,
    AnnotationDraft,
    InvalidAnnotationError,
    InvalidRangeError,
    OverlappingAnnotationError,
    TextRange,
    check_no_overlap,
    requires_comment,
)


def _annotation(start: int, end: int, text: str, annotation_id: str = "a1"):
    return Annotation(
        id=annotation_id,
        start_index=start,
        end_index=end,
        category="highlight",
        text=text,
    )


class TestTextRange:
    """Tests for TextRange validation and comparison."""

    def test_valid_range_has_length(self) -> None:
        assert len(TextRange(4, 7)) == 3

    @pytest.mark.parametrize(("start", "end"), [(3, 3), (5, 2), (-1, 2)])
    def test_invalid_ranges_raise(self, start: int, end: int) -> None:
        """Empty, reversed, and negative ranges are rejected."""
        with pytest.raises(InvalidRangeError):
            TextRange(start, end)

    def test_invalid_range_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            TextRange(2, 1)

    def test_adjacent_ranges_do_not_overlap(self) -> None:
        """Half-open ranges that touch share no character."""
        assert not TextRange(0, 3).overlaps(TextRange(3, 6))
        assert not TextRange(3, 6).overlaps(TextRange(0, 3))

    def test_shared_character_overlaps(self) -> None:
        assert TextRange(0, 4).overlaps(TextRange(3, 6))
        assert TextRange(2, 3).overlaps(TextRange(0, 10))

    def test_check_within_rejects_overrun(self) -> None:
        TextRange(0, 5).check_within(5)
        with pytest.raises(InvalidRangeError, match="exceeds document length"):
            TextRange(0, 6).check_within(5)

    def test_slice(self) -> None:
        assert TextRange(4, 7).slice("The cat sat.") == "cat"


class TestAnnotationDraft:
    """Tests for building drafts from a selection."""

    def test_from_selection_captures_text(self) -> None:
        draft = AnnotationDraft.from_selection("The cat sat.", 4, 7, "comment", "Nice")
        assert draft.text == "cat"
        assert draft.category == "comment"
        assert draft.comment == "Nice"

    def test_empty_comment_becomes_none(self) -> None:
        draft = AnnotationDraft.from_selection("The cat sat.", 4, 7, "highlight", "")
        assert draft.comment is None

    def test_range_past_document_end_raises(self) -> None:
        with pytest.raises(InvalidRangeError):
            AnnotationDraft.from_selection("short", 2, 10, "highlight")

    def test_unknown_category_raises(self) -> None:
        with pytest.raises(InvalidAnnotationError, match="category"):
            AnnotationDraft.from_selection("The cat sat.", 4, 7, "shout")  # type: ignore[arg-type]

    def test_is_stale_when_text_changed(self) -> None:
        draft = AnnotationDraft.from_selection("The cat sat.", 4, 7, "highlight")
        assert not draft.is_stale("The cat sat.")
        assert draft.is_stale("The dog sat.")
        assert draft.is_stale("The")

    def test_requires_comment(self) -> None:
        """Only plain highlights may be saved without a comment."""
        assert not requires_comment("highlight")
        assert requires_comment("comment")
        assert requires_comment("suggestion")
        assert requires_comment("issue")


class TestCheckNoOverlap:
    """Tests for check_no_overlap."""

    def test_disjoint_ranges_pass(self) -> None:
        existing = [_annotation(0, 3, "The"), _annotation(8, 11, "sat", "a2")]
        check_no_overlap(TextRange(4, 7), existing)

    def test_overlap_raises_with_both_ranges(self) -> None:
        existing = [_annotation(4, 7, "cat")]
        with pytest.raises(OverlappingAnnotationError) as exc_info:
            check_no_overlap(TextRange(5, 10), existing)

        assert exc_info.value.first == TextRange(4, 7)
        assert exc_info.value.second == TextRange(5, 10)

    def test_overlap_error_is_an_annotation_error(self) -> None:
        with pytest.raises(InvalidAnnotationError):
            check_no_overlap(TextRange(0, 10), [_annotation(4, 7, "cat")])
