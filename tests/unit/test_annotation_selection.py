"""Tests for translating DOM selections to plain-text offsets.

Markup in these tests is what the review page shows: the splice renderer's
output for ``The cat sat.`` with ``cat`` wrapped. Its container children are
``"The "`` (0), the span (1), and ``" sat."`` (2).
"""

from __future__ import annotations

import pytest

from reviewdesk.annotation import (
    Annotation,
    DomPoint,
    TextRange,
    annotation_for_click,
    find_annotation,
    locate_offset,
    render_annotations,
    translate_selection,
)

TEXT = "The cat sat."

CAT = Annotation(
    id="a-cat",
    start_index=4,
    end_index=7,
    category="comment",
    text="cat",
    comment="Which cat?",
)


@pytest.fixture
def markup() -> str:
    return render_annotations(TEXT, [CAT])


@pytest.fixture
def plain_markup() -> str:
    return render_annotations(TEXT, [])


def _point(*path: int, offset: int) -> DomPoint:
    return DomPoint(path=tuple(path), offset=offset)


class TestDomPointPayload:
    """Tests for DomPoint.from_payload."""

    def test_valid_payload(self) -> None:
        point = DomPoint.from_payload({"path": [1, 0], "offset": 2})
        assert point == _point(1, 0, offset=2)

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            {},
            {"path": "1/0", "offset": 2},
            {"path": [1, "x"], "offset": 2},
            {"path": [1], "offset": "2"},
        ],
    )
    def test_malformed_payload_is_none(self, payload) -> None:
        assert DomPoint.from_payload(payload) is None


class TestTranslateSelection:
    """Tests for translate_selection."""

    def test_selection_inside_annotation(self, markup: str) -> None:
        result = translate_selection(
            markup, _point(1, 0, offset=0), _point(1, 0, offset=3)
        )
        assert result == TextRange(4, 7)

    def test_selection_across_annotation(self, markup: str) -> None:
        """Wrapper spans contribute no characters."""
        result = translate_selection(markup, _point(0, offset=0), _point(2, offset=4))
        assert result == TextRange(0, 11)
        assert result.slice(TEXT) == "The cat sat"

    def test_element_boundary_points(self, markup: str) -> None:
        """Element offsets count child nodes, as in the DOM."""
        result = translate_selection(markup, _point(offset=1), _point(offset=2))
        assert result == TextRange(4, 7)

    def test_rendered_and_plain_views_agree(
        self, markup: str, plain_markup: str
    ) -> None:
        """The same characters give the same offsets with or without spans."""
        rendered = translate_selection(
            markup, _point(0, offset=1), _point(2, offset=2)
        )
        plain = translate_selection(
            plain_markup, _point(0, offset=1), _point(0, offset=9)
        )
        assert rendered == plain == TextRange(1, 9)

    def test_surrounding_whitespace_trimmed(self, markup: str) -> None:
        result = translate_selection(
            markup, _point(0, offset=3), _point(2, offset=1)
        )
        assert result == TextRange(4, 7)

    def test_reversed_points_are_swapped(self, markup: str) -> None:
        result = translate_selection(
            markup, _point(1, 0, offset=3), _point(1, 0, offset=0)
        )
        assert result == TextRange(4, 7)

    def test_whitespace_only_selection_is_none(self, markup: str) -> None:
        assert (
            translate_selection(markup, _point(0, offset=3), _point(0, offset=4))
            is None
        )

    def test_collapsed_selection_is_none(self, markup: str) -> None:
        assert (
            translate_selection(markup, _point(0, offset=2), _point(0, offset=2))
            is None
        )

    def test_point_outside_container_is_none(self, markup: str) -> None:
        assert translate_selection(markup, None, _point(0, offset=2)) is None
        assert translate_selection(markup, _point(0, offset=0), None) is None

    @pytest.mark.parametrize(
        "end",
        [
            DomPoint(path=(7,), offset=0),
            DomPoint(path=(0,), offset=99),
            DomPoint(path=(), offset=9),
        ],
    )
    def test_unresolvable_point_is_none(self, markup: str, end: DomPoint) -> None:
        assert translate_selection(markup, _point(0, offset=0), end) is None

    def test_escaped_characters_count_once(self) -> None:
        text = "a < b & c"
        escaped = render_annotations(text, [])
        result = translate_selection(
            escaped, _point(0, offset=2), _point(0, offset=7)
        )
        assert result is not None
        assert result.slice(text) == "< b &"


class TestLocateOffset:
    """locate_offset maps plain-text offsets back to DOM points."""

    def test_offset_inside_annotation(self, markup: str) -> None:
        assert locate_offset(markup, 5) == _point(1, 0, offset=1)

    def test_offset_at_annotation_start(self, markup: str) -> None:
        assert locate_offset(markup, 4) == _point(1, 0, offset=0)

    def test_offset_at_document_end(self, markup: str) -> None:
        assert locate_offset(markup, len(TEXT)) == _point(offset=3)

    def test_offset_out_of_range(self, markup: str) -> None:
        assert locate_offset(markup, -1) is None
        assert locate_offset(markup, len(TEXT) + 1) is None

    def test_located_points_translate_back(self, markup: str) -> None:
        result = translate_selection(
            markup, locate_offset(markup, 2), locate_offset(markup, 9)
        )
        assert result == TextRange(2, 9)


class TestAnnotationLookup:
    """Tests for mapping clicks to annotations."""

    def test_find_by_id(self) -> None:
        assert find_annotation([CAT], "a-cat") is CAT

    def test_unknown_or_missing_id(self) -> None:
        assert find_annotation([CAT], "nope") is None
        assert find_annotation([CAT], None) is None
        assert find_annotation([], "a-cat") is None

    def test_click_attributes(self) -> None:
        assert annotation_for_click([CAT], {"data-annotation-id": "a-cat"}) is CAT

    def test_click_on_plain_text(self) -> None:
        assert annotation_for_click([CAT], {"class": "document-viewer"}) is None
