"""Tests for the splice renderer."""

from __future__ import annotations

import pytest

from reviewdesk.annotation import (
    Annotation,
    InvalidRangeError,
    OverlappingAnnotationError,
    UnrenderableTextError,
    category_class,
    render_annotations,
    strip_annotations,
)
from reviewdesk.annotation.render import ID_ATTRIBUTE, parse_fragment

MANY_TEXT = "The quick brown fox jumps over the lazy dog. " * 3
# Touching pairs: (0, 3)/(3, 9), (26, 30)/(30, 34), (60, 62)/(62, 63)
MANY_RANGES = [
    (0, 3),
    (3, 9),
    (10, 15),
    (16, 19),
    (20, 25),
    (26, 30),
    (30, 34),
    (40, 44),
    (45, 50),
    (60, 62),
    (62, 63),
    (100, 134),
]


def _annotation(
    start: int,
    end: int,
    text: str,
    *,
    annotation_id: str = "1",
    category: str = "highlight",
    comment: str | None = None,
) -> Annotation:
    return Annotation(
        id=annotation_id,
        start_index=start,
        end_index=end,
        category=category,  # type: ignore[arg-type]
        text=text,
        comment=comment,
    )


class TestRenderAnnotations:
    """Tests for render_annotations."""

    def test_single_annotation(self) -> None:
        markup = render_annotations("The cat sat.", [_annotation(4, 7, "cat")])
        assert markup == (
            'The <span class="annotation annotation-highlight" '
            'data-annotation-id="1">cat</span> sat.'
        )

    def test_no_annotations_returns_escaped_text(self) -> None:
        assert render_annotations("a < b & c", []) == "a &lt; b &amp; c"

    def test_adjacent_annotations_both_wrapped(self) -> None:
        """[0,3) and [4,7) render in document order regardless of input order."""
        annotations = [
            _annotation(4, 7, "cat", annotation_id="b"),
            _annotation(0, 3, "The", annotation_id="a"),
        ]
        markup = render_annotations("The cat sat.", annotations)
        assert markup.index('data-annotation-id="a"') < markup.index(
            'data-annotation-id="b"'
        )
        assert markup.endswith("</span> sat.")

    def test_touching_ranges_allowed(self) -> None:
        annotations = [
            _annotation(0, 3, "The", annotation_id="a"),
            _annotation(3, 7, " cat", annotation_id="b"),
        ]
        markup = render_annotations("The cat sat.", annotations)
        assert markup.count("<span") == 2

    def test_annotation_at_document_end(self) -> None:
        markup = render_annotations("The cat sat.", [_annotation(8, 12, "sat.")])
        assert markup.endswith(">sat.</span>")

    def test_category_class_applied(self) -> None:
        markup = render_annotations(
            "The cat sat.",
            [_annotation(4, 7, "cat", category="issue", comment="Wrong animal")],
        )
        assert f'class="{category_class("issue")}"' in markup
        assert 'title="Wrong animal"' in markup

    def test_text_and_attributes_escaped(self) -> None:
        text = "<b>x</b> & more"
        markup = render_annotations(
            text,
            [
                _annotation(
                    3,
                    4,
                    "x",
                    annotation_id='"><script>',
                    category="comment",
                    comment='say "hi" <now>',
                )
            ],
        )
        assert "<b>" not in markup
        assert "<script>" not in markup
        assert 'title="say &quot;hi&quot; &lt;now&gt;"' in markup

    def test_overlapping_annotations_raise(self) -> None:
        annotations = [
            _annotation(0, 5, "The c", annotation_id="a"),
            _annotation(4, 7, "cat", annotation_id="b"),
        ]
        with pytest.raises(OverlappingAnnotationError) as excinfo:
            render_annotations("The cat sat.", annotations)
        assert (excinfo.value.first.start, excinfo.value.first.end) == (0, 5)
        assert (excinfo.value.second.start, excinfo.value.second.end) == (4, 7)

    def test_range_past_end_raises(self) -> None:
        with pytest.raises(InvalidRangeError):
            render_annotations("short", [_annotation(2, 10, "ort")])


class TestStripAnnotations:
    """Rendering then stripping gives back the original text."""

    @pytest.mark.parametrize(
        "text",
        [
            "The cat sat.",
            "  leading spaces and\n\nparagraphs\n",
            "a < b & c > d \"quoted\" 'single'",
            "Unicode: café, naïve ☕",
            "x\ry",
            "x\r\ny",
            "\r\nline one\r\nline two\r",
            "\nlead",
        ],
    )
    def test_round_trip(self, text: str) -> None:
        annotations = [
            _annotation(0, 1, text[0], annotation_id="first"),
            _annotation(len(text) - 2, len(text), text[-2:], annotation_id="last"),
        ]
        assert strip_annotations(render_annotations(text, annotations)) == text

    def test_carriage_return_in_highlight(self) -> None:
        text = "x\r\ny"
        markup = render_annotations(text, [_annotation(1, 3, "\r\n")])
        assert "&#13;" in markup
        assert strip_annotations(markup) == text

    def test_nul_rejected(self) -> None:
        with pytest.raises(UnrenderableTextError, match="offset 1"):
            render_annotations("x\x00y", [])

    @pytest.mark.parametrize("count", [0, 1, 5, len(MANY_RANGES)])
    def test_many_annotations(self, count: int) -> None:
        """Spaced and touching ranges keep the text and each span's contents."""
        annotations = [
            _annotation(start, end, MANY_TEXT[start:end], annotation_id=f"a{i}")
            for i, (start, end) in enumerate(MANY_RANGES[:count])
        ]
        markup = render_annotations(MANY_TEXT, annotations)

        assert strip_annotations(markup) == MANY_TEXT
        spans = {
            span.attributes[ID_ATTRIBUTE]: span.text(deep=True)
            for span in parse_fragment(markup).css(f"span[{ID_ATTRIBUTE}]")
        }
        assert spans == {a.id: a.text for a in annotations}

    def test_empty_markup(self) -> None:
        assert strip_annotations("") == ""
