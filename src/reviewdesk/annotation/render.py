"""Splice renderer: wrap annotated ranges of a plain-text document in spans.

Annotations are applied in descending ``start_index`` order. Every insertion
happens at or above the current splice point, so the offsets of annotations
still waiting to be processed always refer to untouched original text.

The document is treated as plain text: every text segment and every
attribute value is HTML-escaped as it is spliced. Carriage returns are
written as character references so the parser keeps them; NUL has no
markup form and is rejected.
"""

from __future__ import annotations

import html as html_module
import logging
from typing import TYPE_CHECKING

from selectolax.lexbor import LexborHTMLParser

from reviewdesk.annotation.offsets import (
    InvalidAnnotationError,
    OverlappingAnnotationError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from reviewdesk.annotation.offsets import Annotation

logger = logging.getLogger(__name__)

ANNOTATION_CLASS = "annotation"
ID_ATTRIBUTE = "data-annotation-id"


class UnrenderableTextError(InvalidAnnotationError):
    """Raised when document text has characters HTML cannot carry."""


def category_class(category: str) -> str:
    """CSS classes for an annotation wrapper, e.g. ``annotation annotation-issue``."""
    return f"{ANNOTATION_CLASS} {ANNOTATION_CLASS}-{category}"


def _escape_text(text: str) -> str:
    # The parser folds a raw \r or \r\n into \n
    return html_module.escape(text, quote=False).replace("\r", "&#13;")


def _escape_attr(value: str) -> str:
    return html_module.escape(value, quote=True)


def _open_tag(annotation: Annotation) -> str:
    attrs = (
        f'class="{category_class(annotation.category)}" '
        f'{ID_ATTRIBUTE}="{_escape_attr(annotation.id)}"'
    )
    if annotation.comment:
        attrs += f' title="{_escape_attr(annotation.comment)}"'
    return f"<span {attrs}>"


def render_annotations(document_text: str, annotations: Iterable[Annotation]) -> str:
    """Render ``document_text`` with every annotation wrapped in a span.

    Args:
        document_text: Plain document text the annotation offsets index into.
        annotations: Annotations with non-overlapping ranges.

    Returns:
        HTML markup whose text content equals ``document_text``.

    Raises:
        InvalidRangeError: If an annotation runs past the end of the document.
        OverlappingAnnotationError: If two annotation ranges overlap.
        UnrenderableTextError: If the document contains a NUL character.
    """
    nul = document_text.find("\x00")
    if nul != -1:
        msg = f"NUL at offset {nul} cannot be rendered"
        raise UnrenderableTextError(msg)

    ordered = sorted(annotations, key=lambda a: a.start_index, reverse=True)

    # ``cursor`` is the original-text offset where the rendered tail begins.
    cursor = len(document_text)
    tail: list[str] = []

    for index, annotation in enumerate(ordered):
        annotation.validate_against(document_text)
        # The first annotation always fits, so index >= 1 here
        if annotation.end_index > cursor:
            later = ordered[index - 1]
            raise OverlappingAnnotationError(annotation.range, later.range)

        highlighted = document_text[annotation.start_index : annotation.end_index]
        tail.append(_escape_text(document_text[annotation.end_index : cursor]))
        tail.append("</span>")
        tail.append(_escape_text(highlighted))
        tail.append(_open_tag(annotation))

        cursor = annotation.start_index

    tail.append(_escape_text(document_text[:cursor]))
    tail.reverse()

    logger.debug(
        "Rendered %d annotations over %d chars", len(ordered), len(document_text)
    )
    return "".join(tail)


def parse_fragment(markup: str):
    """Parse markup inside a container div, as the browser sees it.

    Parsing a bare fragment as a document would drop leading whitespace
    before ``<body>``; inside a div every character is kept.
    """
    tree = LexborHTMLParser(f"<div>{markup}</div>")
    return tree.css_first("body > div")


def strip_annotations(markup: str) -> str:
    """Remove annotation wrappers and return the underlying plain text."""
    container = parse_fragment(markup)
    if container is None:
        return ""
    for span in container.css(f"span.{ANNOTATION_CLASS}[{ID_ATTRIBUTE}]"):
        span.unwrap()
    return container.text(deep=True)
