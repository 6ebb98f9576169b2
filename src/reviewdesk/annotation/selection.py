"""Selection translator: browser DOM selection -> plain-text offsets.

The browser reports a selection as two DOM boundary points (container node
plus offset, the ``Range.startContainer/startOffset`` pair). The review page
serialises each container as a path of child indices from the document
container element. This module replays those paths over the same rendered
markup and counts ``textContent`` characters, so annotation wrapper spans
never contribute to the offsets.

Boundary point semantics follow the DOM: for a text node the offset counts
characters, for an element it counts child nodes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from reviewdesk.annotation.offsets import TextRange
from reviewdesk.annotation.render import parse_fragment

logger = logging.getLogger(__name__)

_TEXT_TAG = "-text"


@dataclass(frozen=True)
class DomPoint:
    """A DOM boundary point relative to the document container.

    Attributes:
        path: Child indices (``childNodes``) from the container to the node.
            An empty path is the container itself.
        offset: Character offset in a text node, child index in an element.
    """

    path: tuple[int, ...]
    offset: int

    @classmethod
    def from_payload(cls, payload: dict[str, Any] | None) -> DomPoint | None:
        """Build a point from the JSON emitted by ``review.js``.

        Returns None for a missing payload or one with the wrong shape.
        """
        if not payload:
            return None
        path = payload.get("path")
        offset = payload.get("offset")
        if not isinstance(path, list) or not isinstance(offset, int):
            return None
        if not all(isinstance(i, int) for i in path):
            return None
        return cls(path=tuple(path), offset=offset)


def _children(node: Any) -> list[Any]:
    return list(node.iter(include_text=True))


def _is_text(node: Any) -> bool:
    return node.tag == _TEXT_TAG


def _text_length(node: Any) -> int:
    """Length of the node's ``textContent`` contribution."""
    if _is_text(node):
        return len(node.text_content or "")
    if node.tag.startswith(("-", "_", "!")):
        # Comments and other non-element nodes carry no text content.
        return 0
    return len(node.text(deep=True) or "")


def _resolve(container: Any, point: DomPoint) -> int | None:
    """Map a boundary point to a character offset, or None if unresolvable."""
    node = container
    before = 0
    for index in point.path:
        children = _children(node)
        if not 0 <= index < len(children):
            return None
        before += sum(_text_length(child) for child in children[:index])
        node = children[index]

    if _is_text(node):
        if not 0 <= point.offset <= _text_length(node):
            return None
        return before + point.offset

    children = _children(node)
    if not 0 <= point.offset <= len(children):
        return None
    return before + sum(_text_length(child) for child in children[: point.offset])


def translate_selection(
    rendered_markup: str,
    start: DomPoint | None,
    end: DomPoint | None,
) -> TextRange | None:
    """Translate a selection in the rendered view to a plain-text range.

    Args:
        rendered_markup: The markup currently shown in the document container.
        start: Selection start point, or None if outside the container.
        end: Selection end point, or None if outside the container.

    Returns:
        The selected range with surrounding whitespace trimmed, or None when
        the selection is outside the container, empty, whitespace-only, or
        cannot be reduced to an offset pair.
    """
    if start is None or end is None:
        return None

    container = parse_fragment(rendered_markup)
    if container is None:
        return None

    start_offset = _resolve(container, start)
    end_offset = _resolve(container, end)
    if start_offset is None or end_offset is None:
        logger.debug("Unresolvable selection points: %s -> %s", start, end)
        return None

    if start_offset > end_offset:
        start_offset, end_offset = end_offset, start_offset

    selected = (container.text(deep=True) or "")[start_offset:end_offset]
    start_offset += len(selected) - len(selected.lstrip())
    end_offset -= len(selected) - len(selected.rstrip())
    if start_offset >= end_offset:
        return None

    return TextRange(start_offset, end_offset)


def _locate(
    node: Any, path: tuple[int, ...], base: int, offset: int
) -> DomPoint | None:
    position = base
    for index, child in enumerate(_children(node)):
        length = _text_length(child)
        if offset < position + length:
            if _is_text(child):
                return DomPoint(path + (index,), offset - position)
            return _locate(child, path + (index,), position, offset)
        position += length
    return None


def locate_offset(rendered_markup: str, offset: int) -> DomPoint | None:
    """Inverse of the translator: the DOM point for a plain-text offset.

    Offsets on a boundary between nodes resolve to the start of the later
    text node. The end of the document resolves to the container's last
    child boundary.
    """
    container = parse_fragment(rendered_markup)
    if container is None:
        return None

    total = len(container.text(deep=True) or "")
    if not 0 <= offset <= total:
        return None
    if offset == total:
        return DomPoint((), len(_children(container)))
    return _locate(container, (), 0, offset)
