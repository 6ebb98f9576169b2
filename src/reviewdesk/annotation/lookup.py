"""Click lookup: map a clicked annotation wrapper back to its record."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reviewdesk.annotation.render import ID_ATTRIBUTE

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from reviewdesk.annotation.offsets import Annotation


def find_annotation(
    annotations: Iterable[Annotation], annotation_id: str | None
) -> Annotation | None:
    """Linear scan for the annotation with ``annotation_id``.

    Annotation counts per document are small, so no index is kept.
    """
    if not annotation_id:
        return None
    for annotation in annotations:
        if annotation.id == annotation_id:
            return annotation
    return None


def annotation_for_click(
    annotations: Iterable[Annotation], attributes: Mapping[str, str | None]
) -> Annotation | None:
    """Resolve the attributes of a clicked element to an annotation.

    Args:
        annotations: The annotations currently rendered.
        attributes: Attributes of the click target, as sent by the page.

    Returns:
        The matching annotation, or None if the target is not an annotation
        wrapper or its id is unknown.
    """
    return find_annotation(annotations, attributes.get(ID_ATTRIBUTE))
