"""Annotation offsets, splice rendering, selection translation and lookup."""

from reviewdesk.annotation.lookup import annotation_for_click, find_annotation
from reviewdesk.annotation.offsets import (
    CATEGORIES,
    Annotation,
    AnnotationDraft,
    Category,
    InvalidAnnotationError,
    InvalidRangeError,
    OverlappingAnnotationError,
    TextRange,
    check_no_overlap,
    requires_comment,
)
from reviewdesk.annotation.render import (
    UnrenderableTextError,
    category_class,
    render_annotations,
    strip_annotations,
)
from reviewdesk.annotation.selection import (
    DomPoint,
    locate_offset,
    translate_selection,
)

__all__ = [
    "CATEGORIES",
    "Annotation",
    "AnnotationDraft",
    "Category",
    "DomPoint",
    "InvalidAnnotationError",
    "InvalidRangeError",
    "OverlappingAnnotationError",
    "TextRange",
    "UnrenderableTextError",
    "annotation_for_click",
    "category_class",
    "check_no_overlap",
    "find_annotation",
    "locate_offset",
    "render_annotations",
    "requires_comment",
    "strip_annotations",
    "translate_selection",
]
