"""Scope extraction and annotation rendering."""

from .canvas import CanvasAnnotation, OverlayCanvas
from .extractor import DEFAULT_MIN_LINES, AnnotationRecord, ScopeSource, extract_annotations
from .renderer import (
    DEFAULT_OVERLAY_PREFIX,
    AnnotationRenderer,
    AnnotationSink,
    AnnotationStyle,
    DocumentAnnotations,
    RenderedAnnotation,
)

__all__ = [
    "DEFAULT_MIN_LINES",
    "DEFAULT_OVERLAY_PREFIX",
    "AnnotationRecord",
    "AnnotationRenderer",
    "AnnotationSink",
    "AnnotationStyle",
    "CanvasAnnotation",
    "DocumentAnnotations",
    "OverlayCanvas",
    "RenderedAnnotation",
    "ScopeSource",
    "extract_annotations",
]
