"""Scan, protect, and render TeX math embedded in markdown."""

from .renderers import MathRenderError, MathRenderer, MathtextRenderer
from .scanner import MathSpan, TextSegment, math_spans, scan_math
from .strategies import (
    MathTransformer,
    PlaceholderRegistry,
    ProtectAndRestore,
    RenderAndEmbed,
    TransformedText,
    build_math_transformer,
)

__all__ = [
    "MathRenderError",
    "MathRenderer",
    "MathSpan",
    "MathTransformer",
    "MathtextRenderer",
    "PlaceholderRegistry",
    "ProtectAndRestore",
    "RenderAndEmbed",
    "TextSegment",
    "TransformedText",
    "build_math_transformer",
    "math_spans",
    "scan_math",
]
