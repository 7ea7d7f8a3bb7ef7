"""Render TeX snippets to embeddable HTML markup.

The render-and-embed strategy delegates each span to a :class:`MathRenderer`.
The default :class:`MathtextRenderer` uses matplotlib's ``mathtext`` engine
(no LaTeX installation required) and embeds the result as a PNG ``data:``
URI, so each span becomes a single opaque ``<img>`` tag.
"""

from __future__ import annotations

import base64
import io
import typing as typ
from html import escape

_MARKDOWN_SENSITIVE = str.maketrans(
    {
        "\\": "&#92;",
        "_": "&#95;",
        "*": "&#42;",
        "`": "&#96;",
        "[": "&#91;",
        "]": "&#93;",
        "$": "&#36;",
    }
)


class MathRenderError(ValueError):
    """Raised when a renderer cannot typeset a TeX snippet."""


class MathRenderer(typ.Protocol):
    """Callable turning TeX source into HTML markup."""

    def __call__(self, tex: str, *, display: bool) -> str:
        """Return markup for ``tex``; raise :class:`MathRenderError` on failure."""
        ...


def markdown_safe(text: str) -> str:
    """HTML-escape ``text`` and entity-encode characters markdown would eat."""
    return escape(text, quote=True).translate(_MARKDOWN_SENSITIVE)


class MathtextRenderer:
    """Typeset TeX with matplotlib ``mathtext`` into inline PNG images."""

    def __init__(
        self,
        *,
        inline_size: float = 11.0,
        display_size: float = 14.0,
        dpi: int = 120,
    ) -> None:
        self.inline_size = inline_size
        self.display_size = display_size
        self.dpi = dpi

    def __call__(self, tex: str, *, display: bool) -> str:
        """Render ``tex`` and return an ``<img>`` tag with a ``data:`` URI."""
        from matplotlib import mathtext
        from matplotlib.font_manager import FontProperties

        normalized = " ".join(tex.split())
        size = self.display_size if display else self.inline_size
        buffer = io.BytesIO()
        try:
            mathtext.math_to_image(
                f"${normalized}$",
                buffer,
                prop=FontProperties(size=size),
                dpi=self.dpi,
                format="png",
            )
        except ValueError as exc:
            raise MathRenderError(str(exc)) from exc
        payload = base64.b64encode(buffer.getvalue()).decode("ascii")
        css_class = "math-img math-img-display" if display else "math-img"
        return (
            f'<img class="{css_class}" alt="{markdown_safe(tex)}" '
            f'src="data:image/png;base64,{payload}">'
        )


__all__ = ["MathRenderError", "MathRenderer", "MathtextRenderer", "markdown_safe"]
