"""Keep TeX math intact through markdown conversion.

The markdown converter knows nothing about TeX, so ``_``, ``*`` and ``\\``
inside formulas would be read as emphasis or escapes. Two strategies share one
interface, :class:`MathTransformer`: ``transform`` returns a
:class:`TransformedText` carrying the text to convert and a ``restore`` step
to apply to the resulting HTML.

* :class:`ProtectAndRestore` swaps every span for a placeholder token and puts
  the original delimited TeX back after conversion, leaving typesetting to a
  page-load script (MathJax).
* :class:`RenderAndEmbed` renders each span up front and substitutes opaque
  markup that the converter passes through untouched.

Example
-------
>>> from texpages.mathspans import ProtectAndRestore
>>> protected = ProtectAndRestore().transform("Let $a_1$ hold.")
>>> protected.text
'Let MATHINLINE0ENDMATH hold.'
>>> protected.restore("<p>Let MATHINLINE0ENDMATH hold.</p>")
'<p>Let $a_1$ hold.</p>'
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from html import escape

import structlog

from texpages._constants import BLOCK_PLACEHOLDER_TEMPLATE, INLINE_PLACEHOLDER_TEMPLATE

from .renderers import MathRenderer, MathRenderError, MathtextRenderer, markdown_safe
from .scanner import MathSpan, TextSegment, scan_math

logger = structlog.get_logger(__name__)

_BLOCK_WRAPPINGS = (
    "<p>{token}</p>",
    "<p>\n{token}\n</p>",
    "\n\n{token}\n\n",
    "\n{token}\n",
    "{token}\n",
)
_NEWLINE_RUN = re.compile(r"\s*\n\s*")


@dc.dataclass(frozen=True, slots=True)
class PlaceholderRegistry:
    """Immutable mapping from placeholder tokens to the spans they hide."""

    entries: tuple[tuple[str, MathSpan], ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, token: str) -> MathSpan | None:
        """Return the span stored under ``token``, if any."""
        for key, span in self.entries:
            if key == token:
                return span
        return None

    def restore(self, html: str) -> str:
        """Replace every placeholder in ``html`` with its escaped raw math.

        Block placeholders are first looked up with the paragraph wrapping the
        converter adds around a lone token, most specific pattern first, so the
        display math is not left inside a ``<p>``.
        """
        result = html
        for token, span in reversed(self.entries):
            raw = escape(span.raw, quote=True)
            if span.display:
                for pattern in _BLOCK_WRAPPINGS:
                    wrapped = pattern.format(token=token)
                    if wrapped in result:
                        result = result.replace(wrapped, raw, 1)
                        break
                else:
                    result = result.replace(token, raw, 1)
            else:
                result = result.replace(token, raw, 1)
        return result


@dc.dataclass(frozen=True, slots=True)
class TransformedText:
    """Markdown ready for conversion plus the registry needed to restore it."""

    text: str
    registry: PlaceholderRegistry = PlaceholderRegistry()

    def restore(self, html: str) -> str:
        """Apply the post-conversion step to the converted ``html``."""
        if not self.registry:
            return html
        return self.registry.restore(html)


class MathTransformer(typ.Protocol):
    """Capability shared by the math handling strategies."""

    def transform(self, text: str) -> TransformedText:
        """Return ``text`` with every math span made safe for markdown."""
        ...


class ProtectAndRestore:
    """Hide math behind placeholder tokens during markdown conversion."""

    def transform(self, text: str) -> TransformedText:
        """Replace each math span with a unique placeholder token."""
        parts: list[str] = []
        entries: list[tuple[str, MathSpan]] = []
        for segment in scan_math(text):
            if isinstance(segment, TextSegment):
                parts.append(segment.text)
                continue
            if segment.display:
                token = BLOCK_PLACEHOLDER_TEMPLATE.format(id=len(entries))
                parts.append(f"\n\n{token}\n\n")
            else:
                token = INLINE_PLACEHOLDER_TEMPLATE.format(id=len(entries))
                parts.append(token)
            entries.append((token, segment))
        return TransformedText("".join(parts), PlaceholderRegistry(tuple(entries)))


class RenderAndEmbed:
    """Render math immediately and embed the markup in the markdown."""

    def __init__(self, renderer: MathRenderer | None = None) -> None:
        self.renderer: MathRenderer = renderer or MathtextRenderer()

    def transform(self, text: str) -> TransformedText:
        """Substitute rendered markup for each math span."""
        parts: list[str] = []
        for segment in scan_math(text, skip_code=True):
            if isinstance(segment, TextSegment):
                parts.append(segment.text)
            else:
                parts.append(self._embed(segment))
        return TransformedText("".join(parts))

    def _embed(self, span: MathSpan) -> str:
        try:
            markup = self.renderer(span.source, display=span.display)
        except MathRenderError as exc:
            logger.warning(
                "Failed to render math span",
                source=span.source,
                offset=span.start,
                error=str(exc),
            )
            markup = error_markup(span, str(exc))
        markup = _NEWLINE_RUN.sub(" ", markup.strip())
        if span.display:
            return f'\n\n<div class="math math-display">{markup}</div>\n\n'
        return f'<span class="math math-inline">{markup}</span>'


def error_markup(span: MathSpan, reason: str) -> str:
    """Return a visibly marked element carrying the original TeX source."""
    return (
        f'<span class="math-error" title="{markdown_safe(reason)}">'
        f"{markdown_safe(span.raw)}</span>"
    )


def build_math_transformer(
    mode: str, renderer: MathRenderer | None = None
) -> MathTransformer:
    """Return the strategy configured by ``mode``.

    Parameters
    ----------
    mode : str
        ``"protect"`` or ``"render"``.
    renderer : MathRenderer, optional
        Renderer used by the ``"render"`` strategy; defaults to
        :class:`MathtextRenderer`.

    Raises
    ------
    ValueError
        If ``mode`` names no known strategy.
    """
    match mode:
        case "protect":
            return ProtectAndRestore()
        case "render":
            return RenderAndEmbed(renderer)
        case _:
            msg = f"Unknown math mode '{mode}'."
            raise ValueError(msg)


__all__ = [
    "MathTransformer",
    "PlaceholderRegistry",
    "ProtectAndRestore",
    "RenderAndEmbed",
    "TransformedText",
    "build_math_transformer",
    "error_markup",
]
