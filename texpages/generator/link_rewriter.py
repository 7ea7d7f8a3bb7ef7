"""Retarget document-relative links in rendered HTML to compiled pages.

Authors link between documents either by filename (``sir.md#model``) or by
slug (``sir``, ``math/sir``). After markdown conversion every anchor is
classified: external targets are left alone, ``.md`` targets get the output
extension, and bare slugs are rewritten to the compiled page path relative to
the page being rendered. Anything else is assumed to be a deliberate relative
reference and kept as written.
"""

from __future__ import annotations

import posixpath
import re
import typing as typ

import structlog

from texpages._constants import OUTPUT_EXTENSION, SOURCE_EXTENSION
from texpages.documents import AmbiguousSlugError, SlugIndex

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = structlog.get_logger(__name__)

ANCHOR_HREF_PATTERN = re.compile(
    r"<a\b[^>]*?\shref=\"(?P<href>[^\"]*)\"[^>]*>", re.IGNORECASE
)
EXTERNAL_PREFIXES = ("http://", "https://", "mailto:", "tel:", "data:", "javascript:")


def _is_external(href: str) -> bool:
    """Return True for targets that must never be rewritten."""
    lower = href.lower()
    return (
        lower.startswith(EXTERNAL_PREFIXES)
        or href.startswith(("#", "/"))
        or "://" in href
    )


def _split_suffix(href: str) -> tuple[str, str]:
    """Split ``href`` at the first ``#`` or ``?`` into base and suffix."""
    cut = min(
        (pos for pos in (href.find("#"), href.find("?")) if pos != -1),
        default=len(href),
    )
    return href[:cut], href[cut:]


class InternalLinkRewriter:
    """Rewrite internal anchors for the page identified by ``current_slug``."""

    def __init__(self, slugs: SlugIndex, current_slug: str | None = None) -> None:
        self.slugs = slugs
        self.current_slug = current_slug
        self._base_dir = posixpath.dirname(current_slug) if current_slug else ""

    def rewrite(self, html: str) -> str:
        """Return ``html`` with every internal anchor retargeted.

        Match positions are collected before any edit and replacements are
        applied from the end of the document backwards, so earlier offsets
        stay valid.
        """
        replacements: list[tuple[int, int, str]] = []
        for match in list(ANCHOR_HREF_PATTERN.finditer(html)):
            rewritten = self.rewrite_href(match.group("href"))
            if rewritten is not None:
                replacements.append((match.start("href"), match.end("href"), rewritten))
        result = html
        for start, end, replacement in reversed(replacements):
            result = f"{result[:start]}{replacement}{result[end:]}"
        return result

    def rewrite_href(self, href: str) -> str | None:
        """Return the rewritten target for ``href`` or None to keep it."""
        if not href or _is_external(href):
            return None
        base, suffix = _split_suffix(href)
        if base.endswith(SOURCE_EXTENSION):
            return f"{base[: -len(SOURCE_EXTENSION)]}{OUTPUT_EXTENSION}{suffix}"
        if not base or posixpath.splitext(base)[1]:
            return None
        slug = self._resolve(base)
        if slug is None:
            return None
        return f"{self._relative(slug)}{OUTPUT_EXTENSION}{suffix}"

    def _resolve(self, base: str) -> str | None:
        """Return the slug ``base`` refers to, if it names a known document."""
        normalized = posixpath.normpath(posixpath.join(self._base_dir, base))
        if normalized in self.slugs:
            return normalized
        if base in self.slugs:
            return base
        if "/" in base:
            return None
        try:
            return self.slugs.resolve(base)
        except AmbiguousSlugError as exc:
            logger.warning(
                "Leaving ambiguous link unchanged",
                page=self.current_slug,
                href=base,
                candidates=list(exc.candidates),
            )
            return None

    def _relative(self, slug: str) -> str:
        if not self._base_dir:
            return slug
        return posixpath.relpath(slug, self._base_dir)


def rewrite_internal_links(
    html: str,
    slugs: SlugIndex | cabc.Iterable[str],
    *,
    current_slug: str | None = None,
) -> str:
    """Rewrite internal anchors in ``html``.

    Parameters
    ----------
    html : str
        Rendered page body.
    slugs : SlugIndex or Iterable[str]
        Every known document slug.
    current_slug : str, optional
        Slug of the page being rendered; compiled targets are expressed
        relative to its directory. ``None`` treats the page as top level.

    Returns
    -------
    str
        HTML with ``.md`` and slug targets pointing at ``.html`` pages.

    Examples
    --------
    >>> rewrite_internal_links('<a href="sir#fit">x</a>', ["sir"])
    '<a href="sir.html#fit">x</a>'
    """
    index = slugs if isinstance(slugs, SlugIndex) else SlugIndex(slugs)
    return InternalLinkRewriter(index, current_slug).rewrite(html)


__all__ = [
    "ANCHOR_HREF_PATTERN",
    "InternalLinkRewriter",
    "rewrite_internal_links",
]
