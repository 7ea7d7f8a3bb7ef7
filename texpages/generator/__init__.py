"""Utilities for rendering, link rewriting, and generating texpages sites."""

from .link_rewriter import InternalLinkRewriter, rewrite_internal_links
from .renderer import HtmlContentRenderer
from .site_generator import SiteGenerator

__all__ = [
    "HtmlContentRenderer",
    "InternalLinkRewriter",
    "SiteGenerator",
    "rewrite_internal_links",
]
