"""Typed dataclasses describing texpages site configuration structures."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

MathMode = typ.Literal["protect", "render"]
MATH_MODES: tuple[MathMode, ...] = typ.get_args(MathMode)


class SiteConfigError(ValueError):
    """Raised when a site configuration entry has an unrecognised shape."""


@dc.dataclass(frozen=True, slots=True)
class SlugRef:
    """Order entry naming a document by slug or final path segment."""

    name: str


@dc.dataclass(frozen=True, slots=True)
class DropdownRef:
    """Order entry placing a configured dropdown group."""

    name: str


@dc.dataclass(frozen=True, slots=True)
class ExternalLinkRef:
    """Order entry linking to an arbitrary URL."""

    url: str
    text: str


OrderEntry = SlugRef | DropdownRef | ExternalLinkRef


@dc.dataclass(frozen=True, slots=True)
class SlugItem:
    """Dropdown item pointing at a document."""

    name: str


@dc.dataclass(frozen=True, slots=True)
class ExternalItem:
    """Dropdown item pointing at a literal URL, opened in a new tab."""

    url: str
    text: str


@dc.dataclass(frozen=True, slots=True)
class NameToUrlMapping:
    """Dropdown content given as ordered ``key -> url`` pairs.

    Keys matching a document only borrow its title; the URL is used as
    written and the document keeps its own navigation entry.
    """

    links: tuple[tuple[str, str], ...]


@dc.dataclass(frozen=True, slots=True)
class ItemSequence:
    """Dropdown content given as a list of slugs and/or external items.

    Documents listed here are reachable only through the dropdown.
    """

    items: tuple[SlugItem | ExternalItem, ...]

    @property
    def slug_names(self) -> tuple[str, ...]:
        """Return the document names referenced by this sequence."""
        return tuple(item.name for item in self.items if isinstance(item, SlugItem))


Dropdown = NameToUrlMapping | ItemSequence


@dc.dataclass(frozen=True, slots=True)
class SiteConfig:
    """Decoded ``config.yaml`` contents.

    Attributes
    ----------
    page_order : tuple[OrderEntry, ...] or None
        Document processing and display order.
    navbar_order : tuple[OrderEntry, ...] or None
        Navigation order; takes precedence over ``page_order`` for the navbar.
    dropdowns : dict[str, Dropdown]
        Dropdown groups in configuration order.
    site_name : str or None
        Label for the root navigation entry when ``index`` has no title.
    logo : str
        Asset path (relative to the site root) shown in the root entry.
    favicon : str
        Asset path used for the page icon.
    stylesheet : str
        Asset path of the shared site stylesheet.
    math_mode : {"protect", "render"}
        ``"protect"`` to restore TeX for client-side typesetting or
        ``"render"`` to embed pre-rendered markup.
    mathjax_script : str
        Asset path of the MathJax bundle loaded in ``protect`` mode.
    pygments_style : str
        Pygments style name for highlighted code blocks.
    footer : str
        Path of an optional HTML fragment appended to each page.
    """

    page_order: tuple[OrderEntry, ...] | None = None
    navbar_order: tuple[OrderEntry, ...] | None = None
    dropdowns: dict[str, Dropdown] = dc.field(default_factory=dict)
    site_name: str | None = None
    logo: str = "assets/logo-wide.png"
    favicon: str = "assets/logo.png"
    stylesheet: str = "assets/styles.css"
    math_mode: MathMode = "protect"
    mathjax_script: str = "assets/tex-svg.js"
    pygments_style: str = "monokai"
    footer: str = "assets/footer.html"

    @property
    def active_order(self) -> tuple[OrderEntry, ...] | None:
        """Return the order list that drives document ordering."""
        if self.page_order is not None:
            return self.page_order
        return self.navbar_order

    def sequence_members(self) -> set[str]:
        """Return document names listed inside ``ItemSequence`` dropdowns."""
        names: set[str] = set()
        for dropdown in self.dropdowns.values():
            if isinstance(dropdown, ItemSequence):
                names.update(dropdown.slug_names)
        return names


__all__ = [
    "MATH_MODES",
    "Dropdown",
    "DropdownRef",
    "ExternalItem",
    "ExternalLinkRef",
    "ItemSequence",
    "MathMode",
    "NameToUrlMapping",
    "OrderEntry",
    "SiteConfig",
    "SiteConfigError",
    "SlugItem",
    "SlugRef",
]
