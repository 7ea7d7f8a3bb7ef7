"""Build the site navigation model from documents and configuration.

The navigation is resolved once per build. :func:`build_navigation` turns the
discovered documents and the decoded ``config.yaml`` ordering directives into
an ordered tuple of entries (page links, external links, dropdown groups);
:meth:`NavigationModel.for_page` then produces the concrete links for one
page, prefixing every site-relative href with enough ``../`` markers to reach
the site root from that page's directory.

Entry list construction (first matching rule wins):

1. ``navbar_order`` lists entries explicitly, dropdown references included.
2. ``page_order`` lists pages and external links; every dropdown follows in
   configuration order.
3. Otherwise all documents in sorted order, then every dropdown.

Under rules 2 and 3, documents listed in a sequence-style dropdown are only
reachable through that dropdown. The ``index`` document never appears as an
ordinary entry; it is the logo-linked root entry instead.

Example
-------
>>> from pathlib import Path
>>> from texpages.config import SiteConfig
>>> from texpages.documents import Document
>>> docs = [
...     Document("index", Path("index.md"), "", "Home", ""),
...     Document("math/sir", Path("math/sir.md"), "", "SIR", ""),
... ]
>>> nav = build_navigation(docs, SiteConfig()).for_page(docs[1])
>>> nav.root.href, nav.items[0].href
('../index.html', '../math/sir.html')
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import structlog

from ._constants import INDEX_SLUG, OUTPUT_EXTENSION, PARENT_MARKER
from .config import (
    Dropdown,
    DropdownRef,
    ExternalItem,
    ExternalLinkRef,
    ItemSequence,
    NameToUrlMapping,
    SiteConfig,
    SlugItem,
    SlugRef,
)
from .documents import AmbiguousSlugError, Document, SlugIndex

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import OrderEntry

logger = structlog.get_logger(__name__)

DEFAULT_ROOT_TITLE = "Home"


@dc.dataclass(frozen=True, slots=True)
class PageLink:
    """Navigation entry for a generated page."""

    slug: str
    title: str


@dc.dataclass(frozen=True, slots=True)
class ExternalLink:
    """Navigation entry for an arbitrary URL."""

    url: str
    text: str


@dc.dataclass(frozen=True, slots=True)
class DropdownGroup:
    """Navigation entry expanding into a configured group of links."""

    name: str
    content: Dropdown


NavEntry = PageLink | ExternalLink | DropdownGroup


@dc.dataclass(frozen=True, slots=True)
class NavLink:
    """A concrete link as emitted into one page's navbar."""

    href: str
    text: str
    active: bool = False
    external: bool = False


@dc.dataclass(frozen=True, slots=True)
class NavDropdown:
    """A concrete dropdown menu as emitted into one page's navbar."""

    name: str
    links: tuple[NavLink, ...]


NavItem = NavLink | NavDropdown


@dc.dataclass(frozen=True, slots=True)
class PageNavigation:
    """Navigation resolved for a single page.

    Attributes
    ----------
    root : NavLink
        Logo-linked entry pointing at the site root.
    logo_src : str
        Depth-adjusted path of the logo image.
    items : tuple[NavItem, ...]
        Remaining entries in navigation order.
    prefix : str
        ``../`` repeated once per directory level of the page.
    """

    root: NavLink
    logo_src: str
    items: tuple[NavItem, ...]
    prefix: str

    def asset(self, path: str) -> str:
        """Return ``path`` (relative to the site root) as seen from this page."""
        return f"{self.prefix}{path}"

    @property
    def active(self) -> NavLink | None:
        """Return the active entry, if the page has one."""
        if self.root.active:
            return self.root
        return next(
            (item for item in self.items if isinstance(item, NavLink) and item.active),
            None,
        )


def relative_prefix(depth: int) -> str:
    """Return the prefix leading from a page at ``depth`` to the site root."""
    return PARENT_MARKER * depth


def _safe_resolve(index: SlugIndex, name: str) -> str | None:
    """Resolve ``name`` against ``index``, warning on ambiguous names."""
    try:
        return index.resolve(name)
    except AmbiguousSlugError as exc:
        logger.warning(
            "Ignoring ambiguous document reference",
            name=name,
            candidates=list(exc.candidates),
        )
        return None


def order_documents(
    documents: cabc.Iterable[Document],
    order: cabc.Sequence[OrderEntry] | None,
) -> list[Document]:
    """Return documents in build and display order.

    ``index`` always comes first. Documents named in ``order`` follow in list
    position; the rest come after them sorted by slug. Without an order list
    every non-index document is sorted by slug.

    Parameters
    ----------
    documents : Iterable[Document]
        Discovered documents.
    order : Sequence[OrderEntry] or None
        The active order list (``page_order``, else ``navbar_order``).

    Returns
    -------
    list[Document]
        Ordered documents.
    """
    docs = list(documents)
    index = SlugIndex.from_documents(docs)
    positions: dict[str, int] = {}
    for position, entry in enumerate(order or ()):
        if isinstance(entry, SlugRef):
            slug = _safe_resolve(index, entry.name)
            if slug is not None:
                positions.setdefault(slug, position)

    def _key(doc: Document) -> tuple[int, int, str]:
        if doc.slug == INDEX_SLUG:
            return (0, 0, "")
        if doc.slug in positions:
            return (1, positions[doc.slug], "")
        return (2, 0, doc.slug)

    return sorted(docs, key=_key)


class NavigationModel:
    """Read-only navigation shared by every page of one build."""

    def __init__(
        self,
        entries: cabc.Sequence[NavEntry],
        documents: cabc.Sequence[Document],
        *,
        root_title: str = DEFAULT_ROOT_TITLE,
        logo: str = "assets/logo-wide.png",
    ) -> None:
        self.entries: tuple[NavEntry, ...] = tuple(entries)
        self.root_title = root_title
        self.logo = logo
        self._index = SlugIndex.from_documents(documents)
        self._titles = {doc.slug: doc.title for doc in documents}

    def title_for(self, name: str) -> str | None:
        """Return the title of the document ``name`` refers to, if known."""
        slug = _safe_resolve(self._index, name)
        return self._titles.get(slug) if slug else None

    def for_page(self, document: Document) -> PageNavigation:
        """Resolve the navigation links as seen from ``document``."""
        prefix = relative_prefix(document.depth)
        root = NavLink(
            href=f"{prefix}{INDEX_SLUG}{OUTPUT_EXTENSION}",
            text=self.root_title,
            active=document.slug == INDEX_SLUG,
        )
        active_taken = root.active
        items: list[NavItem] = []
        for entry in self.entries:
            match entry:
                case PageLink(slug=slug, title=title):
                    active = not active_taken and slug == document.slug
                    active_taken = active_taken or active
                    items.append(
                        NavLink(
                            href=f"{prefix}{slug}{OUTPUT_EXTENSION}",
                            text=title,
                            active=active,
                        )
                    )
                case ExternalLink(url=url, text=text):
                    items.append(NavLink(href=url, text=text, external=True))
                case DropdownGroup(name=name, content=content):
                    links = self._dropdown_links(content, prefix)
                    items.append(NavDropdown(name=name, links=links))
        return PageNavigation(
            root=root,
            logo_src=f"{prefix}{self.logo}",
            items=tuple(items),
            prefix=prefix,
        )

    def _dropdown_links(self, content: Dropdown, prefix: str) -> tuple[NavLink, ...]:
        links: list[NavLink] = []
        match content:
            case NameToUrlMapping(links=pairs):
                for key, url in pairs:
                    links.append(NavLink(href=url, text=self.title_for(key) or key))
            case ItemSequence(items=items):
                for item in items:
                    match item:
                        case SlugItem(name=name):
                            slug = _safe_resolve(self._index, name) or name
                            links.append(
                                NavLink(
                                    href=f"{prefix}{slug}{OUTPUT_EXTENSION}",
                                    text=self.title_for(name) or name,
                                )
                            )
                        case ExternalItem(url=url, text=text) if url and text:
                            links.append(NavLink(href=url, text=text, external=True))
        return tuple(links)


def _root_title(documents: cabc.Sequence[Document], config: SiteConfig) -> str:
    """Return the label of the root entry."""
    for doc in documents:
        if doc.slug == INDEX_SLUG and doc.front_matter and doc.front_matter.title:
            return doc.front_matter.title
    return config.site_name or DEFAULT_ROOT_TITLE


def build_entries(
    documents: cabc.Sequence[Document], config: SiteConfig
) -> list[NavEntry]:
    """Resolve the ordered navigation entries for the whole site."""
    index = SlugIndex.from_documents(documents)
    titles = {doc.slug: doc.title for doc in documents}
    suppressed = {
        slug
        for name in config.sequence_members()
        if (slug := _safe_resolve(index, name)) is not None
    }

    def _page(name: str, *, suppress: bool) -> PageLink | None:
        slug = _safe_resolve(index, name)
        if slug is None or slug == INDEX_SLUG or (suppress and slug in suppressed):
            return None
        return PageLink(slug=slug, title=titles[slug])

    def _from_order(
        order: cabc.Sequence[OrderEntry], *, suppress: bool
    ) -> list[NavEntry]:
        resolved: list[NavEntry] = []
        for entry in order:
            match entry:
                case DropdownRef(name=name) if name in config.dropdowns:
                    resolved.append(DropdownGroup(name, config.dropdowns[name]))
                case SlugRef(name=name):
                    if (link := _page(name, suppress=suppress)) is not None:
                        resolved.append(link)
                case ExternalLinkRef(url=url, text=text):
                    resolved.append(ExternalLink(url=url, text=text))
        return resolved

    all_dropdowns = [
        DropdownGroup(name, content) for name, content in config.dropdowns.items()
    ]
    if config.navbar_order is not None:
        return _from_order(config.navbar_order, suppress=False)
    if config.page_order is not None:
        return _from_order(config.page_order, suppress=True) + all_dropdowns
    entries: list[NavEntry] = [
        PageLink(slug=doc.slug, title=doc.title)
        for doc in order_documents(documents, None)
        if doc.slug != INDEX_SLUG and doc.slug not in suppressed
    ]
    return entries + all_dropdowns


def build_navigation(
    documents: cabc.Sequence[Document], config: SiteConfig
) -> NavigationModel:
    """Build the navigation model shared by every page of the site.

    Parameters
    ----------
    documents : Sequence[Document]
        Every discovered document.
    config : SiteConfig
        Decoded site configuration.

    Returns
    -------
    NavigationModel
        Model whose :meth:`~NavigationModel.for_page` yields per-page links.
    """
    return NavigationModel(
        build_entries(documents, config),
        documents,
        root_title=_root_title(documents, config),
        logo=config.logo,
    )


__all__ = [
    "DEFAULT_ROOT_TITLE",
    "DropdownGroup",
    "ExternalLink",
    "NavDropdown",
    "NavEntry",
    "NavItem",
    "NavLink",
    "NavigationModel",
    "PageLink",
    "PageNavigation",
    "build_entries",
    "build_navigation",
    "order_documents",
    "relative_prefix",
]
