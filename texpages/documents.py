"""Discover markdown documents and resolve their slugs.

A document is identified by its *slug*: the path relative to the content root
with the ``.md`` extension removed and separators normalised to ``/``. The
:class:`SlugIndex` answers "which document does this name refer to?" for the
navigation builder and the link rewriter, accepting either a full slug or the
final path segment of one.

Examples
--------
>>> from pathlib import Path
>>> from texpages.documents import slug_for_path, SlugIndex
>>> slug_for_path(Path("content/math/sir.md"), Path("content"))
'math/sir'
>>> SlugIndex(["index", "math/sir"]).resolve("sir")
'math/sir'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import posixpath
import typing as typ
from pathlib import Path

import structlog

from ._constants import OUTPUT_EXTENSION, SOURCE_EXTENSION
from .frontmatter import FrontMatter, split_front_matter

logger = structlog.get_logger(__name__)

_HTML_PREFIXES = ("<!DOCTYPE", "<html")


class AmbiguousSlugError(LookupError):
    """Raised when a bare name matches the final segment of several slugs."""

    def __init__(self, name: str, candidates: cabc.Sequence[str]) -> None:
        self.name = name
        self.candidates = tuple(candidates)
        joined = ", ".join(self.candidates)
        super().__init__(f"'{name}' matches several documents: {joined}")


@dc.dataclass(frozen=True, slots=True)
class Document:
    """A discovered markdown source document.

    Attributes
    ----------
    slug : str
        Extension-less, ``/``-separated path relative to the content root.
    source_path : Path
        Location of the markdown file on disk.
    source_text : str
        Full file contents, front matter included.
    title : str
        Display title from front matter, or the filename stem.
    body : str
        Markdown body with any front matter removed.
    front_matter : FrontMatter or None
        Parsed metadata block, when present and well formed.
    """

    slug: str
    source_path: Path
    source_text: str
    title: str
    body: str
    front_matter: FrontMatter | None = None

    @property
    def depth(self) -> int:
        """Return the number of directory segments before the filename."""
        return self.slug.count("/")

    @property
    def output_path(self) -> str:
        """Return the compiled page path relative to the output root."""
        return f"{self.slug}{OUTPUT_EXTENSION}"


def slug_for_path(path: Path, content_dir: Path) -> str:
    """Return the slug for ``path`` relative to ``content_dir``."""
    relative = path.relative_to(content_dir).with_suffix("")
    return relative.as_posix()


def load_document(path: Path, content_dir: Path) -> Document:
    """Read ``path`` and build a :class:`Document` from its contents."""
    text = path.read_text(encoding="utf-8")
    front_matter, body = split_front_matter(text)
    title = front_matter.title if front_matter and front_matter.title else path.stem
    return Document(
        slug=slug_for_path(path, content_dir),
        source_path=path,
        source_text=text,
        title=title,
        body=body,
        front_matter=front_matter,
    )


def discover_documents(content_dir: Path) -> list[Document]:
    """Recursively collect every markdown document below ``content_dir``.

    ``README.md`` files (any case) and files that already contain a full HTML
    document are skipped. The result is sorted by slug so discovery does not
    depend on filesystem iteration order.

    Parameters
    ----------
    content_dir : Path
        Root of the content tree. A missing directory yields no documents.

    Returns
    -------
    list[Document]
        Discovered documents sorted by slug.
    """
    if not content_dir.is_dir():
        return []
    documents: list[Document] = []
    for path in content_dir.rglob(f"*{SOURCE_EXTENSION}"):
        if not path.is_file() or path.stem.lower() == "readme":
            continue
        document = load_document(path, content_dir)
        if document.source_text.lstrip().startswith(_HTML_PREFIXES):
            logger.info("Skipping pre-rendered HTML source", path=str(path))
            continue
        documents.append(document)
    documents.sort(key=lambda doc: doc.slug)
    return documents


class SlugIndex:
    """Resolve document references by full slug or final path segment."""

    def __init__(self, slugs: cabc.Iterable[str]) -> None:
        self._slugs = frozenset(slugs)
        by_name: dict[str, list[str]] = {}
        for slug in sorted(self._slugs):
            by_name.setdefault(posixpath.basename(slug), []).append(slug)
        self._by_name = by_name

    @classmethod
    def from_documents(cls, documents: cabc.Iterable[Document]) -> SlugIndex:
        """Build an index over the slugs of ``documents``."""
        return cls(doc.slug for doc in documents)

    def __contains__(self, slug: object) -> bool:
        return slug in self._slugs

    def __iter__(self) -> typ.Iterator[str]:
        return iter(sorted(self._slugs))

    def __len__(self) -> int:
        return len(self._slugs)

    def ambiguous_names(self) -> dict[str, tuple[str, ...]]:
        """Return final segments shared by more than one slug."""
        return {
            name: tuple(slugs)
            for name, slugs in self._by_name.items()
            if len(slugs) > 1
        }

    def resolve(self, name: str) -> str | None:
        """Return the slug ``name`` refers to, or None when unknown.

        Raises
        ------
        AmbiguousSlugError
            If ``name`` is not itself a slug and is the final segment of more
            than one slug.
        """
        if name in self._slugs:
            return name
        candidates = self._by_name.get(name, [])
        if len(candidates) > 1:
            raise AmbiguousSlugError(name, candidates)
        return candidates[0] if candidates else None


__all__ = [
    "AmbiguousSlugError",
    "Document",
    "SlugIndex",
    "discover_documents",
    "load_document",
    "slug_for_path",
]
