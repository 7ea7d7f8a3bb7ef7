r"""Split optional YAML front matter from markdown documents.

Documents may open with a ``---`` line, a YAML mapping, and a closing ``---``
line. ``title`` drives page and navigation titles; any other keys are kept in
:attr:`FrontMatter.extra` and handed to the page template, which emits
``description`` and ``author`` as ``<meta>`` tags. Malformed metadata never
blocks a build: the whole document is treated as markdown instead.

Example
-------
>>> from texpages.frontmatter import split_front_matter
>>> meta, body = split_front_matter("---\ntitle: SIR models\n---\n# Intro\n")
>>> meta.title, body
('SIR models', '# Intro\n')
>>> split_front_matter("---\ntitle: [unclosed\n---\nbody")[0] is None
True
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ._constants import FRONT_MATTER_MARKER

_OPENING_PATTERN = re.compile(rf"\A{FRONT_MATTER_MARKER}\r?\n")
_CLOSING_PATTERN = re.compile(
    rf"^{FRONT_MATTER_MARKER}[ \t]*(?:\r?\n|\Z)", re.MULTILINE
)


@dc.dataclass(frozen=True, slots=True)
class FrontMatter:
    """Metadata parsed from a document's leading YAML block.

    Attributes
    ----------
    title : str or None
        Display title override for the page and navigation entries.
    extra : dict[str, Any]
        Remaining keys, preserved verbatim.
    """

    title: str | None = None
    extra: dict[str, typ.Any] = dc.field(default_factory=dict)


def _parse_metadata(region: str) -> FrontMatter | None:
    """Return parsed front matter, or None when the region is not usable."""
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(region)
    except YAMLError:
        return None
    if loaded is None:
        return FrontMatter()
    if not isinstance(loaded, dict):
        return None
    payload = dict(loaded)
    title = payload.pop("title", None)
    if title is not None and not isinstance(title, str):
        return None
    return FrontMatter(title=title, extra=payload)


def split_front_matter(text: str) -> tuple[FrontMatter | None, str]:
    """Strip an optional metadata block from ``text``.

    Parameters
    ----------
    text : str
        Raw document source.

    Returns
    -------
    tuple[FrontMatter | None, str]
        The parsed metadata and the markdown body. When the document has no
        metadata block, the block is not closed, or it fails to parse, the
        metadata is ``None`` and the body is the entire original text.
    """
    opening = _OPENING_PATTERN.match(text)
    if opening is None:
        return None, text
    closing = _CLOSING_PATTERN.search(text, opening.end())
    if closing is None:
        return None, text
    metadata = _parse_metadata(text[opening.end() : closing.start()])
    if metadata is None:
        return None, text
    return metadata, text[closing.end() :]


__all__ = ["FrontMatter", "split_front_matter"]
