"""Decoders shared by the texpages configuration loader.

Each decoder turns one raw YAML value into the typed model from
:mod:`texpages.config.models` or raises :class:`SiteConfigError` describing
why the value was rejected. The loader decides whether a rejection drops a
single entry or the whole key.
"""

from __future__ import annotations

import typing as typ

from .models import (
    MATH_MODES,
    Dropdown,
    DropdownRef,
    ExternalItem,
    ExternalLinkRef,
    ItemSequence,
    MathMode,
    NameToUrlMapping,
    OrderEntry,
    SiteConfigError,
    SlugItem,
    SlugRef,
)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _scalar_text(value: object) -> str | None:
    """Return ``value`` as text when it is a YAML scalar, else None."""
    match value:
        case bool():
            return str(value).lower()
        case str() | int() | float():
            return str(value)
        case _:
            return None


def _decode_order_entry(
    value: object, *, dropdown_names: typ.Collection[str], allow_dropdowns: bool
) -> OrderEntry:
    """Decode a single ``page_order``/``navbar_order`` entry.

    Parameters
    ----------
    value : object
        Raw YAML value.
    dropdown_names : Collection[str]
        Names of configured dropdown groups.
    allow_dropdowns : bool
        Whether dropdown references are meaningful in this list
        (``navbar_order`` only).
    """
    match value:
        case str() as name if allow_dropdowns and name in dropdown_names:
            return DropdownRef(name)
        case str() as name:
            return SlugRef(name)
        case {"dropdown": name} if allow_dropdowns:
            text = _scalar_text(name)
            if text is None or text not in dropdown_names:
                msg = f"Unknown dropdown reference {name!r}."
                raise SiteConfigError(msg)
            return DropdownRef(text)
        case {"url": url, "text": text}:
            url_text, label = _scalar_text(url), _scalar_text(text)
            if url_text is None or label is None:
                msg = f"External link entries need string 'url' and 'text': {value!r}."
                raise SiteConfigError(msg)
            return ExternalLinkRef(url=url_text, text=label)
        case _:
            msg = f"Unrecognised order entry {value!r}."
            raise SiteConfigError(msg)


def _decode_dropdown_item(value: object) -> SlugItem | ExternalItem:
    """Decode one item of a sequence-style dropdown."""
    match value:
        case str() as name:
            return SlugItem(name)
        case dict():
            url = _scalar_text(value.get("url")) or ""
            text = _scalar_text(value.get("text")) or ""
            return ExternalItem(url=url, text=text)
        case _:
            msg = f"Unrecognised dropdown item {value!r}."
            raise SiteConfigError(msg)


def _decode_dropdown(
    name: str,
    value: object,
    on_error: typ.Callable[[SiteConfigError], None],
) -> Dropdown:
    """Decode a dropdown group into a mapping or item sequence.

    Individual links or items that cannot be decoded are reported through
    ``on_error`` and dropped. A group that is neither a mapping nor a list
    raises :class:`SiteConfigError`.
    """
    match value:
        case dict():
            links: list[tuple[str, str]] = []
            for key, url in value.items():
                url_text = _scalar_text(url)
                if url_text is None:
                    on_error(
                        SiteConfigError(
                            f"Dropdown '{name}' has a non-string URL for {key!r}."
                        )
                    )
                    continue
                links.append((str(key), url_text))
            return NameToUrlMapping(tuple(links))
        case list():
            items: list[SlugItem | ExternalItem] = []
            for raw_item in value:
                try:
                    items.append(_decode_dropdown_item(raw_item))
                except SiteConfigError as exc:
                    on_error(exc)
            return ItemSequence(tuple(items))
        case _:
            msg = f"Dropdown '{name}' must be a mapping or a list."
            raise SiteConfigError(msg)


def _decode_math_mode(value: object) -> MathMode:
    """Validate the ``math_mode`` setting."""
    text = _optional_str(value)
    if text is None or text.lower() not in MATH_MODES:
        allowed = ", ".join(MATH_MODES)
        msg = f"math_mode must be one of {allowed}; got {value!r}."
        raise SiteConfigError(msg)
    return typ.cast("MathMode", text.lower())


__all__ = [
    "_decode_dropdown",
    "_decode_dropdown_item",
    "_decode_math_mode",
    "_decode_order_entry",
    "_optional_str",
    "_scalar_text",
]
