"""Load ``config.yaml`` into a typed :class:`SiteConfig`.

Configuration problems never stop a build. A missing file silently yields the
defaults; an unreadable or malformed file, or a malformed entry, is reported
as a warning and replaced by its default (alphabetical, index-first ordering
and no dropdowns).
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import structlog
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .helpers import (
    _decode_dropdown,
    _decode_math_mode,
    _decode_order_entry,
    _optional_str,
)
from .models import Dropdown, OrderEntry, SiteConfig, SiteConfigError

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_NAME = "config.yaml"


def _read_yaml(path: Path) -> dict[str, typ.Any] | None:
    """Return the top-level mapping in ``path`` or None after warning."""
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read site config", path=str(path), error=str(exc))
        return None
    except YAMLError as exc:
        logger.warning("Failed to parse site config", path=str(path), error=str(exc))
        return None
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        logger.warning(
            "Site config must be a mapping; using defaults",
            path=str(path),
            found=type(loaded).__name__,
        )
        return None
    return dict(loaded)


def _report(key: str) -> typ.Callable[[SiteConfigError], None]:
    """Return a callback that logs a dropped configuration value."""

    def _warn(exc: SiteConfigError) -> None:
        logger.warning("Ignoring config entry", key=key, error=str(exc))

    return _warn


def _build_dropdowns(raw: object) -> dict[str, Dropdown]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring config entry", key="dropdowns", error="not a mapping")
        return {}
    dropdowns: dict[str, Dropdown] = {}
    for name, value in raw.items():
        key = f"dropdowns.{name}"
        try:
            dropdowns[str(name)] = _decode_dropdown(str(name), value, _report(key))
        except SiteConfigError as exc:
            _report(key)(exc)
    return dropdowns


def _build_order(
    key: str,
    raw: object,
    *,
    dropdown_names: typ.Collection[str],
    allow_dropdowns: bool,
) -> tuple[OrderEntry, ...] | None:
    if raw is None:
        return None
    if not isinstance(raw, list):
        _report(key)(SiteConfigError(f"'{key}' must be a list."))
        return None
    entries: list[OrderEntry] = []
    for value in raw:
        try:
            entries.append(
                _decode_order_entry(
                    value,
                    dropdown_names=dropdown_names,
                    allow_dropdowns=allow_dropdowns,
                )
            )
        except SiteConfigError as exc:
            _report(key)(exc)
    return tuple(entries)


def build_site_config(raw: typ.Mapping[str, typ.Any]) -> SiteConfig:
    """Decode an already-parsed configuration mapping.

    Parameters
    ----------
    raw : Mapping[str, Any]
        Top-level configuration mapping.

    Returns
    -------
    SiteConfig
        Typed configuration; rejected entries are logged and omitted.
    """
    defaults = SiteConfig()
    dropdowns = _build_dropdowns(raw.get("dropdowns"))
    page_order = _build_order(
        "page_order",
        raw.get("page_order"),
        dropdown_names=dropdowns,
        allow_dropdowns=False,
    )
    navbar_order = _build_order(
        "navbar_order",
        raw.get("navbar_order"),
        dropdown_names=dropdowns,
        allow_dropdowns=True,
    )

    math_mode = defaults.math_mode
    if raw.get("math_mode") is not None:
        try:
            math_mode = _decode_math_mode(raw["math_mode"])
        except SiteConfigError as exc:
            _report("math_mode")(exc)

    return SiteConfig(
        page_order=page_order,
        navbar_order=navbar_order,
        dropdowns=dropdowns,
        site_name=_optional_str(raw.get("site_name")),
        logo=_optional_str(raw.get("logo")) or defaults.logo,
        favicon=_optional_str(raw.get("favicon")) or defaults.favicon,
        stylesheet=_optional_str(raw.get("stylesheet")) or defaults.stylesheet,
        math_mode=math_mode,
        mathjax_script=_optional_str(raw.get("mathjax_script"))
        or defaults.mathjax_script,
        pygments_style=_optional_str(raw.get("pygments_style"))
        or defaults.pygments_style,
        footer=_optional_str(raw.get("footer")) or defaults.footer,
    )


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML site configuration, falling back to defaults.

    Parameters
    ----------
    path : Path
        Filesystem path to the configuration file (usually ``config.yaml``).

    Returns
    -------
    SiteConfig
        Parsed configuration. When the file is missing the defaults are
        returned; when it cannot be read or parsed a warning is logged and the
        defaults are returned.

    Examples
    --------
    >>> from pathlib import Path
    >>> from texpages.config import load_site_config
    >>> load_site_config(Path("does-not-exist.yaml")).dropdowns
    {}
    """
    if not path.exists():
        return SiteConfig()
    raw = _read_yaml(path)
    if raw is None:
        return SiteConfig()
    return build_site_config(raw)


__all__ = ["DEFAULT_CONFIG_NAME", "build_site_config", "load_site_config"]
