"""Load and decode the texpages site configuration.

This subpackage parses the project's ``config.yaml``: the optional
``page_order`` and ``navbar_order`` lists, ``dropdowns`` groups, and the
page-assembly settings (logo, stylesheet, math mode, ...). Raw YAML is decoded
once into the typed values in :mod:`texpages.config.models` so navigation and
rendering code never inspects loosely-typed data. The primary entry point is
:func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from texpages.config import load_site_config
>>> site = load_site_config(Path("config.yaml"))  # doctest: +SKIP
>>> site.math_mode  # doctest: +SKIP
'protect'
"""

from .loader import DEFAULT_CONFIG_NAME, build_site_config, load_site_config
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
    SiteConfig,
    SiteConfigError,
    SlugItem,
    SlugRef,
)

__all__ = [
    "DEFAULT_CONFIG_NAME",
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
    "build_site_config",
    "load_site_config",
]
