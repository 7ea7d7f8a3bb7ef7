"""Cyclopts CLI entrypoint for compiling a markdown content tree into a site.

The ``texpages`` console script reads ``config.yaml``, renders every markdown
document under ``content/`` into ``dist/``, and copies ``assets/`` alongside
the pages. Every option may also be supplied through an ``INPUT_*``
environment variable, which keeps CI workflows declarative.

Examples
--------
Build the site with the default layout:

>>> from texpages.cli import main
>>> main()  # doctest: +SKIP

Build into a custom directory with pre-rendered math:

>>> from texpages.cli import app
>>> app(["build", "--output-dir", "public", "--math-mode", "render"])  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import DEFAULT_CONFIG_NAME, MATH_MODES, load_site_config
from .generator import SiteGenerator

if typ.TYPE_CHECKING:
    from .config import MathMode

DEFAULT_CONFIG = Path(DEFAULT_CONFIG_NAME)

app = App(name="texpages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


@app.command(help="Compile markdown documents into static HTML pages.")
def build(
    *,
    content_dir: typ.Annotated[
        Path, Parameter(help="Markdown content root", env_var="INPUT_CONTENT_DIR")
    ] = Path("content"),
    output_dir: typ.Annotated[
        Path, Parameter(help="Output folder", env_var="INPUT_OUTPUT_DIR")
    ] = Path("dist"),
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    assets_dir: typ.Annotated[
        Path,
        Parameter(help="Assets copied into the output", env_var="INPUT_ASSETS_DIR"),
    ] = Path("assets"),
    math_mode: typ.Annotated[
        str | None,
        Parameter(
            help="Override math handling: 'protect' or 'render'",
            env_var="INPUT_MATH_MODE",
        ),
    ] = None,
) -> None:
    """Build the site described by ``config`` from ``content_dir``.

    Parameters
    ----------
    content_dir : Path, optional
        Root of the markdown tree; defaults to ``content``.
    output_dir : Path, optional
        Destination of the generated pages; defaults to ``dist``.
    config : Path, optional
        Site configuration file; a missing file means default ordering and no
        dropdowns.
    assets_dir : Path, optional
        Directory copied to ``<output_dir>/assets`` when it exists.
    math_mode : str or None, optional
        Overrides ``math_mode`` from the configuration.

    Raises
    ------
    ValueError
        If ``math_mode`` is not one of the supported strategies.
    """
    site_config = load_site_config(config)
    if math_mode is not None:
        if math_mode not in MATH_MODES:
            allowed = ", ".join(MATH_MODES)
            msg = f"--math-mode must be one of {allowed}; got '{math_mode}'."
            raise ValueError(msg)
        site_config = dc.replace(
            site_config, math_mode=typ.cast("MathMode", math_mode)
        )

    generator = SiteGenerator(
        site_config,
        content_dir=content_dir,
        output_dir=output_dir,
        assets_dir=assets_dir,
        project_dir=config.parent,
    )
    for path in generator.run():
        print(f"wrote {_format_path(path)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``texpages`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
