"""Compile a tree of markdown documents into a static HTML site.

This package exposes the CLI entry points used by the ``texpages`` console
script to turn ``content/**/*.md`` plus ``config.yaml`` into ``dist/``.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from texpages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
