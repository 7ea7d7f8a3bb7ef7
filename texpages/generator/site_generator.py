"""High-level orchestration for compiling a content tree into a static site.

:class:`SiteGenerator` discovers every markdown document under the content
directory, orders them, resolves the navigation model once, and then renders
each page independently: math transform, markdown conversion, math restore,
internal link rewriting, and finally page assembly through the ``page.jinja``
template. The output tree mirrors the content tree, and the ``assets``
directory is copied alongside the pages.

Example
-------
>>> from pathlib import Path
>>> from texpages.config import load_site_config
>>> from texpages.generator import SiteGenerator
>>> config = load_site_config(Path("config.yaml"))  # doctest: +SKIP
>>> SiteGenerator(config, content_dir=Path("content")).run()  # doctest: +SKIP
[PosixPath('dist/index.html'), PosixPath('dist/math/sir.html'), ...]
"""

from __future__ import annotations

import shutil
import typing as typ
from pathlib import Path

import structlog
from jinja2 import Environment, FileSystemLoader

from texpages.documents import Document, SlugIndex, discover_documents
from texpages.mathspans import build_math_transformer
from texpages.navigation import NavigationModel, build_navigation, order_documents

from .link_rewriter import rewrite_internal_links
from .renderer import HtmlContentRenderer

if typ.TYPE_CHECKING:
    from texpages.config import SiteConfig
    from texpages.mathspans import MathRenderer

logger = structlog.get_logger(__name__)

ASSETS_DIRNAME = "assets"


class SiteGenerator:
    """Render every document of a content tree into themed HTML pages."""

    def __init__(
        self,
        config: SiteConfig,
        *,
        content_dir: Path,
        output_dir: Path = Path("dist"),
        assets_dir: Path | None = None,
        project_dir: Path | None = None,
        templates_dir: Path | None = None,
        math_renderer: MathRenderer | None = None,
    ) -> None:
        """Initialize the generator with configuration and template context.

        Parameters
        ----------
        config : SiteConfig
            Decoded site configuration.
        content_dir : Path
            Root of the markdown content tree.
        output_dir : Path, optional
            Destination of the generated site; defaults to ``dist``.
        assets_dir : Path, optional
            Directory copied to ``<output_dir>/assets``; skipped when missing.
        project_dir : Path, optional
            Base for relative paths in the configuration (the footer
            fragment); defaults to the current directory.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.
        math_renderer : MathRenderer, optional
            Renderer for ``math_mode: render``; defaults to matplotlib
            mathtext.
        """
        self.config = config
        self.content_dir = content_dir
        self.output_dir = output_dir
        self.assets_dir = assets_dir
        self.project_dir = project_dir or Path()
        self.templates_dir = (
            templates_dir or Path(__file__).resolve().parents[1] / "templates"
        )
        self.renderer = HtmlContentRenderer(
            config.pygments_style,
            math=build_math_transformer(config.math_mode, math_renderer),
        )
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.template = self.env.get_template("page.jinja")

    def run(self) -> list[Path]:
        """Render every document and copy assets.

        Returns
        -------
        list[Path]
            Paths of the written pages, in build order.

        Notes
        -----
        The navigation model and slug index are complete before the first page
        is rendered; rendering a page reads them but never changes them.
        """
        documents = order_documents(
            discover_documents(self.content_dir), self.config.active_order
        )
        slugs = SlugIndex.from_documents(documents)
        for name, candidates in slugs.ambiguous_names().items():
            logger.warning(
                "Several documents share a filename; bare links to it stay unchanged",
                name=name,
                candidates=list(candidates),
            )
        navigation = build_navigation(documents, self.config)
        footer_html = self._read_footer()

        written: list[Path] = []
        for document in documents:
            html = self.render_page(
                document, navigation, slugs, footer_html=footer_html
            )
            output_path = self.output_dir / document.output_path
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(html, encoding="utf-8")
            written.append(output_path)
        self._copy_assets()
        return written

    def render_body(self, document: Document, slugs: SlugIndex) -> str:
        """Return the HTML body of ``document`` with internal links rewritten."""
        html = self.renderer.render(document.body)
        return rewrite_internal_links(html, slugs, current_slug=document.slug)

    def render_page(
        self,
        document: Document,
        navigation: NavigationModel,
        slugs: SlugIndex,
        *,
        footer_html: str = "",
    ) -> str:
        """Assemble the complete HTML page for ``document``."""
        page_nav = navigation.for_page(document)
        context = {
            "title": document.title,
            "body_html": self.render_body(document, slugs),
            "nav": page_nav,
            "favicon": page_nav.asset(self.config.favicon),
            "stylesheet": page_nav.asset(self.config.stylesheet),
            "mathjax_script": page_nav.asset(self.config.mathjax_script),
            "client_math": self.config.math_mode == "protect",
            "pygments_css": self.renderer.stylesheet,
            "footer_html": footer_html,
            "meta": document.front_matter.extra if document.front_matter else {},
        }
        return self.template.render(**context)

    def _read_footer(self) -> str:
        footer_path = self.project_dir / self.config.footer
        if not footer_path.is_file():
            return ""
        return footer_path.read_text(encoding="utf-8")

    def _copy_assets(self) -> None:
        if self.assets_dir is None or not self.assets_dir.is_dir():
            return
        destination = self.output_dir / ASSETS_DIRNAME
        shutil.copytree(self.assets_dir, destination, dirs_exist_ok=True)


__all__ = ["ASSETS_DIRNAME", "SiteGenerator"]
