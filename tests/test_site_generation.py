"""End-to-end tests for compiling a content tree with ``SiteGenerator``.

The ``site`` fixture lays out a small project under ``tmp_path``:

* ``content/`` holds an index page, two top-level pages, a nested
  ``math/sir.md`` page, a README and a pre-rendered HTML file.
* ``assets/`` holds a stylesheet and a footer fragment.
* ``config.yaml`` orders the pages and defines one dropdown of each shape.

The tests run the generator in ``protect`` mode (math left for MathJax) unless
they say otherwise, so matplotlib is never needed. Generated pages are parsed
with BeautifulSoup to check navigation, math preservation, link rewriting and
the mirrored output tree.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import pytest
from bs4 import BeautifulSoup

from texpages.config import load_site_config
from texpages.generator import SiteGenerator

if typ.TYPE_CHECKING:
    from pathlib import Path

CONFIG_YAML = """\
site_name: Wake Lab
page_order:
  - about
  - url: https://github.com/wake
    text: GitHub
dropdowns:
  Models:
    - sir
    - url: https://docs.example
      text: Docs
  Syllabi:
    about: syllabi/about.pdf
"""

PAGES = {
    "index.md": (
        "---\ntitle: Wake Lab\n---\n# Welcome\n\n"
        "See [SIR](sir) and [about](about.md#team).\n"
    ),
    "about.md": "# About\n\nThe ratio $R_0 = \\beta / \\gamma$ matters.\n",
    "zeta.md": "# Zeta\n\nBack to [home](index) or [away](https://example.org/a.md).\n",
    "math/sir.md": (
        "---\ntitle: SIR model\ndescription: Compartments & rates\n---\n"
        "# SIR\n\n"
        "$$\n\\frac{dS}{dt} = -\\beta S I\n$$\n\n"
        "Compare [zeta](../zeta.md) and [about](about).\n\n"
        "```python\nprint('hi')\n```\n"
    ),
    "README.md": "# Not a page\n",
    "legacy.md": "<!DOCTYPE html>\n<html><body>old</body></html>\n",
}


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """Create a project directory with content, assets and config."""
    content = tmp_path / "content"
    for name, text in PAGES.items():
        path = content / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    assets = tmp_path / "assets"
    assets.mkdir()
    (assets / "styles.css").write_text("body { color: black; }\n", encoding="utf-8")
    (assets / "footer.html").write_text(
        '<footer class="site-footer">Wake Lab</footer>\n', encoding="utf-8"
    )
    (tmp_path / "config.yaml").write_text(CONFIG_YAML, encoding="utf-8")
    return tmp_path


def _generator(site: Path, **overrides: typ.Any) -> SiteGenerator:  # noqa: ANN401
    config = load_site_config(site / "config.yaml")
    if "math_mode" in overrides:
        config = dc.replace(config, math_mode=overrides.pop("math_mode"))
    return SiteGenerator(
        config,
        content_dir=site / "content",
        output_dir=site / "dist",
        assets_dir=site / "assets",
        project_dir=site,
        **overrides,
    )


def _soup(path: Path) -> BeautifulSoup:
    return BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")


@pytest.fixture
def built(site: Path) -> Path:
    """Run the generator once and return the output directory."""
    _generator(site).run()
    return site / "dist"


def test_output_tree_mirrors_content(site: Path) -> None:
    written = _generator(site).run()
    dist = site / "dist"
    relative = [path.relative_to(dist).as_posix() for path in written]
    assert relative == ["index.html", "about.html", "math/sir.html", "zeta.html"], (
        "pages should be written in navigation order"
    )
    assert not (dist / "README.html").exists()
    assert not (dist / "legacy.html").exists(), "pre-rendered HTML must be skipped"
    assert (dist / "assets" / "styles.css").is_file()


def test_navbar_follows_page_order_and_dropdowns(built: Path) -> None:
    soup = _soup(built / "about.html")
    nav = soup.select_one("nav.site-nav")
    assert nav is not None
    root = nav.select_one("a.nav-root")
    assert root is not None
    assert root["href"] == "index.html"
    assert root.get_text(strip=True) == "Wake Lab"

    top_level = [
        a.get_text(strip=True)
        for a in nav.select("ul > li > a")
        if "nav-root" not in a.get("class", [])
    ]
    assert top_level == ["about", "GitHub", "Models", "Syllabi"], (
        "sir is only reachable through its dropdown; zeta is not in page_order "
        "and stays out of the navbar"
    )
    active = nav.select("a.active")
    assert [a.get_text(strip=True) for a in active] == ["about"]


def test_nested_page_uses_relative_prefixes(built: Path) -> None:
    soup = _soup(built / "math" / "sir.html")
    nav = soup.select_one("nav.site-nav")
    assert nav is not None
    assert nav.select_one("a.nav-root")["href"] == "../index.html"
    assert nav.select_one("img")["src"] == "../assets/logo-wide.png"
    stylesheet = soup.select_one('link[rel="stylesheet"]')
    assert stylesheet is not None
    assert stylesheet["href"] == "../assets/styles.css"
    dropdown_hrefs = [a["href"] for a in nav.select(".dropdown-content a")]
    assert dropdown_hrefs == [
        "../math/sir.html",
        "https://docs.example",
        "syllabi/about.pdf",
    ]
    external = nav.select_one('.dropdown-content a[href="https://docs.example"]')
    assert external["target"] == "_blank"


def test_math_is_preserved_for_client_rendering(built: Path) -> None:
    about = (built / "about.html").read_text(encoding="utf-8")
    assert "$R_0 = \\beta / \\gamma$" in about, "inline TeX must reach the page intact"
    assert "<em>" not in about
    sir = (built / "math" / "sir.html").read_text(encoding="utf-8")
    assert "$$\n\\frac{dS}{dt} = -\\beta S I\n$$" in sir
    assert "<p>$$" not in sir
    assert "MathJax" in sir


def test_internal_links_are_rewritten(built: Path) -> None:
    index_links = [a["href"] for a in _soup(built / "index.html").select("#content a")]
    assert index_links == ["math/sir.html", "about.html#team"]
    zeta_links = [a["href"] for a in _soup(built / "zeta.html").select("#content a")]
    assert zeta_links == ["index.html", "https://example.org/a.md"]
    sir_links = [
        a["href"] for a in _soup(built / "math" / "sir.html").select("#content a")
    ]
    assert sir_links == ["../zeta.html", "../about.html"]


def test_titles_code_and_footer(built: Path) -> None:
    soup = _soup(built / "math" / "sir.html")
    assert soup.title is not None
    assert soup.title.get_text() == "SIR model"
    block = soup.select_one("div.codehilite")
    assert block is not None
    assert block.get("data-language") == "python"
    footer = soup.select_one("footer.site-footer")
    assert footer is not None, "footer fragment should be appended to every page"
    assert _soup(built / "zeta.html").title.get_text() == "zeta"


def test_front_matter_extras_become_meta_tags(built: Path) -> None:
    soup = _soup(built / "math" / "sir.html")
    description = soup.select_one('meta[name="description"]')
    assert description is not None, "description front matter should reach the page"
    assert description.get("content") == "Compartments & rates"
    assert "Compartments &amp; rates" in (built / "math" / "sir.html").read_text(
        encoding="utf-8"
    )
    assert _soup(built / "about.html").select_one('meta[name="description"]') is None


def test_rebuild_is_byte_identical(site: Path) -> None:
    first = {path: path.read_bytes() for path in _generator(site).run()}
    second = {path: path.read_bytes() for path in _generator(site).run()}
    assert first == second


def test_render_mode_embeds_markup(site: Path) -> None:
    def _fake_renderer(tex: str, *, display: bool) -> str:
        kind = "display" if display else "inline"
        return f'<img class="fake-{kind}" alt="{len(tex)}">'

    _generator(site, math_mode="render", math_renderer=_fake_renderer).run()
    about = (site / "dist" / "about.html").read_text(encoding="utf-8")
    assert '<span class="math math-inline"><img class="fake-inline"' in about
    assert "$R_0" not in about
    assert "MathJax" not in about, "pre-rendered pages should not load MathJax"
    sir = _soup(site / "dist" / "math" / "sir.html")
    assert sir.select_one("div.math-display img.fake-display") is not None


def test_missing_content_dir_writes_nothing(tmp_path: Path) -> None:
    generator = SiteGenerator(
        load_site_config(tmp_path / "config.yaml"),
        content_dir=tmp_path / "content",
        output_dir=tmp_path / "dist",
    )
    assert generator.run() == []
