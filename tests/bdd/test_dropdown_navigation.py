"""Behaviour tests for dropdown navigation across nested pages.

The scenario in ``dropdown_navigation.feature`` builds a small site whose
``config.yaml`` lists a nested document in a sequence dropdown, then checks
that the document is suppressed from the top-level navbar while every href in
its own navbar climbs back to the site root.

Usage
-----
Run ``pytest tests/bdd/test_dropdown_navigation.py -v``. The scenario only
touches ``tmp_path`` and keeps math in ``protect`` mode, so no rendering
backend is required.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from texpages.config import load_site_config
from texpages.generator import SiteGenerator

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "dropdown_navigation.feature"
)
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _nav(scenario_state: dict[str, object], page: str) -> BeautifulSoup:
    output_dir = typ.cast("Path", scenario_state["output_dir"])
    html = (output_dir / page).read_text(encoding="utf-8")
    nav = BeautifulSoup(html, "html.parser").select_one("nav.site-nav")
    assert nav is not None, f"{page} should contain the site navbar"
    return nav


@given(parsers.parse('a content tree with a nested page "{path}"'))
def given_content_tree(
    tmp_path: Path, scenario_state: dict[str, object], path: str
) -> None:
    """Write an index page and the nested page under ``content/``."""
    content = tmp_path / "content"
    nested = content / path
    nested.parent.mkdir(parents=True)
    (content / "index.md").write_text("# Home\n", encoding="utf-8")
    (content / "about.md").write_text("# About\n", encoding="utf-8")
    nested.write_text("---\ntitle: SIR model\n---\n# SIR\n", encoding="utf-8")
    scenario_state["root"] = tmp_path
    scenario_state["output_dir"] = tmp_path / "dist"


@given(parsers.parse('a config listing "{name}" in the "{dropdown}" dropdown'))
def given_dropdown_config(
    scenario_state: dict[str, object], name: str, dropdown: str
) -> None:
    """Write a ``config.yaml`` with a single sequence dropdown."""
    root = typ.cast("Path", scenario_state["root"])
    config_path = root / "config.yaml"
    config_path.write_text(
        f"""
dropdowns:
  {dropdown}:
    - {name}
        """.strip()
        + "\n",
        encoding="utf-8",
    )
    scenario_state["config_path"] = config_path


@when("I build the site")
def when_build_site(scenario_state: dict[str, object]) -> None:
    """Run the site generator for the scenario project."""
    root = typ.cast("Path", scenario_state["root"])
    config = load_site_config(typ.cast("Path", scenario_state["config_path"]))
    generator = SiteGenerator(
        config,
        content_dir=root / "content",
        output_dir=typ.cast("Path", scenario_state["output_dir"]),
        project_dir=root,
    )
    scenario_state["written"] = generator.run()


@then(parsers.parse('the navbar of "{page}" has no top-level link to "{href}"'))
def then_no_top_level_link(
    scenario_state: dict[str, object], page: str, href: str
) -> None:
    """Verify the suppressed document only appears inside its dropdown."""
    nav = _nav(scenario_state, page)
    top_level = [a.get("href") for a in nav.select("ul > li > a")]
    assert href not in top_level, f"{href} should be reachable only via a dropdown"
    assert "about.html" in top_level, "unlisted documents keep their navbar entry"


@then(parsers.parse('the "{dropdown}" dropdown on "{page}" links to "{href}"'))
def then_dropdown_links(
    scenario_state: dict[str, object], dropdown: str, page: str, href: str
) -> None:
    """Verify the dropdown link is prefixed for the page's depth."""
    nav = _nav(scenario_state, page)
    groups = {
        li.select_one("a").get_text(strip=True): [
            a.get("href") for a in li.select(".dropdown-content a")
        ]
        for li in nav.select("li.dropdown")
    }
    assert groups.get(dropdown) == [href], f"unexpected dropdown links {groups}"


@then(parsers.parse('the root link on "{page}" points at "{href}"'))
def then_root_link(scenario_state: dict[str, object], page: str, href: str) -> None:
    """Verify the logo-linked root entry climbs to the site root."""
    root = _nav(scenario_state, page).select_one("a.nav-root")
    assert root is not None
    assert root.get("href") == href
