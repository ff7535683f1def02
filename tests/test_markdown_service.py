"""Tests for outline Markdown rendering."""

from __future__ import annotations

from seo_writer.models.outline_tree import OutlineTree, Section, Subsection
from seo_writer.services.markdown_service import render, render_prompt_outline


def test_built_tree_renders_exact_headings() -> None:
    """A tree built one node at a time renders to the three heading levels."""

    tree = (
        OutlineTree()
        .add_section()
        .update_section_title(0, "T2")
        .add_subsection(0)
        .update_subsection_title(0, 0, "T3")
        .add_point(0, 0)
        .update_point(0, 0, 0, "T4")
    )
    assert render(tree) == "## T2\n### T3\n#### T4"


def test_blank_lines_between_blocks() -> None:
    tree = OutlineTree(
        sections=(
            Section(title="A", subsections=(Subsection(title="A1", points=("p",)), Subsection(title="A2"))),
            Section(title="B"),
        )
    )
    assert render(tree) == "## A\n### A1\n#### p\n\n### A2\n\n\n## B"


def test_render_is_idempotent() -> None:
    tree = OutlineTree().add_section().add_subsection(0).add_point(0, 0)
    assert render(tree) == render(tree)


def test_render_handles_empty_levels() -> None:
    assert render(OutlineTree()) == ""
    assert render(OutlineTree().add_section()) == "## New section"
    assert render(OutlineTree().add_section().add_subsection(0)) == "## New section\n### Subheading"


def test_titles_are_not_escaped() -> None:
    tree = OutlineTree(sections=(Section(title="*Costs* & [fees]"),))
    assert render(tree) == "## *Costs* & [fees]"


def test_prompt_outline_indents_levels() -> None:
    tree = OutlineTree(sections=(Section(title="A", subsections=(Subsection(title="A1", points=("p",)),)),))
    assert render_prompt_outline(tree) == "- H2: A\n    - H3: A1\n      - H4: p"


def test_generated_outline_with_missing_titles_has_no_blank_heading() -> None:
    tree = OutlineTree.from_payload({"h2": [{"h3": [{"title": None, "h4": [""]}]}, {"title": ""}]})
    markdown = render(tree)

    for line in markdown.splitlines():
        assert line.strip() not in ("##", "###", "####")
    assert markdown.startswith("## New section\n### Subheading\n#### Detail point")
