"""Tests for the outline tree model."""

from __future__ import annotations

from seo_writer.config import DEFAULT_TARGET_WORDS
from seo_writer.models.outline_tree import (
    POINT_PLACEHOLDER,
    SECTION_PLACEHOLDER,
    SUBSECTION_PLACEHOLDER,
    OutlineTree,
    Section,
    Subsection,
)


def _tree(*titles: str) -> OutlineTree:
    return OutlineTree(sections=tuple(Section(title=t) for t in titles))


def _full_tree() -> OutlineTree:
    return OutlineTree(
        sections=(
            Section(title="A", subsections=(Subsection(title="A1", points=("a", "b")), Subsection(title="A2"))),
            Section(title="B", subsections=(Subsection(title="B1", points=("x",)),)),
        ),
        target_word_count=3000,
    )


def test_add_section_appends_placeholder() -> None:
    """New sections get a non-empty default title and no subsections."""

    tree = OutlineTree().add_section().add_section()
    assert len(tree.sections) == 2
    assert tree.sections[-1].title == SECTION_PLACEHOLDER
    assert tree.sections[-1].subsections == ()


def test_add_subsection_and_point_use_placeholders() -> None:
    tree = OutlineTree().add_section().add_subsection(0).add_point(0, 0)
    assert tree.sections[0].subsections[0].title == SUBSECTION_PLACEHOLDER
    assert tree.sections[0].subsections[0].points == (POINT_PLACEHOLDER,)


def test_mutations_return_new_tree_and_keep_original() -> None:
    original = _tree("A")
    updated = original.update_section_title(0, "Z")
    assert original.sections[0].title == "A"
    assert updated.sections[0].title == "Z"


def test_count_deltas_per_level() -> None:
    tree = _full_tree()

    assert len(tree.add_section().sections) == 3
    assert len(tree.remove_section(0).sections) == 1
    assert len(tree.add_subsection(0).sections[0].subsections) == 3
    assert len(tree.remove_subsection(0, 1).sections[0].subsections) == 1
    assert len(tree.add_point(0, 0).sections[0].subsections[0].points) == 3
    assert len(tree.remove_point(0, 0, 0).sections[0].subsections[0].points) == 1


def test_remove_keeps_sibling_order() -> None:
    tree = _tree("A", "B", "C", "D").remove_section(1)
    assert [s.title for s in tree.sections] == ["A", "C", "D"]

    points = _full_tree().remove_point(0, 0, 0).sections[0].subsections[0].points
    assert points == ("b",)


def test_out_of_range_indices_are_noops() -> None:
    """Stale or invalid indices never raise and leave the tree unchanged."""

    tree = _full_tree()
    assert tree.update_section_title(5, "x") is tree
    assert tree.remove_section(-1) is tree
    assert tree.add_subsection(2) is tree
    assert tree.update_subsection_title(0, 9, "x") is tree
    assert tree.remove_subsection(9, 0) is tree
    assert tree.add_point(1, 3) is tree
    assert tree.update_point(0, 0, 2, "x") is tree
    assert tree.remove_point(0, 1, 0) is tree


def test_update_point_and_subsection_title() -> None:
    tree = _full_tree().update_point(0, 0, 1, "beta").update_subsection_title(1, 0, "B-one")
    assert tree.sections[0].subsections[0].points == ("a", "beta")
    assert tree.sections[1].subsections[0].title == "B-one"


def test_siblings_off_the_path_are_shared() -> None:
    """Nodes outside the mutated path keep their identity."""

    tree = _full_tree()
    updated = tree.update_point(0, 0, 0, "changed")

    assert updated.sections[1] is tree.sections[1]
    assert updated.sections[0].subsections[1] is tree.sections[0].subsections[1]
    assert updated.sections[0] is not tree.sections[0]


def test_reorder_sections_moves_first_to_last() -> None:
    tree = _tree("A", "B", "C").reorder_sections(0, 2)
    assert [s.title for s in tree.sections] == ["B", "C", "A"]


def test_reorder_sections_moves_last_to_first() -> None:
    tree = _tree("A", "B", "C").reorder_sections(2, 0)
    assert [s.title for s in tree.sections] == ["C", "A", "B"]


def test_reorder_without_destination_is_noop() -> None:
    tree = _tree("A", "B", "C")
    assert tree.reorder_sections(0, None) is tree
    assert tree.reorder_sections(0, 3) is tree
    assert tree.reorder_sections(4, 0) is tree


def test_target_word_count_is_clamped() -> None:
    tree = OutlineTree()
    assert tree.with_target_word_count(50).target_word_count == 200
    assert tree.with_target_word_count("abc").target_word_count == 200
    assert tree.with_target_word_count(5200).target_word_count == 5200


def test_target_word_count_accepts_numeric_text_and_survives_infinity() -> None:
    tree = OutlineTree()
    assert tree.with_target_word_count("1e3").target_word_count == 1000
    assert tree.with_target_word_count(2500.7).target_word_count == 2500
    assert tree.with_target_word_count(float("inf")).target_word_count == 200
    assert tree.with_target_word_count(float("nan")).target_word_count == 200


def test_from_payload_coerces_nested_content() -> None:
    """Missing nested sequences default to empty instead of failing."""

    payload = {
        "h2": [
            {"title": "Intro"},
            {
                "title": "Body",
                "h3": [{"title": "Part", "h4": ["one", 2]}, {"h4": "oops"}, {"title": "  ", "h4": [None, ""]}],
            },
            "not-a-dict",
        ],
        "targetWords": 2500,
    }
    tree = OutlineTree.from_payload(payload, fallback_target=3000)

    assert [s.title for s in tree.sections] == ["Intro", "Body", SECTION_PLACEHOLDER]
    assert tree.sections[0].subsections == ()
    assert tree.sections[1].subsections[0].points == ("one", "2")
    assert tree.sections[1].subsections[1].title == SUBSECTION_PLACEHOLDER
    assert tree.sections[1].subsections[1].points == ()
    assert tree.sections[1].subsections[2].title == SUBSECTION_PLACEHOLDER
    assert tree.sections[1].subsections[2].points == (POINT_PLACEHOLDER, POINT_PLACEHOLDER)
    assert tree.target_word_count == 2500


def test_from_payload_falls_back_to_requested_target() -> None:
    assert OutlineTree.from_payload({"h2": []}, fallback_target=3100).target_word_count == 3100
    assert OutlineTree.from_payload({"h2": [], "targetWords": 0}, fallback_target=3100).target_word_count == 3100


def test_from_payload_ignores_non_positive_fallback_target() -> None:
    tree = OutlineTree.from_payload({"h2": [{"title": "A", "h3": []}]}, fallback_target=0)
    assert tree.target_word_count == DEFAULT_TARGET_WORDS
    assert OutlineTree.from_payload({"h2": []}, fallback_target=-5).target_word_count == DEFAULT_TARGET_WORDS


def test_payload_uses_wire_keys() -> None:
    payload = _full_tree().to_payload()
    assert payload["targetWords"] == 3000
    assert payload["h2"][0]["h3"][0] == {"title": "A1", "h4": ["a", "b"]}
