"""
Outline tree model (H2 -> H3 -> H4)

Trees are immutable. Every mutation returns a new tree and leaves the nodes
off the mutated path shared with the previous tree, so callers can detect
changes with identity checks. Out-of-range indices are silently ignored.
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from seo_writer.config import DEFAULT_TARGET_WORDS, MIN_TARGET_WORDS

SECTION_PLACEHOLDER = "New section"
SUBSECTION_PLACEHOLDER = "Subheading"
POINT_PLACEHOLDER = "Detail point"


def _in_range(seq: Sequence, index: Optional[int]) -> bool:
    return index is not None and 0 <= index < len(seq)


def _replace_at(seq: Tuple, index: int, item) -> Tuple:
    return seq[:index] + (item,) + seq[index + 1:]


def _remove_at(seq: Tuple, index: int) -> Tuple:
    return seq[:index] + seq[index + 1:]


def clamp_target_word_count(value: Any) -> int:
    """Coerce a user-entered word count to an int no lower than the floor"""
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        number = 0
    return max(MIN_TARGET_WORDS, number)


class Subsection(BaseModel):
    """H3 heading with its H4 points"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = SUBSECTION_PLACEHOLDER
    points: Tuple[str, ...] = Field(default=(), alias="h4")


class Section(BaseModel):
    """H2 heading with its H3 subsections"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = SECTION_PLACEHOLDER
    subsections: Tuple[Subsection, ...] = Field(default=(), alias="h3")


class OutlineTree(BaseModel):
    """Root of the outline. Serializes to the {"h2": [...], "targetWords": n} wire shape."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sections: Tuple[Section, ...] = Field(default=(), alias="h2")
    target_word_count: int = Field(default=DEFAULT_TARGET_WORDS, alias="targetWords", ge=1)

    # ---- Construction ----

    @classmethod
    def from_payload(cls, payload: Any, fallback_target: int = DEFAULT_TARGET_WORDS) -> "OutlineTree":
        """
        Build a tree from loosely-shaped JSON.

        Only the top-level shape is trusted. Missing or non-list h2/h3/h4
        sequences become empty, missing or blank titles and points get the
        placeholder text, and non-string points are stringified. A missing or
        non-positive targetWords falls back to fallback_target, and then to
        DEFAULT_TARGET_WORDS.
        """
        data = payload if isinstance(payload, dict) else {}

        sections = []
        for raw_section in _as_list(data.get("h2")):
            section_data = raw_section if isinstance(raw_section, dict) else {}
            subsections = []
            for raw_sub in _as_list(section_data.get("h3")):
                sub_data = raw_sub if isinstance(raw_sub, dict) else {}
                points = tuple(_as_text(p, POINT_PLACEHOLDER) for p in _as_list(sub_data.get("h4")))
                title = _as_text(sub_data.get("title"), SUBSECTION_PLACEHOLDER)
                subsections.append(Subsection(title=title, points=points))
            title = _as_text(section_data.get("title"), SECTION_PLACEHOLDER)
            sections.append(Section(title=title, subsections=tuple(subsections)))

        target = data.get("targetWords")
        if not _is_positive_int(target):
            target = fallback_target if _is_positive_int(fallback_target) else DEFAULT_TARGET_WORDS

        return cls(sections=tuple(sections), target_word_count=target)

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict using the wire keys"""
        return self.model_dump(by_alias=True, mode="json")

    # ---- H2 ----

    def add_section(self) -> "OutlineTree":
        return self.model_copy(update={"sections": self.sections + (Section(),)})

    def update_section_title(self, section_index: int, text: str) -> "OutlineTree":
        if not _in_range(self.sections, section_index):
            return self
        section = self.sections[section_index].model_copy(update={"title": text})
        return self._with_section(section_index, section)

    def remove_section(self, section_index: int) -> "OutlineTree":
        if not _in_range(self.sections, section_index):
            return self
        return self.model_copy(update={"sections": _remove_at(self.sections, section_index)})

    def reorder_sections(self, from_index: int, to_index: Optional[int]) -> "OutlineTree":
        """Move one section to a new position. A None target (cancelled drag) is a no-op."""
        if not _in_range(self.sections, from_index) or not _in_range(self.sections, to_index):
            return self
        if from_index == to_index:
            return self
        sections = list(self.sections)
        moved = sections.pop(from_index)
        sections.insert(to_index, moved)
        return self.model_copy(update={"sections": tuple(sections)})

    # ---- H3 ----

    def add_subsection(self, section_index: int) -> "OutlineTree":
        if not _in_range(self.sections, section_index):
            return self
        section = self.sections[section_index]
        return self._with_subsections(section_index, section.subsections + (Subsection(),))

    def update_subsection_title(self, section_index: int, subsection_index: int, text: str) -> "OutlineTree":
        subsection = self._subsection(section_index, subsection_index)
        if subsection is None:
            return self
        return self._with_subsection(section_index, subsection_index, subsection.model_copy(update={"title": text}))

    def remove_subsection(self, section_index: int, subsection_index: int) -> "OutlineTree":
        if self._subsection(section_index, subsection_index) is None:
            return self
        section = self.sections[section_index]
        return self._with_subsections(section_index, _remove_at(section.subsections, subsection_index))

    # ---- H4 ----

    def add_point(self, section_index: int, subsection_index: int) -> "OutlineTree":
        subsection = self._subsection(section_index, subsection_index)
        if subsection is None:
            return self
        return self._with_points(section_index, subsection_index, subsection.points + (POINT_PLACEHOLDER,))

    def update_point(self, section_index: int, subsection_index: int, point_index: int, text: str) -> "OutlineTree":
        subsection = self._subsection(section_index, subsection_index)
        if subsection is None or not _in_range(subsection.points, point_index):
            return self
        return self._with_points(section_index, subsection_index, _replace_at(subsection.points, point_index, text))

    def remove_point(self, section_index: int, subsection_index: int, point_index: int) -> "OutlineTree":
        subsection = self._subsection(section_index, subsection_index)
        if subsection is None or not _in_range(subsection.points, point_index):
            return self
        return self._with_points(section_index, subsection_index, _remove_at(subsection.points, point_index))

    # ---- Root ----

    def with_target_word_count(self, value: Any) -> "OutlineTree":
        return self.model_copy(update={"target_word_count": clamp_target_word_count(value)})

    # ---- Path helpers ----

    def _subsection(self, section_index: int, subsection_index: int) -> Optional[Subsection]:
        if not _in_range(self.sections, section_index):
            return None
        subsections = self.sections[section_index].subsections
        if not _in_range(subsections, subsection_index):
            return None
        return subsections[subsection_index]

    def _with_section(self, section_index: int, section: Section) -> "OutlineTree":
        return self.model_copy(update={"sections": _replace_at(self.sections, section_index, section)})

    def _with_subsections(self, section_index: int, subsections: Tuple[Subsection, ...]) -> "OutlineTree":
        section = self.sections[section_index].model_copy(update={"subsections": subsections})
        return self._with_section(section_index, section)

    def _with_subsection(self, section_index: int, subsection_index: int, subsection: Subsection) -> "OutlineTree":
        subsections = _replace_at(self.sections[section_index].subsections, subsection_index, subsection)
        return self._with_subsections(section_index, subsections)

    def _with_points(self, section_index: int, subsection_index: int, points: Tuple[str, ...]) -> "OutlineTree":
        subsection = self.sections[section_index].subsections[subsection_index].model_copy(update={"points": points})
        return self._with_subsection(section_index, subsection_index, subsection)


def _as_list(value: Any) -> List:
    return value if isinstance(value, list) else []


def _as_text(value: Any, placeholder: str) -> str:
    text = "" if value is None else value if isinstance(value, str) else str(value)
    return text if text.strip() else placeholder


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
