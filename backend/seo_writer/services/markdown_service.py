"""
Markdown rendering for outline trees
"""
from typing import List

from seo_writer.models.outline_tree import OutlineTree


def render(tree: OutlineTree) -> str:
    """
    Render the outline as heading-delimited Markdown.

    ## section
    ### subsection
    #### point

    A blank line follows every subsection and every section; the result is
    stripped. Titles are emitted verbatim.
    """
    lines: List[str] = []
    for section in tree.sections or ():
        lines.append(f"## {section.title}")
        for subsection in section.subsections or ():
            lines.append(f"### {subsection.title}")
            for point in subsection.points or ():
                lines.append(f"#### {point}")
            lines.append("")
        lines.append("")
    return "\n".join(lines).strip()


def render_prompt_outline(tree: OutlineTree) -> str:
    """Indented bullet form of the outline used inside the article prompt"""
    lines: List[str] = []
    for section in tree.sections or ():
        lines.append(f"- H2: {section.title}")
        for subsection in section.subsections or ():
            lines.append(f"    - H3: {subsection.title}")
            for point in subsection.points or ():
                lines.append(f"      - H4: {point}")
    return "\n".join(lines)
