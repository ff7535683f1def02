"""
Article Service - Expand a finalized outline into Markdown prose
"""
import logging
from dataclasses import dataclass
from typing import Optional

from seo_writer.config import CONTENT_LANGUAGE, DEFAULT_AUDIENCE, DEFAULT_TONE
from seo_writer.errors import PreconditionError
from seo_writer.models.outline_tree import OutlineTree
from seo_writer.services.llm_client import LLMClient, get_llm_client
from seo_writer.services.markdown_service import render_prompt_outline

logger = logging.getLogger(__name__)

TABLE_GUIDANCE = """
- For information with columns (numbers, prices, comparisons, specs, pros/cons), strongly prefer a **Markdown table** so readers can compare easily.
- Add one or two sentences right before each table explaining how to read it.
- Never leave table cells empty, and skip a table when it would be thin.
- Example table (Markdown):
  | Item | Plan A | Plan B |
  |---|---:|---:|
  | Price (excl. tax) | $30 | $35 |
  | Minimum term | none | 12 months |
"""

NO_TABLE_GUIDANCE = """
- Tables may be used sparingly; when structure is needed, prefer bullet lists and short subheadings.
"""


@dataclass(frozen=True)
class ArticleOptions:
    """Options for article generation"""
    use_tables: bool = True
    tone: str = DEFAULT_TONE
    audience: str = DEFAULT_AUDIENCE


class ArticleService:
    """Service for generating the article body from an outline"""

    def __init__(self, llm_client: Optional[LLMClient] = None):
        self.llm_client = llm_client or get_llm_client()

    def generate_article(
        self,
        keyword: str,
        tree: OutlineTree,
        target_word_count: int,
        options: Optional[ArticleOptions] = None,
    ) -> str:
        """
        Generate the article as Markdown.

        The word count is passed to the model as guidance only; the returned
        text is not measured against it.

        Raises:
            PreconditionError: the outline has no sections (no request is made)
        """
        if not tree.sections:
            raise PreconditionError("The outline is empty. Create an outline first.")

        options = options or ArticleOptions()
        system = self._build_system_prompt(target_word_count, options)
        user = self._build_user_prompt(keyword, tree)

        markdown = self.llm_client.complete(system, user, temperature=0.7)
        logger.info("Generated article for %r (%d chars)", keyword, len(markdown))
        return markdown

    def _build_system_prompt(self, target_word_count: int, options: ArticleOptions) -> str:
        guidance = TABLE_GUIDANCE if options.use_tables else NO_TABLE_GUIDANCE
        return f"""
You are a professional SEO writer. Write trustworthy, readable articles in **{CONTENT_LANGUAGE}** that solve the searcher's problem.
Tone: {options.tone}
Audience: {options.audience}
Style: polite register. Avoid redundancy, keep paragraphs short, use concrete examples and evidence.
Important: aim for **about {target_word_count} words (±10%)** and optimize information density.
{guidance}
""".strip()

    def _build_user_prompt(self, keyword: str, tree: OutlineTree) -> str:
        return f"""
Keyword: {keyword}

Following the outline below, write the body in **Markdown** in this order: introduction (lead), body under each heading, conclusion (summary).
Outline:
{render_prompt_outline(tree)}

Requirements:
- Keep heading levels **H2/H3/H4** (##, ###, ####).
- Avoid repetition and filler; use proper nouns, concrete examples and numbers.
- Where useful, add a short bullet list of key points or a one-line summary inside each H2.
- Output **the body only** (no title or meta description). Do not use code blocks; output plain Markdown.
""".strip()


def get_article_service() -> ArticleService:
    """Get article service instance"""
    return ArticleService()
