"""
Outline Service - SERP-driven H2/H3/H4 outline generation with Claude or OpenAI
"""
import logging
from typing import Dict, List, Optional, Sequence

from seo_writer.config import CONTENT_LANGUAGE, MAX_SEARCH_RESULTS
from seo_writer.errors import SchemaError
from seo_writer.models.outline_tree import OutlineTree
from seo_writer.models.search import SearchResultItem
from seo_writer.services.llm_client import LLMClient, get_llm_client, parse_json_response

logger = logging.getLogger(__name__)

PROMPT_TITLE_LIMIT = 80

OUTLINE_SCHEMA_EXAMPLE = """{
  "h2": [
    { "title": "H2 title",
      "h3": [
        { "title": "H3 title", "h4": ["H4-1", "H4-2"] }
      ]
    }
  ],
  "targetWords": 3000
}"""


class OutlineService:
    """
    Service for generating outlines from a keyword and its top search results.
    """

    def __init__(self, llm_client: Optional[LLMClient] = None):
        self.llm_client = llm_client or get_llm_client()

    def generate_outline(
        self,
        keyword: str,
        search_results: Sequence[SearchResultItem],
        target_word_count: int,
    ) -> OutlineTree:
        """
        Generate a full outline tree.

        Args:
            keyword: Target keyword
            search_results: Ranked search results (at most 10 are used)
            target_word_count: Requested article length

        Returns:
            A new OutlineTree. The caller replaces its tree wholesale.

        Raises:
            SchemaError: the response was not JSON or "h2" is not a list
        """
        outline_data = self.request_outline(keyword, search_results, target_word_count)
        tree = OutlineTree.from_payload(outline_data, fallback_target=target_word_count)
        logger.info("Generated outline for %r with %d sections", keyword, len(tree.sections))
        return tree

    def request_outline(
        self,
        keyword: str,
        search_results: Sequence[SearchResultItem],
        target_word_count: int,
    ) -> Dict:
        """
        Ask the LLM for an outline and return the raw JSON object.
        Only the top-level "h2" field is checked; nested content is passed through.
        """
        system = (
            "You are an SEO editor. From the given keyword and search results, build a clear, "
            f"non-overlapping heading structure (H2/H3/H4) written in {CONTENT_LANGUAGE}."
        )
        prompt = self._build_prompt(keyword, search_results, target_word_count)

        response_text = self.llm_client.complete(system, prompt, temperature=0.5, json_mode=True)
        outline_data = parse_json_response(response_text or "{}")

        if not isinstance(outline_data, dict) or not isinstance(outline_data.get("h2"), list):
            logger.warning("Outline response for %r had an unexpected shape", keyword)
            raise SchemaError("bad_outline_shape")

        return outline_data

    def _build_prompt(
        self,
        keyword: str,
        search_results: Sequence[SearchResultItem],
        target_word_count: int,
    ) -> str:
        """Prepare the outline prompt with the top results"""
        lines: List[str] = [
            f"Keyword: {keyword}",
            f"Target length: about {target_word_count} words",
            "Top search results (title and URL):",
        ]
        for result in list(search_results)[:MAX_SEARCH_RESULTS]:
            title = (result.title or "")[:PROMPT_TITLE_LIMIT]
            lines.append(f"- {result.rank}. {title} | {result.url}")

        lines.extend([
            "",
            "Requirements:",
            f"- Output JSON only, written in {CONTENT_LANGUAGE}. Do not abbreviate with ellipses.",
            "- Create 4-6 H2 sections, 2-4 H3 per H2, and 2-4 H4 per H3.",
            "- Choose H2s from introduction / practice / cautions / case studies / FAQ / summary "
            "as appropriate, covering the topic with a natural reading flow.",
            "- H3/H4 should reflect topics and related keywords frequent in the search results. "
            "Avoid duplicates and keep each heading specific enough to convey its content.",
            "",
            "JSON schema:",
            OUTLINE_SCHEMA_EXAMPLE,
            "Return only JSON that follows the schema above.",
        ])
        return "\n".join(lines)


def get_outline_service() -> OutlineService:
    """Get outline service instance"""
    return OutlineService()
