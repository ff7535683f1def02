"""
Search result model
"""
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field


class SearchResultItem(BaseModel):
    """One ranked organic result, as shown to the user and sent to the outline prompt"""
    model_config = ConfigDict(frozen=True)

    rank: int = Field(..., ge=1)
    title: str = ""
    url: str = ""


def coerce_search_results(raw_results: Any, limit: int = 10) -> List[SearchResultItem]:
    """
    Build items from client-supplied JSON. Entries keep their own positive
    rank when they carry one and are otherwise ranked by position.
    """
    if not isinstance(raw_results, list):
        return []

    items = []
    for i, raw in enumerate(raw_results[:limit]):
        entry = raw if isinstance(raw, dict) else {}
        rank = entry.get("rank")
        if isinstance(rank, bool) or not isinstance(rank, int) or rank < 1:
            rank = i + 1
        items.append(SearchResultItem(
            rank=rank,
            title=str(entry.get("title") or ""),
            url=str(entry.get("url") or entry.get("link") or ""),
        ))
    return items
