"""
Request schemas for SEO Outline Writer API
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional

from seo_writer.config import DEFAULT_AUDIENCE, DEFAULT_REQUEST_TARGET_WORDS, DEFAULT_TONE


class OutlineRequest(BaseModel):
    """Request to generate an outline (proxy contract)"""
    model_config = ConfigDict(populate_by_name=True)

    keyword: Optional[str] = None
    serp_results: Any = Field(default=None, alias="serpResults", description="Ranked search results")
    target_words: int = Field(default=DEFAULT_REQUEST_TARGET_WORDS, alias="targetWords", gt=0)


class ArticleRequest(BaseModel):
    """Request to generate the article body (proxy contract)"""
    model_config = ConfigDict(populate_by_name=True)

    keyword: str = ""
    outline: Optional[Dict[str, Any]] = Field(default=None, description="Outline in {h2: [...]} form")
    target_words: int = Field(default=DEFAULT_REQUEST_TARGET_WORDS, alias="targetWords", gt=0)
    tone: str = DEFAULT_TONE
    audience: str = DEFAULT_AUDIENCE
    use_tables: bool = Field(default=True, alias="useTables")


class KeywordRequest(BaseModel):
    """Keyword typed into the editor"""
    keyword: str = ""


class TitleRequest(BaseModel):
    """New heading text"""
    text: str


class ReorderRequest(BaseModel):
    """Drag-and-drop result; a missing destination means the drag was cancelled"""
    model_config = ConfigDict(populate_by_name=True)

    from_index: int = Field(..., alias="from")
    to_index: Optional[int] = Field(default=None, alias="to")


class TargetWordsRequest(BaseModel):
    """User edit of the target word count (clamped server-side)"""
    model_config = ConfigDict(populate_by_name=True)

    target_words: Any = Field(..., alias="targetWords")


class UseTablesRequest(BaseModel):
    """Table preference for article generation"""
    model_config = ConfigDict(populate_by_name=True)

    use_tables: bool = Field(..., alias="useTables")
