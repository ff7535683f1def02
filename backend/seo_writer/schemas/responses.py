"""
Response schemas for SEO Outline Writer API
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class SerpLink(BaseModel):
    """Search result as returned by the search endpoint"""
    title: str = ""
    link: str = ""


class SerpResponse(BaseModel):
    """Search endpoint response"""
    results: List[SerpLink] = []


class ArticleResponse(BaseModel):
    """Generated article"""
    markdown: str = ""


class SearchResultResponse(BaseModel):
    """Ranked search result held by an editor session"""
    rank: int
    title: str
    url: str


class ActionStateResponse(BaseModel):
    """Busy/error state of one action family"""
    status: str = Field(..., description="idle, pending, success or failed")
    error: Optional[str] = None


class EditorSessionResponse(BaseModel):
    """Full editor state, including the live Markdown preview"""
    id: str
    keyword: str
    search_results: List[SearchResultResponse] = []
    search_pending: bool = False
    outline: Dict[str, Any]
    outline_markdown: str = ""
    target_words: int
    use_tables: bool = True
    article_markdown: str = ""
    actions: Dict[str, ActionStateResponse]


class MarkdownResponse(BaseModel):
    """Markdown text to copy to the clipboard"""
    markdown: str
