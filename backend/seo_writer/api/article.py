"""
Article API endpoint
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from seo_writer.errors import PreconditionError, WriterError
from seo_writer.models.outline_tree import OutlineTree
from seo_writer.schemas.requests import ArticleRequest
from seo_writer.schemas.responses import ArticleResponse
from seo_writer.services.article_service import ArticleOptions, ArticleService, get_article_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=ArticleResponse)
def generate_article(
    request: ArticleRequest,
    article_service: ArticleService = Depends(get_article_service),
):
    """Expand an outline into a Markdown article"""
    tree = OutlineTree.from_payload(request.outline, fallback_target=request.target_words)
    options = ArticleOptions(use_tables=request.use_tables, tone=request.tone, audience=request.audience)

    try:
        markdown = article_service.generate_article(request.keyword, tree, request.target_words, options)
    except PreconditionError as e:
        return JSONResponse({"error": "article_generation_failed", "detail": str(e)}, status_code=400)
    except WriterError as e:
        logger.error("article api error: %s", e)
        return JSONResponse({"error": "article_generation_failed"}, status_code=500)

    return ArticleResponse(markdown=markdown)
