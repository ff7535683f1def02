"""
Outline API endpoint
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from seo_writer.errors import WriterError
from seo_writer.models.search import coerce_search_results
from seo_writer.schemas.requests import OutlineRequest
from seo_writer.services.outline_service import OutlineService, get_outline_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
def generate_outline(
    request: OutlineRequest,
    outline_service: OutlineService = Depends(get_outline_service),
):
    """
    Generate an H2/H3/H4 outline from a keyword and its search results.
    Returns the outline JSON ({"h2": [...], "targetWords": n}) as produced by the LLM.
    """
    if not request.keyword or not isinstance(request.serp_results, list):
        return JSONResponse({"error": "keyword and serpResults are required"}, status_code=400)

    search_results = coerce_search_results(request.serp_results)

    try:
        outline_data = outline_service.request_outline(request.keyword, search_results, request.target_words)
    except WriterError as e:
        logger.error("outline api error: %s", e)
        return JSONResponse({"error": "outline_failed", "detail": str(e)}, status_code=500)

    return JSONResponse(outline_data)
