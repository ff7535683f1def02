"""
Search API endpoint - relays SerpAPI organic results
"""
import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response

from seo_writer.errors import UpstreamError, WriterError
from seo_writer.schemas.responses import SerpLink, SerpResponse
from seo_writer.services.serp_service import SERPService, get_serp_service

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


@router.get("", response_model=SerpResponse)
def search(
    response: Response,
    q: str = Query("", description="Free-text search query"),
    serp_service: SERPService = Depends(get_serp_service),
):
    """
    Fetch organic results for a query.
    Upstream error statuses are passed through with their original body.
    """
    response.headers.update(CORS_HEADERS)
    if not q:
        return SerpResponse()

    try:
        serp_data = serp_service.fetch_serp_data(q)
    except UpstreamError as e:
        return Response(content=e.body, status_code=e.status_code, headers=CORS_HEADERS)
    except WriterError as e:
        logger.error("Search failed for %r: %s", q, e)
        return JSONResponse({"error": "serp_failed", "detail": str(e)}, status_code=502, headers=CORS_HEADERS)

    return SerpResponse(results=[SerpLink(**result) for result in serp_service.extract_results(serp_data)])
