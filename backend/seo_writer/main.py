"""
Main FastAPI application for SEO Outline Writer
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from seo_writer.api import article, editor, outline, serp
from seo_writer.config import ALLOWED_ORIGINS, LOG_LEVEL
from seo_writer.logging_config import configure_logging
from seo_writer.services.editor_service import get_session_registry

logger = logging.getLogger(__name__)

app = FastAPI(
    title="SEO Outline Writer API",
    description="Keyword -> SERP -> AI outline -> interactive editing -> AI article",
    version="1.0.0"
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    configure_logging(LOG_LEVEL)
    logger.info("SEO Outline Writer API started")


@app.on_event("shutdown")
async def shutdown_event():
    # Sessions are never persisted; drop them and their timers
    get_session_registry().close_all()


# Include routers
app.include_router(serp.router, prefix="/api/serp", tags=["serp"])
app.include_router(outline.router, prefix="/api/outline", tags=["outline"])
app.include_router(article.router, prefix="/api/article", tags=["article"])
app.include_router(editor.router, prefix="/api/editor", tags=["editor"])


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "SEO Outline Writer API"}


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "SEO Outline Writer API",
        "version": "1.0.0",
        "docs": "/docs"
    }
