"""
Editor API endpoints

Every handler is async so that session state is only touched on the event
loop thread. Edits return the full session snapshot, including the live
Markdown preview.
"""
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Response

from seo_writer.errors import PreconditionError
from seo_writer.schemas.requests import (
    KeywordRequest,
    ReorderRequest,
    TargetWordsRequest,
    TitleRequest,
    UseTablesRequest,
)
from seo_writer.schemas.responses import EditorSessionResponse, MarkdownResponse
from seo_writer.services.editor_service import EditorSession, EditorSessionRegistry, get_session_registry

router = APIRouter()


def get_session(
    session_id: str,
    registry: EditorSessionRegistry = Depends(get_session_registry),
) -> EditorSession:
    """Dependency resolving the session from the path"""
    session = registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _content_disposition(filename: str) -> str:
    ascii_name = filename.encode("ascii", "ignore").decode("ascii").replace('"', "")
    if not ascii_name or ascii_name.startswith("."):
        ascii_name = "article.md"
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


# ---- Session lifecycle ----

@router.post("/sessions", response_model=EditorSessionResponse, status_code=201)
async def create_session(registry: EditorSessionRegistry = Depends(get_session_registry)):
    """Open a new editor session with an empty outline"""
    return registry.create().snapshot()


@router.get("/sessions/{session_id}", response_model=EditorSessionResponse)
async def get_session_state(session: EditorSession = Depends(get_session)):
    return session.snapshot()


@router.delete("/sessions/{session_id}", status_code=204)
async def close_session(session_id: str, registry: EditorSessionRegistry = Depends(get_session_registry)):
    """Close the session, cancelling its pending timers"""
    if not registry.close(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return Response(status_code=204)


# ---- Search ----

@router.put("/sessions/{session_id}/keyword", response_model=EditorSessionResponse)
async def set_keyword(request: KeywordRequest, session: EditorSession = Depends(get_session)):
    """Update the keyword; the search runs once typing has been quiet for the debounce window"""
    session.set_keyword(request.keyword)
    return session.snapshot()


@router.post("/sessions/{session_id}/search", response_model=EditorSessionResponse)
async def refresh_search(session: EditorSession = Depends(get_session)):
    """Search immediately with the current keyword"""
    await session.refresh_search()
    return session.snapshot()


# ---- Outline ----

@router.post("/sessions/{session_id}/outline/generate", response_model=EditorSessionResponse)
async def generate_outline(session: EditorSession = Depends(get_session)):
    await session.generate_outline()
    return session.snapshot()


@router.get("/sessions/{session_id}/outline/markdown", response_model=MarkdownResponse)
async def outline_markdown(session: EditorSession = Depends(get_session)):
    return MarkdownResponse(markdown=session.outline_markdown())


@router.post("/sessions/{session_id}/sections", response_model=EditorSessionResponse)
async def add_section(session: EditorSession = Depends(get_session)):
    session.add_section()
    return session.snapshot()


@router.post("/sessions/{session_id}/sections/reorder", response_model=EditorSessionResponse)
async def reorder_sections(request: ReorderRequest, session: EditorSession = Depends(get_session)):
    """Apply a drag-and-drop move of one H2 section"""
    session.reorder_sections(request.from_index, request.to_index)
    return session.snapshot()


@router.put("/sessions/{session_id}/sections/{section_index}", response_model=EditorSessionResponse)
async def update_section_title(section_index: int, request: TitleRequest, session: EditorSession = Depends(get_session)):
    session.update_section_title(section_index, request.text)
    return session.snapshot()


@router.delete("/sessions/{session_id}/sections/{section_index}", response_model=EditorSessionResponse)
async def remove_section(section_index: int, session: EditorSession = Depends(get_session)):
    session.remove_section(section_index)
    return session.snapshot()


@router.post("/sessions/{session_id}/sections/{section_index}/subsections", response_model=EditorSessionResponse)
async def add_subsection(section_index: int, session: EditorSession = Depends(get_session)):
    session.add_subsection(section_index)
    return session.snapshot()


@router.put(
    "/sessions/{session_id}/sections/{section_index}/subsections/{subsection_index}",
    response_model=EditorSessionResponse,
)
async def update_subsection_title(
    section_index: int,
    subsection_index: int,
    request: TitleRequest,
    session: EditorSession = Depends(get_session),
):
    session.update_subsection_title(section_index, subsection_index, request.text)
    return session.snapshot()


@router.delete(
    "/sessions/{session_id}/sections/{section_index}/subsections/{subsection_index}",
    response_model=EditorSessionResponse,
)
async def remove_subsection(section_index: int, subsection_index: int, session: EditorSession = Depends(get_session)):
    session.remove_subsection(section_index, subsection_index)
    return session.snapshot()


@router.post(
    "/sessions/{session_id}/sections/{section_index}/subsections/{subsection_index}/points",
    response_model=EditorSessionResponse,
)
async def add_point(section_index: int, subsection_index: int, session: EditorSession = Depends(get_session)):
    session.add_point(section_index, subsection_index)
    return session.snapshot()


@router.put(
    "/sessions/{session_id}/sections/{section_index}/subsections/{subsection_index}/points/{point_index}",
    response_model=EditorSessionResponse,
)
async def update_point(
    section_index: int,
    subsection_index: int,
    point_index: int,
    request: TitleRequest,
    session: EditorSession = Depends(get_session),
):
    session.update_point(section_index, subsection_index, point_index, request.text)
    return session.snapshot()


@router.delete(
    "/sessions/{session_id}/sections/{section_index}/subsections/{subsection_index}/points/{point_index}",
    response_model=EditorSessionResponse,
)
async def remove_point(
    section_index: int,
    subsection_index: int,
    point_index: int,
    session: EditorSession = Depends(get_session),
):
    session.remove_point(section_index, subsection_index, point_index)
    return session.snapshot()


# ---- Article ----

@router.put("/sessions/{session_id}/target-words", response_model=EditorSessionResponse)
async def set_target_words(request: TargetWordsRequest, session: EditorSession = Depends(get_session)):
    session.set_target_word_count(request.target_words)
    return session.snapshot()


@router.put("/sessions/{session_id}/use-tables", response_model=EditorSessionResponse)
async def set_use_tables(request: UseTablesRequest, session: EditorSession = Depends(get_session)):
    session.set_use_tables(request.use_tables)
    return session.snapshot()


@router.post("/sessions/{session_id}/article/generate", response_model=EditorSessionResponse)
async def generate_article(session: EditorSession = Depends(get_session)):
    await session.generate_article()
    return session.snapshot()


@router.get("/sessions/{session_id}/article/markdown", response_model=MarkdownResponse)
async def article_markdown(session: EditorSession = Depends(get_session)):
    if not session.article_markdown:
        raise HTTPException(status_code=409, detail="There is no article to copy yet.")
    return MarkdownResponse(markdown=session.article_markdown)


@router.get("/sessions/{session_id}/article/download")
async def download_article(session: EditorSession = Depends(get_session)):
    """Download the article as a UTF-8 Markdown file named after the keyword"""
    try:
        export = session.export_article()
    except PreconditionError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": _content_disposition(export.filename)},
    )
