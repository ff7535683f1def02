"""
Editor Service - per-session editing state and action sequencing

An EditorSession owns one outline tree, the latest search results and the
latest article. Search, outline generation and article generation each have
their own ActionState (idle -> pending -> success | failed) so a failure in
one family never overwrites another. All state changes happen on the event
loop; blocking gateway calls run in a worker thread.

In-flight requests are not cancelled. When the same action is started twice,
whichever call finishes last writes the result.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict

from seo_writer.config import OUTLINE_SUCCESS_CLEAR_SECONDS, SEARCH_DEBOUNCE_SECONDS
from seo_writer.errors import PreconditionError, WriterError
from seo_writer.models.outline_tree import OutlineTree
from seo_writer.models.search import SearchResultItem
from seo_writer.services.article_service import ArticleOptions, ArticleService, get_article_service
from seo_writer.services.markdown_service import render
from seo_writer.services.outline_service import OutlineService, get_outline_service
from seo_writer.services.serp_service import SERPService, get_serp_service

logger = logging.getLogger(__name__)

SEARCH = "search"
OUTLINE = "outline"
ARTICLE = "article"
ACTION_FAMILIES = (SEARCH, OUTLINE, ARTICLE)

FAILURE_MESSAGES = {
    SEARCH: "Could not fetch search results.",
    OUTLINE: "AI outline generation failed.",
    ARTICLE: "Article generation failed. Please try again.",
}


class ActionStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class ActionState(BaseModel):
    """Busy/error state of one action family"""
    model_config = ConfigDict(frozen=True)

    status: ActionStatus = ActionStatus.IDLE
    error: Optional[str] = None


@dataclass(frozen=True)
class ArticleExport:
    """Downloadable article file"""
    filename: str
    content: bytes
    media_type: str = "text/markdown; charset=utf-8"


class Debouncer:
    """
    Run `callback` once the trigger has been quiet for `delay` seconds.
    Each trigger cancels the previously armed timer, so a burst of triggers
    fires at most once, with the arguments of the last one.
    """

    def __init__(self, delay: float, callback: Callable[..., Awaitable[Any]]):
        self.delay = delay
        self.callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self, *args: Any) -> None:
        loop = asyncio.get_running_loop()
        self.cancel()
        self._handle = loop.call_later(self.delay, self._fire, args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, args: tuple) -> None:
        self._handle = None
        task = asyncio.ensure_future(self.callback(*args))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)


class EditorSession:
    """In-memory editor state for one user session. Never persisted."""

    def __init__(
        self,
        serp_service: Optional[SERPService] = None,
        outline_service: Optional[OutlineService] = None,
        article_service: Optional[ArticleService] = None,
        debounce_seconds: float = SEARCH_DEBOUNCE_SECONDS,
        success_clear_seconds: float = OUTLINE_SUCCESS_CLEAR_SECONDS,
    ):
        self.id = uuid.uuid4().hex
        self.serp_service = serp_service or get_serp_service()
        self.outline_service = outline_service or get_outline_service()
        self.article_service = article_service or get_article_service()
        self.success_clear_seconds = success_clear_seconds

        self.keyword = ""
        self.search_results: List[SearchResultItem] = []
        self.tree = OutlineTree()
        self.use_tables = True
        self.article_markdown = ""
        self.actions: Dict[str, ActionState] = {family: ActionState() for family in ACTION_FAMILIES}

        self.closed = False
        self._debouncer = Debouncer(debounce_seconds, self.search)
        self._success_clear: Optional[asyncio.TimerHandle] = None

    # ---- Action state transitions ----

    def _set_action(self, family: str, status: ActionStatus, error: Optional[str] = None) -> None:
        self.actions[family] = ActionState(status=status, error=error)

    def _fail(self, family: str, exc: Exception) -> None:
        if isinstance(exc, WriterError):
            logger.warning("Session %s: %s failed: %s", self.id, family, exc)
            message = str(exc) if isinstance(exc, PreconditionError) else f"{FAILURE_MESSAGES[family]} ({exc})"
        else:
            logger.exception("Session %s: %s failed unexpectedly", self.id, family)
            message = FAILURE_MESSAGES[family]
        self._set_action(family, ActionStatus.FAILED, message)

    def _clear_outline_success(self) -> None:
        self._success_clear = None
        if self.actions[OUTLINE].status == ActionStatus.SUCCESS:
            self._set_action(OUTLINE, ActionStatus.IDLE)

    def _cancel_success_clear(self) -> None:
        if self._success_clear is not None:
            self._success_clear.cancel()
            self._success_clear = None

    # ---- Search ----

    def set_keyword(self, keyword: str) -> None:
        """Store the keyword and re-arm the debounced search. Needs a running event loop."""
        self.keyword = keyword
        self._debouncer.trigger(keyword)

    @property
    def search_pending(self) -> bool:
        return self._debouncer.pending

    async def search(self, query: Optional[str] = None) -> None:
        """Run the search now and replace the result list on success"""
        query = self.keyword if query is None else query
        self._set_action(SEARCH, ActionStatus.PENDING)
        try:
            results = await asyncio.to_thread(self.serp_service.search, query)
        except Exception as e:
            if not self.closed:
                self._fail(SEARCH, e)
            return
        if self.closed:
            return
        self.search_results = list(results)
        self._set_action(SEARCH, ActionStatus.SUCCESS)

    async def refresh_search(self) -> None:
        """Search immediately with the current keyword, dropping any armed timer"""
        self._debouncer.cancel()
        await self.search(self.keyword)

    # ---- Outline generation ----

    async def generate_outline(self) -> None:
        """Replace the tree with a generated one. On failure the tree is left untouched."""
        self._cancel_success_clear()
        self._set_action(OUTLINE, ActionStatus.PENDING)
        keyword = self.keyword
        results = list(self.search_results)
        target = self.tree.target_word_count
        try:
            tree = await asyncio.to_thread(self.outline_service.generate_outline, keyword, results, target)
        except Exception as e:
            if not self.closed:
                self._fail(OUTLINE, e)
            return
        if self.closed:
            return
        self.tree = tree
        self._set_action(OUTLINE, ActionStatus.SUCCESS)
        self._cancel_success_clear()
        loop = asyncio.get_running_loop()
        self._success_clear = loop.call_later(self.success_clear_seconds, self._clear_outline_success)

    # ---- Outline editing ----

    def add_section(self) -> None:
        self.tree = self.tree.add_section()

    def update_section_title(self, section_index: int, text: str) -> None:
        self.tree = self.tree.update_section_title(section_index, text)

    def remove_section(self, section_index: int) -> None:
        self.tree = self.tree.remove_section(section_index)

    def reorder_sections(self, from_index: int, to_index: Optional[int]) -> None:
        self.tree = self.tree.reorder_sections(from_index, to_index)

    def add_subsection(self, section_index: int) -> None:
        self.tree = self.tree.add_subsection(section_index)

    def update_subsection_title(self, section_index: int, subsection_index: int, text: str) -> None:
        self.tree = self.tree.update_subsection_title(section_index, subsection_index, text)

    def remove_subsection(self, section_index: int, subsection_index: int) -> None:
        self.tree = self.tree.remove_subsection(section_index, subsection_index)

    def add_point(self, section_index: int, subsection_index: int) -> None:
        self.tree = self.tree.add_point(section_index, subsection_index)

    def update_point(self, section_index: int, subsection_index: int, point_index: int, text: str) -> None:
        self.tree = self.tree.update_point(section_index, subsection_index, point_index, text)

    def remove_point(self, section_index: int, subsection_index: int, point_index: int) -> None:
        self.tree = self.tree.remove_point(section_index, subsection_index, point_index)

    def set_target_word_count(self, value: Any) -> int:
        self.tree = self.tree.with_target_word_count(value)
        return self.tree.target_word_count

    def set_use_tables(self, use_tables: bool) -> None:
        self.use_tables = bool(use_tables)

    def outline_markdown(self) -> str:
        return render(self.tree)

    # ---- Article generation ----

    async def generate_article(self) -> None:
        """Expand the current tree into an article. An empty tree fails without a request."""
        if not self.tree.sections:
            self._fail(ARTICLE, PreconditionError("The outline is empty. Create an outline first."))
            return

        self._set_action(ARTICLE, ActionStatus.PENDING)
        self.article_markdown = ""
        tree = self.tree
        options = ArticleOptions(use_tables=self.use_tables)
        try:
            markdown = await asyncio.to_thread(
                self.article_service.generate_article, self.keyword, tree, tree.target_word_count, options
            )
        except Exception as e:
            if not self.closed:
                self._fail(ARTICLE, e)
            return
        if self.closed:
            return
        self.article_markdown = markdown or ""
        self._set_action(ARTICLE, ActionStatus.SUCCESS)

    def export_article(self) -> ArticleExport:
        """Build the download for the current article, named after the keyword"""
        if not self.article_markdown:
            raise PreconditionError("There is no article to export yet.")
        stem = self.keyword.replace("/", "_").replace("\\", "_") or "article"
        return ArticleExport(filename=f"{stem}.md", content=self.article_markdown.encode("utf-8"))

    # ---- Lifecycle ----

    def close(self) -> None:
        """Tear down: pending timers are cancelled and late results are ignored"""
        self.closed = True
        self._debouncer.cancel()
        self._cancel_success_clear()

    def snapshot(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "keyword": self.keyword,
            "search_results": [item.model_dump() for item in self.search_results],
            "search_pending": self.search_pending,
            "outline": self.tree.to_payload(),
            "outline_markdown": self.outline_markdown(),
            "target_words": self.tree.target_word_count,
            "use_tables": self.use_tables,
            "article_markdown": self.article_markdown,
            "actions": {family: state.model_dump(mode="json") for family, state in self.actions.items()},
        }


class EditorSessionRegistry:
    """Holds live sessions in memory, keyed by id"""

    def __init__(self, factory: Callable[[], EditorSession] = EditorSession):
        self.factory = factory
        self._sessions: Dict[str, EditorSession] = {}

    def create(self) -> EditorSession:
        session = self.factory()
        self._sessions[session.id] = session
        logger.info("Opened editor session %s", session.id)
        return session

    def get(self, session_id: str) -> Optional[EditorSession]:
        return self._sessions.get(session_id)

    def close(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        logger.info("Closed editor session %s", session_id)
        return True

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)

    def __len__(self) -> int:
        return len(self._sessions)


_registry = EditorSessionRegistry()


def get_session_registry() -> EditorSessionRegistry:
    """Get the process-wide session registry"""
    return _registry
