"""Tests for the editor session: debouncing, per-action state, and last-write-wins."""

from __future__ import annotations

import asyncio
import time
from typing import Any

import pytest

from seo_writer.errors import PreconditionError, SchemaError, UpstreamError
from seo_writer.models.outline_tree import OutlineTree, Section
from seo_writer.models.search import SearchResultItem
from seo_writer.services.editor_service import (
    ActionStatus,
    Debouncer,
    EditorSession,
    EditorSessionRegistry,
)


class FakeSerp:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[tuple[str, float]] = []
        self.error = error

    def search(self, query: str) -> list[SearchResultItem]:
        self.calls.append((query, time.monotonic()))
        if self.error is not None:
            raise self.error
        return [SearchResultItem(rank=1, title=f"About {query}", url="https://example.com")]


class FakeOutline:
    def __init__(self, results: dict[str, tuple[float, Any]] | None = None) -> None:
        # keyword -> (delay_seconds, tree_or_exception)
        self.results = dict(results or {})
        self.calls: list[tuple[str, list[SearchResultItem], int]] = []

    def generate_outline(self, keyword: str, search_results: list[SearchResultItem], target: int) -> OutlineTree:
        self.calls.append((keyword, search_results, target))
        delay, outcome = self.results[keyword]
        time.sleep(delay)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeArticle:
    def __init__(self, markdown: str = "## Article", error: Exception | None = None) -> None:
        self.markdown = markdown
        self.error = error
        self.calls: list[tuple[str, OutlineTree, int, Any]] = []

    def generate_article(self, keyword: str, tree: OutlineTree, target: int, options: Any) -> str:
        self.calls.append((keyword, tree, target, options))
        if self.error is not None:
            raise self.error
        return self.markdown


def _tree(*titles: str) -> OutlineTree:
    return OutlineTree(sections=tuple(Section(title=t) for t in titles))


def _session(**kwargs: Any) -> EditorSession:
    kwargs.setdefault("serp_service", FakeSerp())
    kwargs.setdefault("outline_service", FakeOutline())
    kwargs.setdefault("article_service", FakeArticle())
    return EditorSession(**kwargs)


def test_debounce_fires_once_with_last_keystroke() -> None:
    """Two keystrokes half a window apart trigger one search, with the later value, one window after it."""

    window = 0.2
    serp = FakeSerp()

    async def scenario() -> float:
        session = _session(serp_service=serp, debounce_seconds=window)
        session.set_keyword("side")
        await asyncio.sleep(window / 2)
        second = time.monotonic()
        session.set_keyword("side job")
        await asyncio.sleep(window * 3)
        session.close()
        return second

    second_keystroke = asyncio.run(scenario())

    assert len(serp.calls) == 1
    query, fired_at = serp.calls[0]
    assert query == "side job"
    assert fired_at >= second_keystroke + window - 0.01


def test_debouncer_cancel_prevents_fire() -> None:
    fired: list[str] = []

    async def callback(value: str) -> None:
        fired.append(value)

    async def scenario() -> None:
        debouncer = Debouncer(0.05, callback)
        debouncer.trigger("x")
        assert debouncer.pending
        debouncer.cancel()
        await asyncio.sleep(0.1)

    asyncio.run(scenario())
    assert fired == []


def test_close_cancels_pending_search() -> None:
    serp = FakeSerp()

    async def scenario() -> None:
        session = _session(serp_service=serp, debounce_seconds=0.05)
        session.set_keyword("keyword")
        session.close()
        await asyncio.sleep(0.15)

    asyncio.run(scenario())
    assert serp.calls == []


def test_search_replaces_results_and_reports_failure() -> None:
    async def scenario() -> EditorSession:
        session = _session(serp_service=FakeSerp(error=UpstreamError("SERP fetch failed: 401", status_code=401)))
        session.search_results = [SearchResultItem(rank=1, title="old", url="u")]
        session.keyword = "kw"
        await session.refresh_search()
        return session

    session = asyncio.run(scenario())
    assert session.actions["search"].status == ActionStatus.FAILED
    assert "401" in session.actions["search"].error
    assert session.search_results[0].title == "old"

    async def ok() -> EditorSession:
        fresh = _session()
        fresh.keyword = "kw"
        await fresh.refresh_search()
        return fresh

    fresh = asyncio.run(ok())
    assert fresh.actions["search"].status == ActionStatus.SUCCESS
    assert [r.title for r in fresh.search_results] == ["About kw"]


def test_outline_generation_replaces_tree_and_success_self_clears() -> None:
    generated = _tree("Generated")
    outline = FakeOutline({"kw": (0, generated)})

    async def scenario() -> tuple[EditorSession, ActionStatus]:
        session = _session(outline_service=outline, success_clear_seconds=0.05)
        session.keyword = "kw"
        session.add_section()
        await session.generate_outline()
        status_right_after = session.actions["outline"].status
        await asyncio.sleep(0.15)
        return session, status_right_after

    session, status_right_after = asyncio.run(scenario())
    assert status_right_after == ActionStatus.SUCCESS
    assert session.actions["outline"].status == ActionStatus.IDLE
    assert session.tree is generated
    assert outline.calls[0][0] == "kw"


def test_outline_schema_error_leaves_tree_unchanged() -> None:
    outline = FakeOutline({"": (0, SchemaError("bad_outline_shape"))})

    async def scenario() -> tuple[EditorSession, OutlineTree]:
        session = _session(outline_service=outline)
        session.tree = _tree("Keep me")
        before = session.tree
        await session.generate_outline()
        return session, before

    session, before = asyncio.run(scenario())
    assert session.tree is before
    assert session.actions["outline"].status == ActionStatus.FAILED
    assert session.actions["outline"].error


def test_overlapping_outline_generations_last_finisher_wins() -> None:
    slow, fast = _tree("slow"), _tree("fast")
    outline = FakeOutline({"first": (0.2, slow), "second": (0.01, fast)})

    async def scenario() -> EditorSession:
        session = _session(outline_service=outline)
        session.keyword = "first"
        first = asyncio.ensure_future(session.generate_outline())
        await asyncio.sleep(0)
        session.keyword = "second"
        second = asyncio.ensure_future(session.generate_outline())
        await asyncio.gather(first, second)
        session.close()
        return session

    session = asyncio.run(scenario())
    assert session.tree is slow


def test_outline_failure_does_not_touch_article_state() -> None:
    outline = FakeOutline({"": (0, UpstreamError("boom", status_code=500))})

    async def scenario() -> EditorSession:
        session = _session(outline_service=outline)
        session.tree = _tree("A")
        await session.generate_article()
        await session.generate_outline()
        return session

    session = asyncio.run(scenario())
    assert session.actions["article"].status == ActionStatus.SUCCESS
    assert session.actions["outline"].status == ActionStatus.FAILED
    assert session.article_markdown == "## Article"


def test_article_on_empty_tree_fails_without_call() -> None:
    article = FakeArticle()

    async def scenario() -> EditorSession:
        session = _session(article_service=article)
        await session.generate_article()
        return session

    session = asyncio.run(scenario())
    assert article.calls == []
    assert session.actions["article"].status == ActionStatus.FAILED
    assert "empty" in session.actions["article"].error


def test_article_uses_current_target_and_table_option() -> None:
    article = FakeArticle()

    async def scenario() -> EditorSession:
        session = _session(article_service=article)
        session.keyword = "kw"
        session.add_section()
        session.set_target_word_count(100)
        session.set_use_tables(False)
        await session.generate_article()
        return session

    session = asyncio.run(scenario())
    keyword, tree, target, options = article.calls[0]
    assert keyword == "kw"
    assert target == 200
    assert options.use_tables is False
    assert session.article_markdown == "## Article"


def test_export_article_names_file_after_keyword() -> None:
    session = _session()
    with pytest.raises(PreconditionError):
        session.export_article()

    session.article_markdown = "## 本文"
    assert session.export_article().filename == "article.md"

    session.keyword = "副業 扶養"
    export = session.export_article()
    assert export.filename == "副業 扶養.md"
    assert export.content == "## 本文".encode("utf-8")


def test_session_edits_flow_into_markdown_preview() -> None:
    session = _session()
    session.add_section()
    session.update_section_title(0, "T2")
    session.add_subsection(0)
    session.update_subsection_title(0, 0, "T3")
    session.add_point(0, 0)
    session.update_point(0, 0, 0, "T4")
    assert session.outline_markdown() == "## T2\n### T3\n#### T4"

    snapshot = session.snapshot()
    assert snapshot["outline"]["h2"][0]["title"] == "T2"
    assert snapshot["outline_markdown"] == "## T2\n### T3\n#### T4"
    assert snapshot["actions"]["search"] == {"status": "idle", "error": None}


def test_registry_create_get_close() -> None:
    registry = EditorSessionRegistry(factory=_session)
    session = registry.create()

    assert registry.get(session.id) is session
    assert registry.close(session.id) is True
    assert session.closed
    assert registry.get(session.id) is None
    assert registry.close(session.id) is False
