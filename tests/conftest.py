"""Shared fixtures: fake gateways that never touch the network."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from seo_writer.models.search import SearchResultItem


class FakeLLMClient:
    """Records prompts and returns a canned completion (or raises)."""

    def __init__(self, response: str = "", error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def complete(self, system: str, user: str, temperature: float = 0.7, json_mode: bool = False) -> str:
        self.calls.append({"system": system, "user": user, "temperature": temperature, "json_mode": json_mode})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def make_llm() -> Callable[..., FakeLLMClient]:
    return FakeLLMClient


@pytest.fixture
def search_results() -> list[SearchResultItem]:
    return [
        SearchResultItem(rank=i, title=f"Result {i}", url=f"https://example.com/{i}")
        for i in range(1, 4)
    ]
