"""Shared pytest fixtures."""

import asyncio
import shutil
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable

import pytest

from clarity.search.models import PaperSummary, Query
from clarity.utils.config import Settings, reset_settings


@pytest.fixture(scope="session", autouse=True)
def backup_env_file():
    """Backup .env file during test session to prevent pollution."""
    env_file = Path(".env")
    backup_file = Path(".env.test_backup")

    if env_file.exists():
        shutil.copy(env_file, backup_file)
        env_file.unlink()

    yield

    if backup_file.exists():
        shutil.move(backup_file, env_file)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Never share the settings singleton between tests."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def make_papers() -> Callable[..., list[PaperSummary]]:
    """Factory for lists of distinct papers."""

    def _make(count: int, prefix: str = "paper") -> list[PaperSummary]:
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        return [
            PaperSummary(
                id=f"{prefix}.{i:05d}v1",
                title=f"{prefix.title()} Paper {i}",
                abstract=f"Abstract for {prefix} paper {i}",
                authors=(f"Author {i}",),
                published_at=base + timedelta(days=i),
                updated_at=base + timedelta(days=i),
                primary_category="cs.AI",
                categories=frozenset({"cs.AI"}),
            )
            for i in range(count)
        ]

    return _make


class ControlledFetcher:
    """Fetcher whose completions the test resolves by hand, in any order."""

    def __init__(self) -> None:
        self.calls: list[tuple[Query, asyncio.Future]] = []

    async def search(self, query: Query) -> list[PaperSummary]:
        future = asyncio.get_running_loop().create_future()
        self.calls.append((query, future))
        return await future

    def succeed(self, index: int, results: list[PaperSummary]) -> None:
        self.calls[index][1].set_result(results)

    def fail(self, index: int, error: Exception) -> None:
        self.calls[index][1].set_exception(error)


@pytest.fixture
def controlled_fetcher() -> ControlledFetcher:
    return ControlledFetcher()
