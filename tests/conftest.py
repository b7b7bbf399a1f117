"""Pytest bootstrap and shared fixtures.

The ``pytest`` console script can run with a sys.path that excludes the
``src`` directory. Ensure ``import homefs`` resolves to the local package.
"""

import asyncio
import sys
from pathlib import Path

import pytest

SRC_ROOT = str(Path(__file__).resolve().parent.parent / "src")
if SRC_ROOT not in sys.path:
    sys.path.insert(0, SRC_ROOT)

from homefs.api_server.api import create_api_app  # noqa: E402


def run(coro):
    return asyncio.run(coro)


async def _collect(results):
    return [item async for item in results]


def collect(results):
    """Drains an async iterator into a list."""
    return run(_collect(results))


@pytest.fixture
def home(tmp_path):
    """
    A small home directory:

        docs/report.txt
        docs/notes.md
        docs/sub/report2.txt
        music/
        readme
    """
    root = tmp_path.resolve() / "home"
    (root / "docs" / "sub").mkdir(parents=True)
    (root / "music").mkdir()
    (root / "docs" / "report.txt").write_text("quarterly numbers", encoding="utf-8")
    (root / "docs" / "notes.md").write_text("# notes", encoding="utf-8")
    (root / "docs" / "sub" / "report2.txt").write_text("more numbers", encoding="utf-8")
    (root / "readme").write_text("hello", encoding="utf-8")
    return root


@pytest.fixture
def client(home):
    from fastapi.testclient import TestClient

    app = create_api_app(home, search_pacing=0)
    with TestClient(app) as test_client:
        yield test_client
