"""Shared fixtures.

Model credentials are blanked before anything reads settings so no test can
reach a real endpoint, and the default database points at a throwaway file.
"""

import os
import tempfile
from pathlib import Path

os.environ["GEMINI_API_KEY"] = ""
os.environ["OPENROUTER_API_KEY"] = ""
os.environ["TELEGRAM_BOT_TOKEN"] = ""
os.environ["LLM_PROVIDER"] = "gemini"
os.environ["DB_PATH"] = str(Path(tempfile.mkdtemp()) / "clearbudget-test.json")

import pytest

from clearbudget.db.repository import TransactionRepository
from clearbudget.llm.errors import NoCredential


class FakeModelClient:
    """Stands in for GeminiClient; replays canned responses and records prompts."""

    def __init__(self, responses=None, error=None, has_credential=True):
        self.responses = list(responses or [])
        self.error = error
        self.has_credential = has_credential
        self.prompts: list[str] = []

    async def query(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.has_credential:
            raise NoCredential("No API key provided")
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


@pytest.fixture
def fake_client():
    return FakeModelClient


@pytest.fixture
def offline_client():
    return FakeModelClient(has_credential=False)


@pytest.fixture
def repository(tmp_path: Path) -> TransactionRepository:
    return TransactionRepository(str(tmp_path / "db.json"))
