"""
Shared pytest fixtures for unit and API tests.

Uses FakeListChatModel for deterministic LLM replies and an in-memory post
repository, so no API keys or MongoDB server are needed.
"""

from __future__ import annotations

import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from pathlib import Path  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from langchain_core.language_models.fake_chat_models import FakeListChatModel  # noqa: E402

from app.api.v1.deps import get_description_service, get_image_store, get_post_repository  # noqa: E402
from app.core.config import Settings, get_settings  # noqa: E402
from app.main import app  # noqa: E402
from app.services.description_service import DescriptionService  # noqa: E402
from app.services.image_store import ImageStore  # noqa: E402
from tests.helpers import (  # noqa: E402
    FALLBACK,
    GENERATED_DETAIL,
    GENERATED_SUMMARY,
    InMemoryPostRepository,
)


@pytest.fixture
def repository() -> InMemoryPostRepository:
    return InMemoryPostRepository()


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def image_store(upload_dir: Path) -> ImageStore:
    return ImageStore(upload_dir)


@pytest.fixture
def mock_llm() -> FakeListChatModel:
    """Replies with the summary first, then the detailed description."""
    return FakeListChatModel(responses=[GENERATED_SUMMARY, GENERATED_DETAIL])


@pytest.fixture
def describer(mock_llm: FakeListChatModel) -> DescriptionService:
    return DescriptionService(mock_llm, fallback=FALLBACK)


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    public_dir = tmp_path / "public"
    public_dir.mkdir()
    (public_dir / "index.html").write_text("<html><body>posts</body></html>", encoding="utf-8")
    return Settings(
        upload_dir=tmp_path / "uploads",
        public_dir=public_dir,
        description_fallback=FALLBACK,
    )


@pytest.fixture
def client(repository, image_store, describer, test_settings):
    """Test client wired to in-memory collaborators."""
    app.dependency_overrides[get_post_repository] = lambda: repository
    app.dependency_overrides[get_image_store] = lambda: image_store
    app.dependency_overrides[get_description_service] = lambda: describer
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()
