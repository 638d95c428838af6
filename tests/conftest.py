"""
Configuration for pytest tests.
"""

import os
import re
import pytest
from unittest.mock import MagicMock, AsyncMock

os.environ.setdefault("GROQ_API_KEY", "test_api_key")
os.environ.setdefault("ENVIRONMENT", "development")

from tabsummarizer.core.follow_up import FollowUpHandler
from tabsummarizer.core.pipeline import PipelineController
from tabsummarizer.core.resolver import ActiveVideoResolver, YouTubeIdValidator
from tabsummarizer.core.summarizer import TranscriptSummarizer
from tabsummarizer.core.transcript import TranscriptFetcher
from tabsummarizer.models.schemas import BackendKind, BrowserTab, SummarySettings, VideoMetadata


class PermissiveValidator(YouTubeIdValidator):
    """Accepts short identifiers used in test URLs."""

    def is_valid_id(self, value: str) -> bool:
        return bool(re.match(r"^[\w-]+$", value or ""))


@pytest.fixture
def test_video_url():
    """Return a test YouTube video URL."""
    return "https://www.youtube.com/watch?v=abc123"


@pytest.fixture
def tabs(test_video_url):
    return [
        BrowserTab(url="https://example.com", active=False),
        BrowserTab(url=test_video_url, active=True),
    ]


@pytest.fixture
def video_metadata(test_video_url):
    return VideoMetadata(
        title="Talk",
        channel_name="Ch",
        channel_url="https://www.youtube.com/channel/UC123",
        thumbnail_url="https://i.ytimg.com/vi/abc123/hqdefault.jpg",
        publish_date="2024-05-01",
        duration="12:34",
        view_count="1,234",
        video_url=test_video_url,
    )


@pytest.fixture
def settings():
    return SummarySettings(
        backend=BackendKind.OPENAI,
        creativity=0.3,
        model="gpt-4o-mini",
        openai_api_token="sk-test",
        language="en",
        fallback_languages=["de", "fr"],
    )


@pytest.fixture
def tab_source(tabs):
    source = MagicMock()
    source.list_tabs = AsyncMock(return_value=tabs)
    return source


@pytest.fixture
def metadata_fetcher(video_metadata):
    fetcher = MagicMock()
    fetcher.fetch = AsyncMock(return_value=video_metadata)
    return fetcher


@pytest.fixture
def transcript_provider():
    provider = MagicMock()
    provider.fetch.return_value = "hello world transcript"
    return provider


@pytest.fixture
def backend():
    fake = MagicMock()
    fake.summarize = AsyncMock(return_value="Summary: talk about X.")
    fake.answer = AsyncMock(side_effect=["First answer.", "Second answer."])
    return fake


@pytest.fixture
def make_controller(tab_source, metadata_fetcher, transcript_provider, backend, settings):
    """Build a controller wired to fake collaborators; keyword arguments replace them."""
    def factory(**overrides):
        parts = {
            "tab_source": tab_source,
            "resolver": ActiveVideoResolver(validator=PermissiveValidator()),
            "metadata_fetcher": metadata_fetcher,
            "transcript_fetcher": TranscriptFetcher(provider=transcript_provider),
            "summarizer": TranscriptSummarizer(backend_factory=lambda kind: backend),
            "follow_up": FollowUpHandler(backend_factory=lambda kind: backend),
            "settings_provider": lambda: settings,
        }
        parts.update(overrides)
        return PipelineController(**parts)

    return factory
