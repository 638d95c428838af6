"""
Tests for helper utilities and configuration parsing.
"""

import os
import datetime
import pytest
from unittest.mock import patch

from tabsummarizer.config import config, parse_creativity, parse_languages
from tabsummarizer.models.schemas import (
    BackendKind,
    PipelineFailure,
    PipelineStage,
    PipelineState,
    SummarySettings,
)
from tabsummarizer.utils.error_handling import (
    ALERT_TITLE,
    NoTranscriptAvailable,
    log_diagnostic_info,
    to_notification,
)
from tabsummarizer.utils.logger import logging as logger
from tabsummarizer.utils.helpers import (
    compose_detail_markdown,
    format_duration,
    format_publish_date,
    format_view_count,
    navigation_title,
    render_state,
    truncate_text,
)


@pytest.mark.parametrize("seconds,expected", [
    (0, "0:00"),
    (59, "0:59"),
    (754, "12:34"),
    (3725, "1:02:05"),
    (None, ""),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_format_values():
    assert format_view_count(1234567) == "1,234,567"
    assert format_view_count(None) == ""
    assert format_publish_date(datetime.datetime(2024, 5, 1, 13, 45)) == "2024-05-01"
    assert truncate_text("abcdef", 5) == "ab..."
    assert truncate_text("abcdef", None) == "abcdef"


def test_detail_markdown(video_metadata):
    markdown = compose_detail_markdown("Summary: talk about X.", video_metadata)

    assert markdown.startswith("Summary: talk about X.\n\n")
    assert "![Talk](https://i.ytimg.com/vi/abc123/hqdefault.jpg)" in markdown
    assert compose_detail_markdown(None, video_metadata) is None
    assert navigation_title(video_metadata) == "Talk by Ch"


def test_render_state(video_metadata):
    state = PipelineState(stage=PipelineStage.READY, metadata=video_metadata, summary="Summary: talk about X.")

    text = render_state(state)

    assert "Talk by Ch" in text
    assert "Views      1,234" in text
    assert "Video      https://www.youtube.com/watch?v=abc123" in text
    assert "Summary: talk about X." in text


def test_render_failed_state():
    state = PipelineState(
        stage=PipelineStage.FAILED,
        failure=PipelineFailure(stage=PipelineStage.RESOLVING, kind="no_active_video_tab", message="Open a video"),
    )

    assert render_state(state) == "Open a video"


def test_notifications():
    assert to_notification(NoTranscriptAvailable()).title == ALERT_TITLE
    assert to_notification(ValueError("boom")).message == "Unexpected error: boom"


@pytest.mark.parametrize("value,expected", [
    ("none", 0.0),
    ("High", 0.8),
    ("0.65", 0.65),
    ("", 0.5),
    ("wild", 0.5),
])
def test_parse_creativity(value, expected):
    assert parse_creativity(value) == expected


def test_parse_languages():
    assert parse_languages("en, de,,fr ") == ["en", "de", "fr"]
    assert parse_languages(None) == []


def test_settings_overrides():
    settings = config.get_summary_settings(backend=BackendKind.ANTHROPIC, language="de", model=None)

    assert settings.backend == BackendKind.ANTHROPIC
    assert settings.language == "de"
    assert settings.model == config.AI_MODEL


def test_transcript_languages_deduplicated():
    settings = SummarySettings(language="en", fallback_languages=["de", "en", " ", "fr"])

    assert settings.transcript_languages() == ["en", "de", "fr"]


def test_creativity_range():
    with pytest.raises(ValueError):
        SummarySettings(creativity=3.0)


def test_diagnostics_logged_in_debug():
    with patch.object(config, "DEBUG", True), patch('tabsummarizer.utils.error_handling.logging') as mock_logging:
        log_diagnostic_info({"run": 1, "backend": "openai"})

    mock_logging.info.assert_called_once()
    assert '"backend": "openai"' in mock_logging.info.call_args.args[0]


def test_diagnostics_skipped_outside_debug():
    with patch.object(config, "DEBUG", False), patch('tabsummarizer.utils.error_handling.logging') as mock_logging:
        log_diagnostic_info({"run": 1})

    mock_logging.info.assert_not_called()


def test_initialize_applies_config_log_level():
    previous = logger.level
    try:
        with patch.dict(os.environ), patch.object(config, "LOG_LEVEL", "DEBUG"):
            os.environ.pop("LOG_LEVEL", None)
            config.initialize()
            assert logger.level == 10
    finally:
        logger.setLevel(previous)
