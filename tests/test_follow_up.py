"""
Tests for the follow-up question handler.
"""

import asyncio
import pytest
from unittest.mock import MagicMock, AsyncMock

from tabsummarizer.core.follow_up import FollowUpHandler
from tabsummarizer.models.schemas import BackendKind, ConversationContext, Transcript
from tabsummarizer.utils.error_handling import SummaryBackendError


@pytest.fixture
def context():
    return ConversationContext(
        transcript=Transcript(text="hello world transcript", language="en"),
        latest_answer="Summary: talk about X.",
    )


def test_answer_replaces_latest_answer(backend, context, settings):
    handler = FollowUpHandler(backend_factory=lambda kind: backend)

    new_context = asyncio.run(handler.ask("Who speaks?", context, settings))

    assert new_context.latest_answer == "First answer."
    assert new_context.transcript == context.transcript
    assert context.latest_answer == "Summary: talk about X."
    backend.answer.assert_awaited_once_with("Who speaks?", context, settings)


def test_backend_error_propagates(context, settings):
    backend = MagicMock()
    backend.answer = AsyncMock(side_effect=SummaryBackendError(BackendKind.OPENAI, "timeout"))
    handler = FollowUpHandler(backend_factory=lambda kind: backend)

    with pytest.raises(SummaryBackendError):
        asyncio.run(handler.ask("Who speaks?", context, settings))
