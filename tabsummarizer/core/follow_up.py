"""
Follow-up questions answered from an already fetched transcript.
"""

from typing import Callable, Optional

from tabsummarizer.core.backends import SummaryBackend, get_backend
from tabsummarizer.core.cancellation import CancellationToken
from tabsummarizer.models.schemas import BackendKind, ConversationContext, SummarySettings
from tabsummarizer.utils.helpers import truncate_text
from tabsummarizer.utils.logger import logging


class FollowUpHandler:
    """Answers questions about a video without fetching anything again."""

    def __init__(self, backend_factory: Callable[[BackendKind], SummaryBackend] = get_backend):
        self.backend_factory = backend_factory

    async def ask(
        self,
        question: str,
        context: ConversationContext,
        settings: SummarySettings,
        token: Optional[CancellationToken] = None,
    ) -> ConversationContext:
        """
        Answer a question and return the replacement context.

        Args:
            question: User question
            context: Transcript and the answer currently displayed
            settings: Preferences of the run that fetched the transcript
            token: Cancellation token of that run

        Returns:
            ConversationContext holding the new answer
        """
        if token is not None:
            token.raise_if_cancelled()

        backend = self.backend_factory(settings.backend)
        transcript = context.transcript
        text = truncate_text(transcript.text, settings.max_transcript_chars, suffix="")
        if len(text) < len(transcript.text):
            transcript = transcript.model_copy(update={"text": text})

        logging.info(f"Processing question: {question}")
        answer = await backend.answer(
            question,
            ConversationContext(transcript=transcript, latest_answer=context.latest_answer),
            settings,
        )
        return context.model_copy(update={"latest_answer": answer})
