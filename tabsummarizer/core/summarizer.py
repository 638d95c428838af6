"""
Module for summarizing transcripts using LLM backends.
"""

from typing import Callable, Optional

from tabsummarizer.core.backends import SummaryBackend, get_backend
from tabsummarizer.core.cancellation import CancellationToken
from tabsummarizer.models.schemas import BackendKind, SummarySettings, Transcript
from tabsummarizer.utils.helpers import truncate_text
from tabsummarizer.utils.logger import logging


class TranscriptSummarizer:
    """Class to handle transcript summarization operations."""

    def __init__(self, backend_factory: Callable[[BackendKind], SummaryBackend] = get_backend):
        """
        Initialize the summarizer.

        Args:
            backend_factory: Returns the backend for a BackendKind
        """
        self.backend_factory = backend_factory

    async def summarize(
        self,
        transcript: Transcript,
        settings: SummarySettings,
        token: Optional[CancellationToken] = None,
    ) -> str:
        """
        Summarize a transcript with the backend chosen in the settings.

        Exactly one backend request is made.

        Args:
            transcript: Transcript to summarize
            settings: Preferences of the current run
            token: Cancellation token of the calling run

        Returns:
            Summary text
        """
        if token is not None:
            token.raise_if_cancelled()

        backend = self.backend_factory(settings.backend)
        text = truncate_text(transcript.text, settings.max_transcript_chars, suffix="")
        if len(text) < len(transcript.text):
            logging.info(f"Transcript truncated from {len(transcript.text)} to {len(text)} chars")

        logging.info(f"Generating summary with {settings.backend.value} backend")
        return await backend.summarize(text, settings)
