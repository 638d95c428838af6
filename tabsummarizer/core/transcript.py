"""
Module for retrieving video transcripts with language fallback.
"""

import asyncio
from typing import List, Optional, Protocol, Sequence

from youtube_transcript_api import YouTubeTranscriptApi, NoTranscriptFound, TranscriptsDisabled

from tabsummarizer.core.cancellation import CancellationToken
from tabsummarizer.models.schemas import Transcript, VideoReference
from tabsummarizer.utils.error_handling import TranscriptFetchError
from tabsummarizer.utils.logger import logging


class TranscriptLanguageNotFound(Exception):
    """The video has no caption track in the requested language."""

    def __init__(self, video_id: str, language: str):
        super().__init__(f"No transcript in '{language}' for video {video_id}")
        self.video_id = video_id
        self.language = language


class TranscriptsUnavailable(Exception):
    """The video has no caption tracks at all (captions disabled, live stream, premiere)."""


class TranscriptProvider(Protocol):
    def fetch(self, video_id: str, language: str) -> str:
        ...


class YouTubeTranscriptProvider:
    """Caption text from youtube-transcript-api, one language per call."""

    def __init__(self, api: Optional[YouTubeTranscriptApi] = None):
        self.api = api or YouTubeTranscriptApi()

    def fetch(self, video_id: str, language: str) -> str:
        try:
            fetched = self.api.fetch(video_id, languages=[language])
        except NoTranscriptFound as e:
            raise TranscriptLanguageNotFound(video_id, language) from e
        except TranscriptsDisabled as e:
            raise TranscriptsUnavailable(str(e)) from e

        return " ".join(snippet.text.strip() for snippet in fetched if snippet.text.strip())


class TranscriptFetcher:
    """Class to retrieve the best-available transcript of a video."""

    def __init__(self, provider: Optional[TranscriptProvider] = None):
        """
        Initialize the fetcher.

        Args:
            provider: Caption source (defaults to youtube-transcript-api)
        """
        self.provider = provider or YouTubeTranscriptProvider()

    async def fetch(
        self,
        reference: VideoReference,
        languages: Sequence[str],
        token: Optional[CancellationToken] = None,
    ) -> Optional[Transcript]:
        """
        Fetch the transcript in the first language that has captions.

        Args:
            reference: Video to fetch captions for
            languages: Requested language followed by fallbacks, in priority order
            token: Cancellation token of the calling run

        Returns:
            Transcript, or None when no attempted language has captions

        Raises:
            TranscriptFetchError: any failure other than a missing language
        """
        attempted: List[str] = []
        for language in languages:
            if language in attempted:
                continue
            if token is not None:
                token.raise_if_cancelled()
            attempted.append(language)

            logging.info(f"Fetching transcript for {reference.video_id} in '{language}'")
            try:
                text = await asyncio.to_thread(self.provider.fetch, reference.video_id, language)
            except TranscriptLanguageNotFound:
                logging.info(f"No '{language}' transcript for {reference.video_id}")
                continue
            except TranscriptsUnavailable as e:
                logging.info(f"Video {reference.video_id} has no captions: {str(e)}")
                return None
            except Exception as e:
                logging.error(f"Error fetching transcript: {str(e)}")
                raise TranscriptFetchError(str(e), cause=e) from e

            if not text or not text.strip():
                logging.info(f"Empty '{language}' transcript for {reference.video_id}")
                continue

            logging.info(f"Transcript fetched in '{language}' ({len(text)} chars)")
            return Transcript(text=text, language=language)

        logging.warning(f"No transcript for {reference.video_id} in any of {attempted}")
        return None
