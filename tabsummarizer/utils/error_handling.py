"""
Centralized error handling for the application.

Every failure a pipeline step can produce is a ``PipelineError``. The
controller catches them at the step boundary and turns them into a
``Notification`` for the presentation layer.
"""

import json
from typing import Optional, Dict, Any

from tabsummarizer.config import config
from tabsummarizer.models.schemas import BackendKind, Notification, NotificationStyle
from tabsummarizer.utils.logger import logging

ALERT_TITLE = "Something went wrong"

NO_TRANSCRIPT_GUIDANCE = (
    "Failed to get video subtitles. Please make sure that:\n\n"
    "1. The video has subtitles (automatic or manually added)\n"
    "2. Subtitles are available in one of the configured languages\n"
    "3. The video is not a live stream or premiere"
)


class PipelineError(Exception):
    """Base class for errors surfaced to the user."""

    kind = "error"
    title = ALERT_TITLE

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause

    @property
    def display_message(self) -> str:
        return str(self)


class BrowserExtensionUnavailable(PipelineError):
    """The host cannot list browser tabs."""

    kind = "browser_unavailable"
    title = "Error"

    def __init__(self, message: str = "Browser tab access is required. "
                 "Start the browser with remote debugging enabled.",
                 cause: Optional[BaseException] = None):
        super().__init__(message, cause)


class NoActiveVideoTab(PipelineError):
    """No active tab, or the active tab is not a YouTube video."""

    kind = "no_active_video_tab"
    title = "Error"

    def __init__(self, message: str = "Please open a YouTube video in the active browser tab",
                 cause: Optional[BaseException] = None):
        super().__init__(message, cause)


class InvalidVideoReference(PipelineError):
    """The active tab URL does not carry a valid video identifier."""

    kind = "invalid_video_reference"
    title = "Invalid URL/ID"

    def __init__(self, message: str = "The passed URL/ID is invalid, please check your input.",
                 cause: Optional[BaseException] = None):
        super().__init__(message, cause)


class NotAVideoTab(NoActiveVideoTab, InvalidVideoReference):
    """The active tab is open on something other than a YouTube watch page."""

    kind = "not_a_video_tab"
    title = "Error"


class MetadataFetchError(PipelineError):
    """The video information could not be retrieved."""

    kind = "metadata_fetch_error"

    @property
    def display_message(self) -> str:
        return f"Error fetching video data: {self}"


class TranscriptFetchError(PipelineError):
    """Captions exist but could not be retrieved."""

    kind = "transcript_fetch_error"

    @property
    def display_message(self) -> str:
        return f"Error fetching video transcript: {self}"


class NoTranscriptAvailable(PipelineError):
    """No captions in any attempted language. An expected result, not a crash."""

    kind = "no_transcript"

    def __init__(self, message: str = NO_TRANSCRIPT_GUIDANCE,
                 cause: Optional[BaseException] = None):
        super().__init__(message, cause)


class SummaryBackendError(PipelineError):
    """The AI backend failed to produce text."""

    kind = "summary_backend_error"

    def __init__(self, backend: BackendKind, message: str,
                 cause: Optional[BaseException] = None):
        super().__init__(message, cause)
        self.backend = backend

    @property
    def display_message(self) -> str:
        return f"{self.backend.value} backend error: {self}"


def to_notification(error: BaseException) -> Notification:
    """
    Convert an error into a failure notification.

    Args:
        error: Error raised by a pipeline step

    Returns:
        Notification with a stage-specific title and message
    """
    if isinstance(error, PipelineError):
        return Notification(
            style=NotificationStyle.FAILURE,
            title=error.title,
            message=error.display_message,
        )
    return Notification(
        style=NotificationStyle.FAILURE,
        title=ALERT_TITLE,
        message=f"Unexpected error: {error}",
    )


def log_diagnostic_info(context: Dict[str, Any]):
    """
    Log diagnostic information for debugging.

    Args:
        context: Dictionary of diagnostic information
    """
    if not config.DEBUG:
        return

    try:
        logging.info(f"Diagnostic info: {json.dumps(context, default=str)}")
    except (TypeError, ValueError) as e:
        logging.error(f"Error logging diagnostic info: {str(e)}")
