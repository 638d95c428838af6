"""
Orchestration of the fetch-and-summarize pipeline.

One activation resolves the active tab, fetches metadata, fetches the
transcript and summarizes it, strictly in that order. Re-activating cancels
the run in flight; every result is checked against the current cancellation
token before it may touch the state, so a superseded run can never overwrite
a newer one.
"""

import asyncio
from typing import Callable, List, Optional

from tabsummarizer.config import config
from tabsummarizer.core.browser import DevToolsTabSource
from tabsummarizer.core.cancellation import CancellationToken
from tabsummarizer.core.follow_up import FollowUpHandler
from tabsummarizer.core.metadata import VideoMetadataFetcher
from tabsummarizer.core.resolver import ActiveVideoResolver
from tabsummarizer.core.state_machine import (
    Activated,
    Event,
    FollowUpAnswered,
    FollowUpCancelled,
    FollowUpFailed,
    FollowUpStarted,
    MetadataFetched,
    RunCancelled,
    StepFailed,
    SummaryProduced,
    TranscriptFetched,
    VideoResolved,
    transition,
)
from tabsummarizer.core.summarizer import TranscriptSummarizer
from tabsummarizer.core.transcript import TranscriptFetcher
from tabsummarizer.models.schemas import ACTIVE_STAGES, PipelineStage, PipelineState, SummarySettings
from tabsummarizer.utils.error_handling import (
    NoTranscriptAvailable,
    PipelineError,
    log_diagnostic_info,
    to_notification,
)
from tabsummarizer.utils.logger import logging

StateListener = Callable[[PipelineState], None]


class PipelineController:
    """Runs the pipeline and owns the state shown by the presentation layer."""

    def __init__(
        self,
        tab_source=None,
        resolver: Optional[ActiveVideoResolver] = None,
        metadata_fetcher: Optional[VideoMetadataFetcher] = None,
        transcript_fetcher: Optional[TranscriptFetcher] = None,
        summarizer: Optional[TranscriptSummarizer] = None,
        follow_up: Optional[FollowUpHandler] = None,
        settings_provider: Callable[[], SummarySettings] = config.get_summary_settings,
    ):
        """
        Initialize the controller with its collaborators.

        Args:
            tab_source: Object with an async ``list_tabs(token)`` method
            resolver: Picks the video from the tab list
            metadata_fetcher: Fetches video metadata
            transcript_fetcher: Fetches the transcript with language fallback
            summarizer: Produces the summary
            follow_up: Answers follow-up questions
            settings_provider: Returns the preferences, called once per run
        """
        self.tab_source = tab_source or DevToolsTabSource()
        self.resolver = resolver or ActiveVideoResolver()
        self.metadata_fetcher = metadata_fetcher or VideoMetadataFetcher()
        self.transcript_fetcher = transcript_fetcher or TranscriptFetcher()
        self.summarizer = summarizer or TranscriptSummarizer()
        self.follow_up = follow_up or FollowUpHandler()
        self.settings_provider = settings_provider

        self._state = PipelineState()
        self._token: Optional[CancellationToken] = None
        self._settings: Optional[SummarySettings] = None
        self._listeners: List[StateListener] = []
        self._follow_up_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> PipelineState:
        """Current read-only snapshot."""
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Call ``listener`` with every new snapshot.

        Returns:
            Function removing the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def is_current(self, token: Optional[CancellationToken]) -> bool:
        return token is not None and token is self._token and not token.cancelled

    def _apply(self, token: Optional[CancellationToken], event: Event) -> bool:
        """Apply an event if it comes from the current run. Returns whether it was applied."""
        if not self.is_current(token):
            logging.info(f"Discarding {type(event).__name__} from stale run {token!r}")
            return False

        self._state = transition(self._state, event)
        logging.debug(f"Pipeline stage: {self._state.stage.value}")
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logging.exception("State listener failed")
        return True

    def _cancel_current(self) -> None:
        token = self._token
        if token is None:
            return
        if self._state.stage in ACTIVE_STAGES:
            self._apply(token, RunCancelled())
            logging.info(f"Cancelling run {token.run_id} at stage {self._state.stage.value}")
        elif self._follow_up_pending():
            self._apply(token, FollowUpCancelled())
            logging.info(f"Cancelling follow-up question of run {token.run_id}")
        self._cancel_follow_up()
        token.cancel()
        self._token = None
        self._settings = None

    def _follow_up_pending(self) -> bool:
        return self._follow_up_task is not None and not self._follow_up_task.done()

    def _cancel_follow_up(self) -> None:
        if self._follow_up_pending():
            self._follow_up_task.cancel()
        self._follow_up_task = None

    def activate(self) -> asyncio.Task:
        """
        Start a new run, cancelling any run in flight.

        Must be called from a running event loop.

        Returns:
            Task executing the run
        """
        self._cancel_current()

        token = CancellationToken()
        self._token = token
        self._apply(token, Activated())
        logging.info(f"Starting run {token.run_id}")

        task = asyncio.create_task(self._run(token))
        token.bind(task)
        return task

    async def run(self) -> PipelineState:
        """Start a run and wait for it to finish."""
        await self.activate()
        return self.state

    def teardown(self) -> None:
        """Cancel any work in flight; the view showing the state is gone."""
        self._cancel_current()

    async def _run(self, token: CancellationToken) -> None:
        try:
            settings = self.settings_provider()
            if self.is_current(token):
                self._settings = settings
            log_diagnostic_info({"run": token.run_id, "backend": settings.backend.value,
                                 "languages": settings.transcript_languages()})

            tabs = await self.tab_source.list_tabs(token)
            video = self.resolver.resolve(tabs)
            if not self._apply(token, VideoResolved(video=video)):
                return

            metadata = await self.metadata_fetcher.fetch(video, token)
            if not self._apply(token, MetadataFetched(metadata=metadata)):
                return

            transcript = await self.transcript_fetcher.fetch(video, settings.transcript_languages(), token)
            if transcript is None:
                raise NoTranscriptAvailable()
            if not self._apply(token, TranscriptFetched(transcript=transcript)):
                return

            summary = await self.summarizer.summarize(transcript, settings, token)
            if self._apply(token, SummaryProduced(summary=summary)):
                logging.info(f"Run {token.run_id} ready")
        except asyncio.CancelledError:
            logging.info(f"Run {token.run_id} cancelled")
            raise
        except Exception as e:
            self._fail(token, e)

    def _fail(self, token: CancellationToken, error: Exception) -> None:
        stage = self._state.stage
        if isinstance(error, NoTranscriptAvailable):
            logging.warning(f"Run {token.run_id}: no transcript available")
        elif isinstance(error, PipelineError):
            logging.error(f"Run {token.run_id} failed while {stage.value}: {str(error)}")
        else:
            logging.exception(f"Run {token.run_id} failed unexpectedly while {stage.value}")

        notification = to_notification(error)
        kind = error.kind if isinstance(error, PipelineError) else "unexpected"
        self._apply(token, StepFailed(
            kind=kind,
            title=notification.title,
            message=notification.message or "",
        ))

    async def ask_follow_up(self, question: str,
                            on_answered: Optional[Callable[[], None]] = None) -> Optional[str]:
        """
        Answer a question about the current video.

        Only the transcript already held by the controller is used. On failure
        the displayed summary is kept and a failure notification is shown.

        Args:
            question: User question
            on_answered: Called after a successful answer (closes the question form)

        Returns:
            The answer, or None when ignored, failed or superseded
        """
        question = (question or "").strip()
        context = self._state.context
        if (not question or context is None or self._state.stage != PipelineStage.READY
                or not self.is_current(self._token)):
            logging.warning("Ignoring follow-up question: no summarized video")
            return None

        token = self._token
        settings = self._settings
        # A newer question supersedes the one still outstanding
        self._cancel_follow_up()
        self._apply(token, FollowUpStarted(question=question))
        task = asyncio.create_task(self.follow_up.ask(question, context, settings, token))
        self._follow_up_task = task
        try:
            new_context = await task
        except asyncio.CancelledError:
            if task.cancelled():
                logging.info(f"Follow-up question cancelled: {question}")
                return None
            raise
        except Exception as e:
            if task is not self._follow_up_task:
                logging.info(f"Discarding error of superseded question: {str(e)}")
                return None
            self._follow_up_task = None
            logging.error(f"Follow-up question failed: {str(e)}")
            notification = to_notification(e)
            self._apply(token, FollowUpFailed(title=notification.title, message=notification.message or ""))
            return None

        if task is not self._follow_up_task:
            logging.info(f"Discarding answer to superseded question: {question}")
            return None
        self._follow_up_task = None
        if not self._apply(token, FollowUpAnswered(answer=new_context.latest_answer)):
            return None
        if on_answered is not None:
            on_answered()
        return new_context.latest_answer
