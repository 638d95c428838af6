"""
Pipeline state transitions.

``transition`` is a pure function from the current snapshot and an event to
the next snapshot. The controller performs the side effects and feeds the
resulting events back in.
"""

from typing import Dict, Tuple, Type

from pydantic import BaseModel

from tabsummarizer.models.schemas import (
    ACTIVE_STAGES,
    Notification,
    NotificationStyle,
    PipelineFailure,
    PipelineStage,
    PipelineState,
    Transcript,
    VideoMetadata,
    VideoReference,
)


class Event(BaseModel):
    model_config = {"frozen": True}


class Activated(Event):
    pass


class VideoResolved(Event):
    video: VideoReference


class MetadataFetched(Event):
    metadata: VideoMetadata


class TranscriptFetched(Event):
    transcript: Transcript


class SummaryProduced(Event):
    summary: str


class StepFailed(Event):
    """A step ended the run; ``kind`` is ``no_transcript`` for the empty result."""
    kind: str
    title: str
    message: str


class RunCancelled(Event):
    pass


class FollowUpStarted(Event):
    question: str


class FollowUpAnswered(Event):
    answer: str


class FollowUpFailed(Event):
    title: str
    message: str


class FollowUpCancelled(Event):
    pass


class InvalidTransition(ValueError):
    """An event arrived in a stage that cannot accept it."""


ALLOWED: Dict[Type[Event], Tuple[PipelineStage, ...]] = {
    Activated: tuple(PipelineStage),
    VideoResolved: (PipelineStage.RESOLVING,),
    MetadataFetched: (PipelineStage.FETCHING_METADATA,),
    TranscriptFetched: (PipelineStage.FETCHING_TRANSCRIPT,),
    SummaryProduced: (PipelineStage.SUMMARIZING,),
    StepFailed: ACTIVE_STAGES,
    RunCancelled: ACTIVE_STAGES,
    FollowUpStarted: (PipelineStage.READY,),
    FollowUpAnswered: (PipelineStage.READY,),
    FollowUpFailed: (PipelineStage.READY,),
    FollowUpCancelled: (PipelineStage.READY,),
}


def transition(state: PipelineState, event: Event) -> PipelineState:
    """
    Compute the state that follows ``event``.

    Args:
        state: Current snapshot
        event: What just happened

    Returns:
        New snapshot; ``state`` is left untouched

    Raises:
        InvalidTransition: the event is not accepted in the current stage
    """
    if state.stage not in ALLOWED[type(event)]:
        raise InvalidTransition(f"{type(event).__name__} not allowed in stage {state.stage.value}")

    if isinstance(event, Activated):
        # Nothing from a previous run survives a new activation
        return PipelineState(stage=PipelineStage.RESOLVING, is_loading=True)

    if isinstance(event, VideoResolved):
        return state.model_copy(update={
            "stage": PipelineStage.FETCHING_METADATA,
            "video": event.video,
        })

    if isinstance(event, MetadataFetched):
        return state.model_copy(update={
            "stage": PipelineStage.FETCHING_TRANSCRIPT,
            "metadata": event.metadata,
        })

    if isinstance(event, TranscriptFetched):
        return state.model_copy(update={
            "stage": PipelineStage.SUMMARIZING,
            "transcript": event.transcript,
            "notification": Notification(
                style=NotificationStyle.ANIMATED,
                title="Summarizing video",
            ),
        })

    if isinstance(event, SummaryProduced):
        return state.model_copy(update={
            "stage": PipelineStage.READY,
            "summary": event.summary,
            "is_loading": False,
            "notification": Notification(
                style=NotificationStyle.SUCCESS,
                title="Summary ready",
            ),
        })

    if isinstance(event, StepFailed):
        return state.model_copy(update={
            "stage": PipelineStage.FAILED,
            "is_loading": False,
            "failure": PipelineFailure(stage=state.stage, kind=event.kind, message=event.message),
            "notification": Notification(
                style=NotificationStyle.FAILURE,
                title=event.title,
                message=event.message,
            ),
        })

    if isinstance(event, RunCancelled):
        return state.model_copy(update={
            "stage": PipelineStage.CANCELLED,
            "is_loading": False,
            "notification": None,
        })

    if isinstance(event, FollowUpStarted):
        return state.model_copy(update={
            "is_loading": True,
            "notification": Notification(
                style=NotificationStyle.ANIMATED,
                title="Asking follow-up question",
                message=event.question,
            ),
        })

    if isinstance(event, FollowUpAnswered):
        return state.model_copy(update={
            "summary": event.answer,
            "is_loading": False,
            "notification": Notification(
                style=NotificationStyle.SUCCESS,
                title="Answer ready",
            ),
        })

    if isinstance(event, FollowUpFailed):
        # The displayed summary stays as it was
        return state.model_copy(update={
            "is_loading": False,
            "notification": Notification(
                style=NotificationStyle.FAILURE,
                title=event.title,
                message=event.message,
            ),
        })

    if isinstance(event, FollowUpCancelled):
        return state.model_copy(update={
            "is_loading": False,
            "notification": None,
        })

    raise InvalidTransition(f"Unknown event {type(event).__name__}")
