"""
Tests for pipeline state transitions.
"""

import pytest

from tabsummarizer.core.state_machine import (
    Activated,
    FollowUpAnswered,
    FollowUpFailed,
    FollowUpStarted,
    InvalidTransition,
    MetadataFetched,
    RunCancelled,
    StepFailed,
    SummaryProduced,
    TranscriptFetched,
    VideoResolved,
    transition,
)
from tabsummarizer.models.schemas import (
    NotificationStyle,
    PipelineStage,
    PipelineState,
    Transcript,
    VideoReference,
)


@pytest.fixture
def ready_state(video_metadata):
    state = transition(PipelineState(), Activated())
    state = transition(state, VideoResolved(video=VideoReference(video_id="abc123", url=video_metadata.video_url)))
    state = transition(state, MetadataFetched(metadata=video_metadata))
    state = transition(state, TranscriptFetched(transcript=Transcript(text="hello world transcript", language="en")))
    return transition(state, SummaryProduced(summary="Summary: talk about X."))


def test_happy_path(ready_state, video_metadata):
    assert ready_state.stage == PipelineStage.READY
    assert ready_state.metadata == video_metadata
    assert ready_state.summary == "Summary: talk about X."
    assert ready_state.is_loading is False
    assert ready_state.context.latest_answer == "Summary: talk about X."


def test_activation_resets_everything(ready_state):
    state = transition(ready_state, Activated())

    assert state == PipelineState(stage=PipelineStage.RESOLVING, is_loading=True)


def test_summarizing_is_loading(video_metadata):
    state = transition(PipelineState(), Activated())
    state = transition(state, VideoResolved(video=VideoReference(video_id="abc123", url=video_metadata.video_url)))
    state = transition(state, MetadataFetched(metadata=video_metadata))
    state = transition(state, TranscriptFetched(transcript=Transcript(text="t", language="en")))

    assert state.stage == PipelineStage.SUMMARIZING
    assert state.is_loading is True
    assert state.notification.style == NotificationStyle.ANIMATED


def test_failure_records_stage():
    state = transition(PipelineState(), Activated())
    state = transition(state, StepFailed(kind="no_active_video_tab", title="Error", message="Open a video"))

    assert state.stage == PipelineStage.FAILED
    assert state.failure.stage == PipelineStage.RESOLVING
    assert state.is_loading is False
    assert state.notification.style == NotificationStyle.FAILURE


def test_out_of_order_event_rejected(video_metadata):
    state = transition(PipelineState(), Activated())

    with pytest.raises(InvalidTransition):
        transition(state, MetadataFetched(metadata=video_metadata))


def test_cancel_only_active_runs(ready_state):
    state = transition(PipelineState(), Activated())
    assert transition(state, RunCancelled()).stage == PipelineStage.CANCELLED

    with pytest.raises(InvalidTransition):
        transition(ready_state, RunCancelled())


def test_follow_up_self_loop(ready_state):
    state = transition(ready_state, FollowUpStarted(question="Why?"))
    assert state.stage == PipelineStage.READY
    assert state.is_loading is True

    state = transition(state, FollowUpAnswered(answer="Because."))
    assert state.stage == PipelineStage.READY
    assert state.summary == "Because."
    assert state.transcript == ready_state.transcript


def test_follow_up_failure_keeps_summary(ready_state):
    state = transition(ready_state, FollowUpStarted(question="Why?"))
    state = transition(state, FollowUpFailed(title="Something went wrong", message="timeout"))

    assert state.summary == "Summary: talk about X."
    assert state.is_loading is False
    assert state.notification.message == "timeout"
