"""
Data models for the tab summarizer application.
"""
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

YOUTUBE_WATCH_PREFIX = "https://www.youtube.com/watch?v="


class BackendKind(str, Enum):
    """AI backends that can produce a summary."""
    ASSISTANT = "assistant"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


class PipelineStage(str, Enum):
    """Macro-states of a pipeline run."""
    IDLE = "idle"
    RESOLVING = "resolving"
    FETCHING_METADATA = "fetching_metadata"
    FETCHING_TRANSCRIPT = "fetching_transcript"
    SUMMARIZING = "summarizing"
    READY = "ready"
    CANCELLED = "cancelled"
    FAILED = "failed"


ACTIVE_STAGES = (
    PipelineStage.RESOLVING,
    PipelineStage.FETCHING_METADATA,
    PipelineStage.FETCHING_TRANSCRIPT,
    PipelineStage.SUMMARIZING,
)


class NotificationStyle(str, Enum):
    """Toast-like notification styles shown by the presentation layer."""
    ANIMATED = "animated"
    SUCCESS = "success"
    FAILURE = "failure"


class BrowserTab(BaseModel):
    """One open browser tab as reported by the host."""
    url: str
    active: bool = False
    title: Optional[str] = None

    model_config = {"frozen": True}


class VideoReference(BaseModel):
    """Identifier and canonical watch URL of a single YouTube video."""
    video_id: str
    url: str

    model_config = {"frozen": True}

    @property
    def watch_url(self) -> str:
        return f"{YOUTUBE_WATCH_PREFIX}{self.video_id}"


class VideoMetadata(BaseModel):
    """Display metadata of a video."""
    title: str
    channel_name: str
    channel_url: str = ""
    thumbnail_url: str = ""
    publish_date: str = ""
    duration: str = ""
    view_count: str = ""
    video_url: str

    model_config = {"frozen": True}


class Transcript(BaseModel):
    """Caption text of a video resolved in one language."""
    text: str
    language: str

    model_config = {"frozen": True}


class ConversationContext(BaseModel):
    """Transcript plus the latest summary or answer shown to the user."""
    transcript: Transcript
    latest_answer: str

    model_config = {"frozen": True}


class SummarySettings(BaseModel):
    """User preferences read once at the start of a run."""
    backend: BackendKind = BackendKind.ASSISTANT
    creativity: float = 0.5
    model: Optional[str] = None
    openai_api_token: Optional[str] = None
    anthropic_api_token: Optional[str] = None
    language: str = "en"
    fallback_languages: List[str] = Field(default_factory=list)
    max_transcript_chars: Optional[int] = None

    model_config = {"frozen": True}

    @field_validator("creativity")
    def validate_creativity(cls, v):
        if v < 0 or v > 2:
            raise ValueError("creativity must be between 0 and 2")
        return v

    def transcript_languages(self) -> List[str]:
        """Requested language followed by fallbacks, without duplicates."""
        languages = []
        for code in [self.language, *self.fallback_languages]:
            code = (code or "").strip()
            if code and code not in languages:
                languages.append(code)
        return languages


class Notification(BaseModel):
    """User-visible message attached to the pipeline state."""
    style: NotificationStyle
    title: str
    message: Optional[str] = None

    model_config = {"frozen": True}


class PipelineFailure(BaseModel):
    """Why a run ended in the failed state."""
    stage: PipelineStage
    kind: str
    message: str

    model_config = {"frozen": True}

    @property
    def is_empty_result(self) -> bool:
        return self.kind == "no_transcript"


class PipelineState(BaseModel):
    """Read-only snapshot of everything the presentation layer shows."""
    stage: PipelineStage = PipelineStage.IDLE
    video: Optional[VideoReference] = None
    metadata: Optional[VideoMetadata] = None
    transcript: Optional[Transcript] = None
    summary: Optional[str] = None
    is_loading: bool = False
    failure: Optional[PipelineFailure] = None
    notification: Optional[Notification] = None

    model_config = {"frozen": True}

    @property
    def context(self) -> Optional[ConversationContext]:
        if self.transcript is None or self.summary is None:
            return None
        return ConversationContext(transcript=self.transcript, latest_answer=self.summary)
