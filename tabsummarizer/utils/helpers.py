"""
Helper utility functions for the tab summarizer application.
"""

from datetime import date, datetime
from typing import Optional, Union

from tabsummarizer.models.schemas import PipelineState, VideoMetadata


def format_duration(seconds: Optional[int]) -> str:
    """
    Format a length in seconds as H:MM:SS or M:SS.

    Args:
        seconds: Video length in seconds

    Returns:
        Human-readable duration, empty for unknown lengths
    """
    if seconds is None or seconds < 0:
        return ""
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_view_count(views: Optional[int]) -> str:
    """Format a view count with thousands separators."""
    if views is None:
        return ""
    return f"{int(views):,}"


def format_publish_date(value: Union[date, datetime, str, None]) -> str:
    """Format a publish date as YYYY-MM-DD."""
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return str(value)


def truncate_text(text: str, max_length: Optional[int] = 100, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length (None keeps the whole text)
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if max_length is None or len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix


def compose_detail_markdown(summary: Optional[str], metadata: Optional[VideoMetadata]) -> Optional[str]:
    """Summary text followed by the video thumbnail, as shown in the detail view."""
    if not summary:
        return None
    if metadata is None or not metadata.thumbnail_url:
        return summary
    return f"{summary}\n\n![{metadata.title}]({metadata.thumbnail_url})\n"


def navigation_title(metadata: Optional[VideoMetadata]) -> Optional[str]:
    if metadata is None:
        return None
    return f"{metadata.title} by {metadata.channel_name}"


def metadata_lines(metadata: VideoMetadata):
    """Label/value pairs of the metadata panel."""
    return [
        ("Title", metadata.title),
        ("Channel", f"{metadata.channel_name} ({metadata.channel_url})" if metadata.channel_url else metadata.channel_name),
        ("Published", metadata.publish_date),
        ("Duration", metadata.duration),
        ("Views", metadata.view_count),
        ("Video", metadata.video_url),
    ]


def render_state(state: PipelineState) -> str:
    """Plain-text rendering of a state snapshot for terminals."""
    parts = []
    if state.metadata is not None:
        parts.append("=" * 80)
        parts.append(navigation_title(state.metadata))
        parts.append("=" * 80)
        for label, value in metadata_lines(state.metadata):
            parts.append(f"{label:<10} {value}")
        parts.append("-" * 80)
    markdown = compose_detail_markdown(state.summary, state.metadata)
    if markdown:
        parts.append(markdown)
    if state.failure is not None:
        parts.append(state.failure.message)
    return "\n".join(parts)
