"""
Video metadata retrieval.
"""

import asyncio
from typing import Optional

from pytubefix import YouTube

from tabsummarizer.core.cancellation import CancellationToken
from tabsummarizer.models.schemas import VideoMetadata, VideoReference
from tabsummarizer.utils.error_handling import MetadataFetchError
from tabsummarizer.utils.helpers import format_duration, format_publish_date, format_view_count
from tabsummarizer.utils.logger import logging


class VideoMetadataFetcher:
    """Class to retrieve display metadata for a YouTube video."""

    def get_media_info(self, reference: VideoReference) -> VideoMetadata:
        """Extract metadata from YouTube video."""
        yt = YouTube(reference.watch_url)
        return VideoMetadata(
            title=yt.title,
            channel_name=yt.author,
            channel_url=yt.channel_url or "",
            thumbnail_url=yt.thumbnail_url or "",
            publish_date=format_publish_date(yt.publish_date),
            duration=format_duration(yt.length),
            view_count=format_view_count(yt.views),
            video_url=yt.watch_url or reference.watch_url,
        )

    async def fetch(self, reference: VideoReference, token: Optional[CancellationToken] = None) -> VideoMetadata:
        """
        Fetch metadata for a video. A single attempt, never retried.

        Args:
            reference: Video to look up
            token: Cancellation token of the calling run

        Returns:
            VideoMetadata object
        """
        if token is not None:
            token.raise_if_cancelled()

        logging.info(f"Fetching video data for: {reference.video_id}")
        try:
            metadata = await asyncio.to_thread(self.get_media_info, reference)
        except Exception as e:
            logging.error(f"Error fetching video data: {str(e)}")
            raise MetadataFetchError(str(e), cause=e) from e

        logging.info(f"Video data fetched: {metadata.title}")
        return metadata
