"""
Resolution of the active browser tab into a video reference.
"""

import re
from typing import Iterable, Optional
from urllib.parse import urlparse, parse_qs

from tabsummarizer.models.schemas import BrowserTab, VideoReference, YOUTUBE_WATCH_PREFIX
from tabsummarizer.utils.error_handling import InvalidVideoReference, NotAVideoTab, NoActiveVideoTab
from tabsummarizer.utils.logger import logging

VIDEO_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{11}$")
VALID_HOSTS = {
    "youtube.com",
    "www.youtube.com",
    "m.youtube.com",
    "music.youtube.com",
    "gaming.youtube.com",
    "youtu.be",
}


class YouTubeIdValidator:
    """Validates YouTube watch URLs and bare video identifiers."""

    def is_valid_id(self, value: str) -> bool:
        return bool(VIDEO_ID_PATTERN.match(value or ""))

    def extract_id(self, url: str) -> Optional[str]:
        parsed = urlparse(url)
        if parsed.hostname not in VALID_HOSTS:
            return None
        if parsed.hostname == "youtu.be":
            return parsed.path.strip("/").split("/")[0] or None
        values = parse_qs(parsed.query).get("v")
        if values:
            return values[0]
        segments = [segment for segment in parsed.path.split("/") if segment]
        if len(segments) >= 2 and segments[0] in ("embed", "v", "shorts", "live"):
            return segments[1]
        return None

    def is_valid_url(self, value: str) -> bool:
        video_id = self.extract_id(value or "")
        return video_id is not None and self.is_valid_id(video_id)


class ActiveVideoResolver:
    """Picks the active tab and turns it into a VideoReference."""

    def __init__(self, validator: Optional[YouTubeIdValidator] = None):
        self.validator = validator or YouTubeIdValidator()

    def resolve(self, tabs: Iterable[BrowserTab]) -> VideoReference:
        """
        Resolve the video open in the active tab.

        Args:
            tabs: Open tabs as reported by the host

        Returns:
            VideoReference for the active tab

        Raises:
            NoActiveVideoTab: no tab is active
            NotAVideoTab: the active tab is not a YouTube watch page
            InvalidVideoReference: the video identifier failed validation
        """
        active_tab = next((tab for tab in tabs if tab.active), None)
        if active_tab is None:
            raise NoActiveVideoTab()

        url = active_tab.url
        if not url.startswith(YOUTUBE_WATCH_PREFIX):
            logging.info(f"Active tab is not a YouTube video: {url}")
            raise NotAVideoTab()

        if not self.validator.is_valid_url(url) and not self.validator.is_valid_id(url):
            raise InvalidVideoReference()

        video_id = self.validator.extract_id(url) or url[len(YOUTUBE_WATCH_PREFIX):].split("&")[0]
        logging.info(f"Resolved active tab to video {video_id}")
        return VideoReference(video_id=video_id, url=url)
