"""
Access to the tabs open in the user's browser.
"""

import asyncio
from typing import List, Optional
from urllib.parse import urljoin

import requests

from tabsummarizer.config import config
from tabsummarizer.core.cancellation import CancellationToken
from tabsummarizer.models.schemas import BrowserTab
from tabsummarizer.utils.error_handling import BrowserExtensionUnavailable
from tabsummarizer.utils.logger import logging


class DevToolsTabSource:
    """
    Lists browser tabs through the Chromium remote debugging endpoint.

    The endpoint returns page targets most recently focused first, so the
    first page is reported as the active tab.
    """

    def __init__(self, base_url: str = config.DEVTOOLS_URL, timeout: float = config.DEVTOOLS_TIMEOUT):
        """
        Initialize the tab source.

        Args:
            base_url: Base URL of the DevTools HTTP endpoint
            timeout: Request timeout in seconds
        """
        self.base_url = base_url
        self.timeout = timeout

    def _url(self, endpoint: str) -> str:
        return urljoin(self.base_url.rstrip("/") + "/", endpoint)

    def list_tabs_sync(self) -> List[BrowserTab]:
        try:
            response = requests.get(self._url("json/list"), timeout=self.timeout)
            response.raise_for_status()
            targets = response.json()
        except (requests.RequestException, ValueError) as e:
            logging.error(f"Browser tab listing failed: {str(e)}")
            raise BrowserExtensionUnavailable(cause=e) from e

        tabs = []
        for target in targets:
            if target.get("type") != "page":
                continue
            tabs.append(BrowserTab(
                url=target.get("url", ""),
                title=target.get("title"),
                active=not tabs,
            ))
        logging.debug(f"Found {len(tabs)} open tabs")
        return tabs

    async def list_tabs(self, token: Optional[CancellationToken] = None) -> List[BrowserTab]:
        """Return the open tabs, most recently focused first."""
        if token is not None:
            token.raise_if_cancelled()
        return await asyncio.to_thread(self.list_tabs_sync)
