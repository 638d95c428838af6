"""
Tests for the DevTools tab source.
"""

import asyncio
import pytest
import requests
from unittest.mock import patch, MagicMock

from tabsummarizer.core.browser import DevToolsTabSource
from tabsummarizer.utils.error_handling import BrowserExtensionUnavailable


@patch('tabsummarizer.core.browser.requests.get')
def test_list_tabs_marks_first_page_active(mock_get):
    response = MagicMock()
    response.json.return_value = [
        {"type": "service_worker", "url": "chrome-extension://abc/sw.js"},
        {"type": "page", "url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ", "title": "Video"},
        {"type": "page", "url": "https://example.com", "title": "Example"},
    ]
    mock_get.return_value = response

    tabs = asyncio.run(DevToolsTabSource("http://127.0.0.1:9222").list_tabs())

    mock_get.assert_called_once_with("http://127.0.0.1:9222/json/list", timeout=2.0)
    assert [tab.url for tab in tabs] == ["https://www.youtube.com/watch?v=dQw4w9WgXcQ", "https://example.com"]
    assert [tab.active for tab in tabs] == [True, False]


@patch('tabsummarizer.core.browser.requests.get')
def test_unreachable_browser(mock_get):
    mock_get.side_effect = requests.ConnectionError("Connection refused")

    with pytest.raises(BrowserExtensionUnavailable):
        asyncio.run(DevToolsTabSource("http://127.0.0.1:9222").list_tabs())
