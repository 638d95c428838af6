"""
YouTube Tab Summarizer.

Summarizes the YouTube video open in the active browser tab and answers
follow-up questions about it using one of several LLM backends.
"""

from tabsummarizer.config import config

__version__ = config.APP_VERSION
