"""
Core functionality for the tab summarizer application.

This package contains the pipeline controller and the components it
sequences: tab resolution, metadata and transcript retrieval, and
summarization through interchangeable LLM backends.
"""
