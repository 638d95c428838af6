"""
Main entry point for the YouTube Tab Summarizer application.
"""

import argparse
import asyncio
from typing import List, Optional

from dotenv import load_dotenv

from tabsummarizer.config import config, parse_creativity, parse_languages
from tabsummarizer.core.pipeline import PipelineController
from tabsummarizer.models.schemas import BackendKind, NotificationStyle, PipelineStage, PipelineState
from tabsummarizer.utils.helpers import render_state
from tabsummarizer.utils.logger import logging


def print_progress(state: PipelineState):
    """Print one line per stage change and every notification."""
    if state.stage in (PipelineStage.RESOLVING, PipelineStage.FETCHING_METADATA,
                       PipelineStage.FETCHING_TRANSCRIPT, PipelineStage.SUMMARIZING):
        print(f"... {state.stage.value.replace('_', ' ')}")
    notification = state.notification
    if notification is not None and notification.style == NotificationStyle.FAILURE:
        print(f"[{notification.title}] {notification.message or ''}")


async def summarize_active_tab(
    backend: Optional[str] = None,
    model: Optional[str] = None,
    creativity: Optional[str] = None,
    language: Optional[str] = None,
    fallback_languages: Optional[str] = None,
    questions: Optional[List[str]] = None,
    interactive: bool = False,
) -> PipelineState:
    """
    Summarize the video in the active browser tab and answer follow-up questions.

    Args:
        backend: AI backend (assistant, openai, anthropic)
        model: Model identifier for the backend
        creativity: Creativity level or temperature
        language: Preferred transcript and summary language
        fallback_languages: Comma separated transcript fallback languages
        questions: Follow-up questions asked after the summary
        interactive: Prompt for follow-up questions on stdin

    Returns:
        Final PipelineState
    """
    def settings_provider():
        return config.get_summary_settings(
            backend=BackendKind(backend) if backend else None,
            model=model,
            creativity=parse_creativity(creativity) if creativity else None,
            language=language,
            fallback_languages=parse_languages(fallback_languages) if fallback_languages else None,
        )

    controller = PipelineController(settings_provider=settings_provider)
    controller.subscribe(print_progress)

    try:
        state = await controller.run()
        print(render_state(state))
        if state.stage != PipelineStage.READY:
            return state

        for question in questions or []:
            print(f"\n> {question}")
            if await controller.ask_follow_up(question):
                print(controller.state.summary)

        while interactive:
            question = await asyncio.to_thread(input, "\nFollow-up question (empty to quit): ")
            if not question.strip():
                break
            if await controller.ask_follow_up(question):
                print(controller.state.summary)

        return controller.state
    finally:
        controller.teardown()


def main():
    """Main function to run the application from command line."""
    parser = argparse.ArgumentParser(description="Summarize the YouTube video open in the active browser tab")
    parser.add_argument("--backend", choices=[kind.value for kind in BackendKind],
                        help="AI backend used for the summary")
    parser.add_argument("--model", help="Model identifier for the selected backend")
    parser.add_argument("--creativity", help="none, low, medium, high, maximum or a temperature")
    parser.add_argument("--language", help="Preferred transcript and summary language code")
    parser.add_argument("--fallback-languages", help="Comma separated transcript fallback languages")
    parser.add_argument("--ask", action="append", default=[], metavar="QUESTION",
                        help="Follow-up question (can be repeated)")
    parser.add_argument("-i", "--interactive", action="store_true",
                        help="Ask follow-up questions interactively")

    args = parser.parse_args()

    # Load environment variables
    load_dotenv()

    logging.info(f"{config.APP_NAME} {config.APP_VERSION}")
    state = asyncio.run(summarize_active_tab(
        backend=args.backend,
        model=args.model,
        creativity=args.creativity,
        language=args.language,
        fallback_languages=args.fallback_languages,
        questions=args.ask,
        interactive=args.interactive,
    ))
    return 0 if state.stage == PipelineStage.READY else 1


if __name__ == "__main__":
    raise SystemExit(main())
