"""
LLM backends able to summarize transcripts and answer questions about them.
"""

from typing import Any, Dict, Optional

from langchain.chat_models import init_chat_model
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

from tabsummarizer.config import config
from tabsummarizer.core.prompts import (
    SUMMARY_SYSTEM_TEMPLATE,
    SUMMARY_HUMAN_TEMPLATE,
    FOLLOW_UP_SYSTEM_TEMPLATE,
    FOLLOW_UP_HUMAN_TEMPLATE,
)
from tabsummarizer.models.schemas import BackendKind, ConversationContext, SummarySettings
from tabsummarizer.utils.error_handling import SummaryBackendError
from tabsummarizer.utils.logger import logging


class SummaryBackend:
    """Base class for the interchangeable AI backends."""

    kind: BackendKind
    model_provider: str

    def api_key(self, settings: SummarySettings) -> Optional[str]:
        """Key passed to the provider SDK."""
        raise NotImplementedError

    def model_name(self, settings: SummarySettings) -> str:
        return settings.model or config.default_model(self.kind)

    def _chat_model(self, settings: SummarySettings):
        api_key = self.api_key(settings)
        if not api_key:
            raise SummaryBackendError(
                self.kind,
                f"API token for {self.kind.value} is missing. Add it to your preferences.",
            )
        return init_chat_model(
            model=self.model_name(settings),
            model_provider=self.model_provider,
            temperature=settings.creativity,
            api_key=api_key,
        )

    async def _complete(self, prompt: ChatPromptTemplate, variables: Dict[str, Any],
                        settings: SummarySettings) -> str:
        logging.info(f"Sending request to {self.kind.value} ({self.model_name(settings)})")
        try:
            chain = prompt | self._chat_model(settings) | StrOutputParser()
            text = await chain.ainvoke(variables)
        except SummaryBackendError:
            raise
        except Exception as e:
            logging.error(f"{self.kind.value} backend failed: {str(e)}")
            raise SummaryBackendError(self.kind, str(e), cause=e) from e

        if not text or not text.strip():
            raise SummaryBackendError(self.kind, "The backend returned an empty response.")
        return text.strip()

    async def summarize(self, transcript: str, settings: SummarySettings) -> str:
        """
        Summarize transcript text.

        Args:
            transcript: Full transcript text
            settings: Preferences of the current run

        Returns:
            Markdown summary
        """
        prompt = ChatPromptTemplate.from_messages([
            ("system", SUMMARY_SYSTEM_TEMPLATE),
            ("human", SUMMARY_HUMAN_TEMPLATE),
        ])
        return await self._complete(
            prompt,
            {"transcript": transcript, "language": settings.language},
            settings,
        )

    async def answer(self, question: str, context: ConversationContext,
                     settings: SummarySettings) -> str:
        """
        Answer a follow-up question from the transcript and the previous answer.

        Args:
            question: User question
            context: Transcript plus the latest displayed answer
            settings: Preferences of the current run

        Returns:
            Markdown answer
        """
        prompt = ChatPromptTemplate.from_messages([
            ("system", FOLLOW_UP_SYSTEM_TEMPLATE),
            ("human", FOLLOW_UP_HUMAN_TEMPLATE),
        ])
        return await self._complete(
            prompt,
            {
                "transcript": context.transcript.text,
                "previous_answer": context.latest_answer,
                "question": question,
                "language": settings.language,
            },
            settings,
        )


class AssistantBackend(SummaryBackend):
    """First-party backend; the key comes from the application, not the user."""

    kind = BackendKind.ASSISTANT
    model_provider = "groq"

    def api_key(self, settings: SummarySettings) -> Optional[str]:
        return config.GROQ_API_KEY

    def model_name(self, settings: SummarySettings) -> str:
        return settings.model or config.ASSISTANT_MODEL


class OpenAIBackend(SummaryBackend):
    kind = BackendKind.OPENAI
    model_provider = "openai"

    def api_key(self, settings: SummarySettings) -> Optional[str]:
        return settings.openai_api_token


class AnthropicBackend(SummaryBackend):
    kind = BackendKind.ANTHROPIC
    model_provider = "anthropic"

    def api_key(self, settings: SummarySettings) -> Optional[str]:
        return settings.anthropic_api_token


BACKENDS = {
    BackendKind.ASSISTANT: AssistantBackend,
    BackendKind.OPENAI: OpenAIBackend,
    BackendKind.ANTHROPIC: AnthropicBackend,
}


def get_backend(kind: BackendKind) -> SummaryBackend:
    """Instantiate the backend selected in the preferences."""
    return BACKENDS[BackendKind(kind)]()
