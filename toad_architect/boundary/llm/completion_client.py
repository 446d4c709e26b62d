"""
Completion provider client.

Wraps the Gemini chat model (via LangChain) for conversation replies and
provider-backed summaries, and the google-genai client for credential checks.
Raw provider failures are classified into the CompletionProviderError family.

Dependencies: langchain_google_genai, langchain_core, google.genai, toad_architect.core
System role: Completion provider boundary
"""

import json
import logging
import time
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from google import genai
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import ValidationError as PydanticValidationError

from toad_architect.boundary.llm.prompts import (
    SUMMARIZATION_PROMPT,
    SUMMARY_CONTEXT_TEMPLATE,
    build_system_prompt,
)
from toad_architect.configs.settings import Settings
from toad_architect.core.context_window import (
    CONTEXT_TAIL_SIZE,
    CONTEXT_WINDOW_LIMIT,
    needs_trimming,
    trim_context_window,
)
from toad_architect.core.exceptions import (
    CompletionProviderError,
    InvalidCredentialsError,
    QuotaExceededError,
    RateLimitError,
)
from toad_architect.models.session import (
    ConversationSummary,
    Message,
    MessageRole,
    utcnow,
)

logger = logging.getLogger(__name__)

NO_RESPONSE = "No response generated"


def classify_provider_error(exc: Exception) -> CompletionProviderError:
    """
    Map a raw provider failure onto the provider error taxonomy.

    Matching is on the exception text and is case-sensitive. Errors that
    are already classified are returned unchanged.

    Args:
        exc: Exception raised while talking to the provider

    Returns:
        CompletionProviderError: RateLimitError, QuotaExceededError,
            InvalidCredentialsError, or a generic CompletionProviderError
    """
    if isinstance(exc, CompletionProviderError):
        return exc

    raw = str(exc)
    details = {"provider_message": raw, "error_type": type(exc).__name__}

    if "rate limit" in raw:
        return RateLimitError("Rate limit exceeded. Please try again in a moment.", details)
    if "quota" in raw:
        return QuotaExceededError(
            "API quota exceeded. Please check your provider account.", details
        )
    if "invalid_api_key" in raw or "API_KEY_INVALID" in raw:
        return InvalidCredentialsError(
            "Invalid API key. Please check your configuration.", details
        )
    return CompletionProviderError("Failed to generate AI response. Please try again.", details)


def to_langchain_messages(messages: Sequence[Message]) -> list[BaseMessage]:
    """Convert conversation turns to LangChain chat messages."""
    converted: list[BaseMessage] = []
    for message in messages:
        if message.role == MessageRole.USER:
            converted.append(HumanMessage(content=message.content))
        else:
            converted.append(AIMessage(content=message.content))
    return converted


def _content_text(content: Any) -> str:
    """Flatten a chat model response content (str or list of parts) to text."""
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


def fallback_summary() -> ConversationSummary:
    """Summary used when the provider cannot produce one."""
    return ConversationSummary(
        key_points=["Conversation in progress"],
        current_phase=1,
        next_steps=["Continue discussion"],
        last_updated=utcnow(),
    )


def parse_summary(response_text: str) -> ConversationSummary:
    """
    Parse the provider's JSON summary.

    Handles various formats (markdown code blocks, etc).

    Raises:
        ValueError: If the text is not a valid summary document
    """
    text = response_text
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0]
    elif "```" in text:
        text = text.split("```")[1].split("```")[0]

    data = json.loads(text.strip())
    if not isinstance(data, dict):
        raise ValueError("Summary is not a JSON object")

    try:
        last_updated = datetime.fromisoformat(str(data.get("lastUpdated")))
    except ValueError:
        last_updated = utcnow()

    return ConversationSummary(
        key_points=[str(point) for point in data.get("keyPoints") or []],
        current_phase=int(data.get("currentPhase") or 1),
        next_steps=[str(step) for step in data.get("nextSteps") or []],
        last_updated=last_updated,
    )


class CompletionClient:
    """
    Gemini completion provider.

    Chat models and the google-genai client are created lazily so the
    application can start without credentials; the health check reports
    the provider as unavailable instead.

    Usage:
        client = CompletionClient.from_settings(get_settings())
        reply = await client.generate_response(history, custom_instructions)
    """

    def __init__(
        self,
        model_id: str = "gemini-2.5-flash",
        api_key: str | None = None,
        temperature: float = 0.7,
        max_output_tokens: int = 2000,
        summary_temperature: float = 0.3,
        summary_max_output_tokens: int = 1000,
        context_window_limit: int = CONTEXT_WINDOW_LIMIT,
        context_tail_size: int = CONTEXT_TAIL_SIZE,
        chat_model: Any = None,
        summary_model: Any = None,
        google_client: Any = None,
    ) -> None:
        """
        Initialize completion client.

        Args:
            model_id: Gemini model identifier
            api_key: Google API key (falls back to GOOGLE_API_KEY)
            temperature: Reply sampling temperature
            max_output_tokens: Reply token budget
            summary_temperature: Summary sampling temperature
            summary_max_output_tokens: Summary token budget
            context_window_limit: Prompt size above which history is trimmed
            context_tail_size: Recent history entries kept after trimming
            chat_model: Pre-built chat model (tests)
            summary_model: Pre-built summary model (tests)
            google_client: Pre-built google-genai client (tests)
        """
        self.model_id = model_id
        self._api_key = api_key
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.summary_temperature = summary_temperature
        self.summary_max_output_tokens = summary_max_output_tokens
        self.context_window_limit = context_window_limit
        self.context_tail_size = context_tail_size
        self._chat_model = chat_model
        self._summary_model = summary_model
        self._google_client = google_client

    @classmethod
    def from_settings(cls, settings: Settings) -> "CompletionClient":
        """Build a client from application settings."""
        completion = settings.completion
        return cls(
            model_id=completion.model,
            api_key=completion.api_key,
            temperature=completion.temperature,
            max_output_tokens=completion.max_output_tokens,
            summary_temperature=completion.summary_temperature,
            summary_max_output_tokens=completion.summary_max_output_tokens,
            context_window_limit=settings.session.context_window_limit,
            context_tail_size=settings.session.context_tail_size,
        )

    def _build_model(self, temperature: float, max_output_tokens: int) -> ChatGoogleGenerativeAI:
        kwargs: dict[str, Any] = {
            "model": self.model_id,
            "temperature": temperature,
            "max_output_tokens": max_output_tokens,
        }
        if self._api_key:
            kwargs["google_api_key"] = self._api_key
        return ChatGoogleGenerativeAI(**kwargs)

    @property
    def chat_model(self):
        """Chat model used for conversation replies."""
        if self._chat_model is None:
            self._chat_model = self._build_model(self.temperature, self.max_output_tokens)
        return self._chat_model

    @property
    def summary_model(self):
        """Chat model used for conversation summaries."""
        if self._summary_model is None:
            self._summary_model = self._build_model(
                self.summary_temperature, self.summary_max_output_tokens
            )
        return self._summary_model

    @property
    def google_client(self) -> genai.Client:
        """google-genai client used for credential checks."""
        if self._google_client is None:
            if self._api_key:
                self._google_client = genai.Client(api_key=self._api_key)
            else:
                self._google_client = genai.Client()
        return self._google_client

    async def build_prompt(
        self,
        messages: Sequence[Message],
        custom_instructions: str | None = None,
        correlation_id: str | None = None,
    ) -> list[BaseMessage]:
        """
        Assemble the prompt sent to the chat model.

        System prompt first, then the full history. When the assembled list
        exceeds the context-window limit, a provider-backed summary is
        inserted after the system prompt and only the most recent turns
        are kept.

        Args:
            messages: Full conversation history, newest last
            custom_instructions: Optional session-level guidance
            correlation_id: Correlation ID for logs

        Returns:
            list[BaseMessage]: Prompt messages
        """
        prompt: list[BaseMessage] = [
            SystemMessage(content=build_system_prompt(custom_instructions)),
            *to_langchain_messages(messages),
        ]

        if not needs_trimming(prompt, self.context_window_limit):
            return prompt

        summary = await self.summarize_conversation(messages, correlation_id=correlation_id)
        summary_entry = SystemMessage(
            content=SUMMARY_CONTEXT_TEMPLATE.format(
                summary=summary.model_dump_json(by_alias=True)
            )
        )
        trimmed = trim_context_window(prompt, summary_entry, self.context_tail_size)
        logger.info(
            "Trimmed completion context window",
            extra={
                "correlation_id": correlation_id,
                "original_size": len(prompt),
                "trimmed_size": len(trimmed),
            },
        )
        return trimmed

    async def generate_response(
        self,
        messages: Sequence[Message],
        custom_instructions: str | None = None,
        correlation_id: str | None = None,
    ) -> str:
        """
        Generate the assistant reply for a conversation.

        Args:
            messages: Full conversation history including the new user message
            custom_instructions: Optional session-level guidance
            correlation_id: Correlation ID for logs

        Returns:
            str: Generated reply text

        Raises:
            CompletionProviderError: Classified provider failure
        """
        start_time = time.perf_counter()

        try:
            prompt = await self.build_prompt(messages, custom_instructions, correlation_id)
            response = await self.chat_model.ainvoke(prompt)
            reply = _content_text(response.content) or NO_RESPONSE
        except Exception as e:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            logger.error(
                f"Completion provider error: {type(e).__name__}: {e}",
                extra={"correlation_id": correlation_id, "duration_ms": duration_ms},
            )
            raise classify_provider_error(e) from e

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        logger.info(
            "AI response generated",
            extra={
                "correlation_id": correlation_id,
                "response_length": len(reply),
                "duration_ms": duration_ms,
            },
        )
        return reply

    async def summarize_conversation(
        self,
        messages: Sequence[Message],
        correlation_id: str | None = None,
    ) -> ConversationSummary:
        """
        Ask the provider for a structured summary of the conversation.

        Never raises: provider or parse failures yield the fallback summary.

        Args:
            messages: Conversation history to summarize
            correlation_id: Correlation ID for logs

        Returns:
            ConversationSummary: Parsed or fallback summary
        """
        conversation_text = "\n\n".join(
            f"{message.role.value}: {message.content}" for message in messages
        )
        prompt = [
            SystemMessage(content=SUMMARIZATION_PROMPT),
            HumanMessage(content=f"Please summarize this conversation:\n\n{conversation_text}"),
        ]

        try:
            response = await self.summary_model.ainvoke(prompt)
        except Exception as e:
            logger.error(
                f"Error generating conversation summary: {type(e).__name__}: {e}",
                extra={"correlation_id": correlation_id},
            )
            return fallback_summary()

        response_text = _content_text(response.content) or "{}"
        try:
            return parse_summary(response_text)
        except (json.JSONDecodeError, ValueError, TypeError, PydanticValidationError) as e:
            logger.warning(
                f"Error parsing conversation summary: {e}",
                extra={"correlation_id": correlation_id},
            )
            logger.debug(f"Raw summary response: {response_text}")
            return fallback_summary()

    async def validate_credentials(self) -> bool:
        """
        Check that the provider accepts the configured credentials.

        Returns:
            bool: True if a model listing succeeds, False otherwise
        """
        try:
            await self.google_client.aio.models.list(config={"page_size": 1})
            return True
        except Exception as e:
            logger.error(f"Completion provider credential check failed: {type(e).__name__}: {e}")
            return False
