"""Anthropic API client wrapper with rate limiting and retries."""

import os
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from finanza.assistant.models import AIResponse, AIUsageStats, Source
from finanza.config import AssistantConfig
from finanza.utils.logging_config import get_logger

logger = get_logger(__name__)

# Server-side web search tool offered to search-grounded requests
WEB_SEARCH_TOOL = {"type": "web_search_20250305", "name": "web_search", "max_uses": 5}

REQUEST_TIMEOUT = 120.0


class AIClientError(Exception):
    """Base exception for AI client errors."""

    pass


class APIKeyNotFoundError(AIClientError):
    """Raised when the API key is not set."""

    pass


class RateLimitError(AIClientError):
    """Raised when the provider keeps rate limiting after all retries."""

    pass


@dataclass
class AIClientConfig:
    """Configuration for the AI client.

    Attributes:
        api_key_env: Environment variable name for API key.
        model: Model to use for requests.
        max_tokens: Maximum tokens for response.
        requests_per_minute: Rate limit.
        retry_attempts: Number of attempts per request.
        retry_delay: Initial delay between retries (exponential backoff).
    """

    api_key_env: str = "ANTHROPIC_API_KEY"
    model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 1024
    requests_per_minute: int = 20
    retry_attempts: int = 3
    retry_delay: float = 1.0

    @classmethod
    def from_assistant_config(cls, config: AssistantConfig) -> "AIClientConfig":
        return cls(
            api_key_env=config.api_key_env,
            model=config.model,
            max_tokens=config.max_tokens,
            requests_per_minute=config.requests_per_minute,
        )


def extract_response(response: Any) -> tuple[str, list[Source]]:
    """Collect text blocks and cited web sources from a Messages API response.

    Thinking and tool blocks are skipped; only the answer text is returned.
    """
    texts = []
    sources: list[Source] = []
    seen_urls = set()

    for block in response.content or []:
        if getattr(block, "type", None) != "text":
            continue
        texts.append(block.text)
        for citation in getattr(block, "citations", None) or []:
            url = getattr(citation, "url", None)
            if not url or url in seen_urls:
                continue
            seen_urls.add(url)
            sources.append(Source(title=getattr(citation, "title", None) or url, url=url))

    return "".join(texts).strip(), sources


@dataclass
class AIClient:
    """Wrapper for the Anthropic API.

    This client provides:
    - Lazy initialization (only connects when first used)
    - Rate limiting to avoid API throttling
    - Automatic retry with exponential backoff
    - Token usage tracking
    """

    config: AIClientConfig = field(default_factory=AIClientConfig)
    _client: Any = field(default=None, init=False, repr=False)
    _request_count: int = field(default=0, init=False)
    _request_window_start: float = field(default=0.0, init=False)
    _initialized: bool = field(default=False, init=False)

    usage_stats: AIUsageStats = field(default_factory=AIUsageStats)

    @property
    def is_available(self) -> bool:
        """Check if the client can be initialized (API key exists)."""
        return bool(os.environ.get(self.config.api_key_env))

    def _ensure_initialized(self) -> None:
        """Lazily initialize the Anthropic client."""
        if self._initialized:
            return

        api_key = os.environ.get(self.config.api_key_env)
        if not api_key:
            raise APIKeyNotFoundError(
                f"API key not found in environment variable: {self.config.api_key_env}"
            )

        try:
            import anthropic

            self._client = anthropic.Anthropic(api_key=api_key)
            self._initialized = True
            logger.info(f"AI client initialized with model: {self.config.model}")
        except ImportError as err:
            raise AIClientError(
                "anthropic package not installed. Run: pip install anthropic"
            ) from err

    def _wait_for_rate_limit(self) -> None:
        """Wait if necessary to respect rate limits."""
        current_time = time.time()

        # Reset window if it's been more than a minute
        if current_time - self._request_window_start > 60:
            self._request_count = 0
            self._request_window_start = current_time

        if self._request_count >= self.config.requests_per_minute:
            wait_time = 60 - (current_time - self._request_window_start)
            if wait_time > 0:
                logger.info(f"Rate limit reached, waiting {wait_time:.1f}s")
                time.sleep(wait_time)
                self._request_count = 0
                self._request_window_start = time.time()

    def send_message(
        self,
        user_prompt: str,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        tools: Optional[list[dict[str, Any]]] = None,
        thinking_budget: Optional[int] = None,
    ) -> AIResponse:
        """Send a single-turn message and return the answer.

        Args:
            user_prompt: The user message.
            system_prompt: Optional system prompt.
            model: Model override for this request.
            max_tokens: Answer token limit override.
            tools: Server tools offered to the model (e.g. web search).
            thinking_budget: Enables extended thinking with this token budget.

        Returns:
            AIResponse with the answer text and any cited sources.

        Raises:
            APIKeyNotFoundError: If the API key is not set.
            RateLimitError: If still rate limited after all retries.
            AIClientError: If the request fails after all retries.
        """
        self._ensure_initialized()
        self._wait_for_rate_limit()

        request: dict[str, Any] = {
            "model": model or self.config.model,
            "max_tokens": max_tokens or self.config.max_tokens,
            "messages": [{"role": "user", "content": user_prompt}],
            "timeout": REQUEST_TIMEOUT,
        }
        if system_prompt:
            request["system"] = system_prompt
        if tools:
            request["tools"] = tools
        if thinking_budget:
            request["thinking"] = {"type": "enabled", "budget_tokens": thinking_budget}
            # The answer budget comes on top of the thinking budget
            request["max_tokens"] = request["max_tokens"] + thinking_budget

        return self._make_request(request)

    def _make_request(self, request: dict[str, Any]) -> AIResponse:
        """Make an API request with retry logic."""
        delay = self.config.retry_delay
        rate_limited = False

        for attempt in range(self.config.retry_attempts):
            try:
                response = self._client.messages.create(**request)
            except Exception as e:
                error_msg = str(e).lower()
                rate_limited = "rate" in error_msg or "429" in error_msg
                overloaded = "overloaded" in error_msg or "529" in error_msg

                if attempt < self.config.retry_attempts - 1:
                    reason = "Rate limited" if rate_limited else "API overloaded" if overloaded else "Request failed"
                    logger.warning(f"{reason}: {e}, retrying in {delay}s")
                    time.sleep(delay)
                    delay *= 2
                    continue

                self.usage_stats.failed_requests += 1
                if rate_limited:
                    raise RateLimitError(f"Rate limited after {attempt + 1} attempts: {e}") from e
                raise AIClientError(f"Request failed after {attempt + 1} attempts: {e}") from e

            self._request_count += 1
            input_tokens = response.usage.input_tokens
            output_tokens = response.usage.output_tokens
            self.usage_stats.add_request(input_tokens, output_tokens)

            text, sources = extract_response(response)
            logger.debug(f"Request completed: {input_tokens} in, {output_tokens} out")
            return AIResponse(
                text=text,
                sources=sources,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
            )

        raise AIClientError("Request failed: no attempts configured")

    def get_usage_summary(self) -> str:
        """Return a human-readable usage summary."""
        stats = self.usage_stats
        return (
            f"AI Usage Summary:\n"
            f"  Total requests: {stats.total_requests}\n"
            f"  Failed requests: {stats.failed_requests}\n"
            f"  Input tokens: {stats.total_input_tokens:,}\n"
            f"  Output tokens: {stats.total_output_tokens:,}"
        )
