"""Financial assistant operations built on the AI client."""

from typing import Optional

from finanza.assistant.client import WEB_SEARCH_TOOL, AIClient, AIClientConfig, AIClientError
from finanza.assistant.models import AIResponse
from finanza.assistant.prompts import (
    advice_prompt,
    build_advice_context,
    build_summary,
    chat_system_prompt,
    fallback_message,
    quick_analysis_prompt,
    search_prompt,
)
from finanza.config import AssistantConfig
from finanza.models.transaction import Transaction
from finanza.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)

# Answer length for the three-tip quick analysis
QUICK_MAX_TOKENS = 300


class FinancialAssistant:
    """Answers questions about the user's finances.

    The answer text is returned verbatim for display. Quick analysis, chat
    and advice degrade to a localized apology when the request fails;
    search lets the error propagate so the caller can report it.
    """

    def __init__(
        self,
        client: AIClient,
        config: Optional[AssistantConfig] = None,
        lang: str = "es",
        currency: str = "€",
    ):
        """Initialize assistant.

        Args:
            client: AI client used for all requests.
            config: Assistant settings (advice model, thinking budget).
            lang: Answer language ("es" or "en").
            currency: Currency symbol included in the context.
        """
        self.client = client
        self.config = config or AssistantConfig()
        self.lang = lang
        self.currency = currency

    @classmethod
    def create(
        cls,
        config: AssistantConfig,
        lang: str = "es",
        currency: str = "€",
    ) -> "FinancialAssistant":
        """Create an assistant with a client built from settings."""
        client = AIClient(config=AIClientConfig.from_assistant_config(config))
        return cls(client, config, lang, currency)

    @property
    def is_available(self) -> bool:
        return self.config.enabled and self.client.is_available

    def quick_analysis(self, transactions: list[Transaction]) -> str:
        """Three short saving tips from a totals summary."""
        summary = build_summary(transactions, self.lang, self.currency)
        try:
            with LogContext(logger, "quick analysis", transactions=len(transactions)):
                response = self.client.send_message(
                    quick_analysis_prompt(summary, self.lang),
                    max_tokens=QUICK_MAX_TOKENS,
                )
        except AIClientError:
            return fallback_message("quick_error", self.lang)
        return response.text or fallback_message("quick_empty", self.lang)

    def chat(self, message: str, transactions: list[Transaction]) -> str:
        """Answer a question with the full transaction list as context."""
        try:
            with LogContext(logger, "chat", transactions=len(transactions)):
                response = self.client.send_message(
                    message,
                    system_prompt=chat_system_prompt(transactions, self.lang, self.currency),
                )
        except AIClientError:
            return fallback_message("chat_error", self.lang)
        return response.text

    def complex_advice(self, query: str, transactions: list[Transaction]) -> str:
        """Detailed strategy using extended thinking."""
        context = build_advice_context(transactions, self.currency)
        try:
            with LogContext(logger, "complex advice", model=self.config.advice_model):
                response = self.client.send_message(
                    advice_prompt(query, context, self.lang),
                    model=self.config.advice_model,
                    thinking_budget=self.config.thinking_budget,
                )
        except AIClientError:
            return fallback_message("advice_error", self.lang)
        return response.text or fallback_message("advice_empty", self.lang)

    def search(self, query: str) -> AIResponse:
        """Answer with live web search; the response carries its sources.

        Raises:
            AIClientError: If the request fails.
        """
        with LogContext(logger, "search"):
            return self.client.send_message(
                search_prompt(query, self.lang),
                tools=[WEB_SEARCH_TOOL],
            )
