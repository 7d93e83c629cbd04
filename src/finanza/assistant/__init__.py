"""Optional language-model assistant.

Example usage:
    from finanza.assistant import FinancialAssistant

    assistant = FinancialAssistant.create(config.assistant, lang="en", currency="$")
    if assistant.is_available:
        print(assistant.quick_analysis(transactions))
"""

from finanza.assistant.advisor import FinancialAssistant
from finanza.assistant.client import (
    AIClient,
    AIClientConfig,
    AIClientError,
    APIKeyNotFoundError,
    RateLimitError,
)
from finanza.assistant.models import AIResponse, AIUsageStats, Source

__all__ = [
    "FinancialAssistant",
    "AIClient",
    "AIClientConfig",
    "AIClientError",
    "APIKeyNotFoundError",
    "RateLimitError",
    "AIResponse",
    "AIUsageStats",
    "Source",
]
