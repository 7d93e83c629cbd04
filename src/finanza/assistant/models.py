"""Assistant data models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Source:
    """A web page an answer was grounded on."""

    title: str
    url: str


@dataclass
class AIResponse:
    """Text returned by the model plus request accounting.

    Attributes:
        text: Concatenated text blocks of the answer.
        sources: Cited web pages (search-grounded answers only), deduplicated.
        input_tokens: Tokens sent.
        output_tokens: Tokens received.
    """

    text: str
    sources: list[Source] = field(default_factory=list)
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass
class AIUsageStats:
    """Cumulative usage for a session.

    Attributes:
        total_requests: Total API requests made.
        total_input_tokens: Total input tokens used.
        total_output_tokens: Total output tokens used.
        failed_requests: Requests that failed after all retries.
    """

    total_requests: int = 0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    failed_requests: int = 0

    def add_request(self, input_tokens: int, output_tokens: int) -> None:
        """Record a completed request."""
        self.total_requests += 1
        self.total_input_tokens += input_tokens
        self.total_output_tokens += output_tokens
