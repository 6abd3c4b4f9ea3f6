"""Base interface for text generation providers."""

from abc import abstractmethod
from dataclasses import dataclass

from contentforge.adapters.base import FieldErrors, ProviderAdapter
from contentforge.domain.enums import ContentType, TextLength, Tone

PROMPT_MIN_LENGTH = 10
PROMPT_MAX_LENGTH = 2000

# Target word count per length bucket
LENGTH_WORDS: dict[str, int] = {
    TextLength.SHORT: 200,
    TextLength.MEDIUM: 500,
    TextLength.LONG: 1000,
}


@dataclass
class TextRequest:
    """Request for text generation."""

    prompt: str
    content_type: str
    tone: str
    length: str


@dataclass
class TextResult:
    """Result from text generation."""

    text: str
    model: str
    prompt_tokens: int
    completion_tokens: int
    tokens_used: int
    cost: float


class TextProvider(ProviderAdapter):
    """Abstract base class for text generation providers.

    Implementations:
    - OpenAITextProvider: Chat completions via OpenAI API
    - StubTextProvider: Returns canned markdown for local development
    """

    def validate(self, request: TextRequest) -> None:
        errors = FieldErrors()
        errors.check_length("prompt", request.prompt, PROMPT_MIN_LENGTH, PROMPT_MAX_LENGTH)
        errors.check_choice("contentType", request.content_type, [c.value for c in ContentType])
        errors.check_choice("tone", request.tone, [t.value for t in Tone])
        errors.check_choice("length", request.length, [length.value for length in TextLength])
        errors.raise_if_any()

    @staticmethod
    def estimate_cost(prompt_tokens: int, completion_tokens: int) -> float:
        """GPT-4o list pricing: $5 per 1M input tokens, $15 per 1M output tokens."""
        return (prompt_tokens / 1_000_000) * 5 + (completion_tokens / 1_000_000) * 15

    @abstractmethod
    async def submit(self, request: TextRequest) -> TextResult:
        """Generate text for the request and return it inline."""
        ...
