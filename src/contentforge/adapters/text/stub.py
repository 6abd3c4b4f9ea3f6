"""Stub text provider for local development."""

from contentforge.adapters.text.base import TextProvider, TextRequest, TextResult
from contentforge.logging import get_logger

logger = get_logger(__name__)


class StubTextProvider(TextProvider):
    """Stub provider that returns canned markdown without external calls."""

    key_setting = "OPENAI_API_KEY"

    @property
    def name(self) -> str:
        return "stub"

    def require_api_key(self) -> str:
        return "stub"

    async def submit(self, request: TextRequest) -> TextResult:
        logger.info("stub_text_generation", content_type=request.content_type)

        text = f"## {request.content_type.title()}\n\n{request.prompt}\n\n#contentforge"
        prompt_tokens = len(request.prompt.split()) + 40
        completion_tokens = len(text.split())

        return TextResult(
            text=text,
            model="stub",
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            tokens_used=prompt_tokens + completion_tokens,
            cost=self.estimate_cost(prompt_tokens, completion_tokens),
        )
