"""OpenAI text generation provider implementation."""

from typing import Any

import httpx

from contentforge.adapters.text.base import LENGTH_WORDS, TextProvider, TextRequest, TextResult
from contentforge.logging import get_logger

logger = get_logger(__name__)

TONE_INSTRUCTIONS: dict[str, str] = {
    "professional": "Write in a professional, authoritative tone suitable for business contexts.",
    "casual": "Write in a friendly, conversational tone that feels approachable and relatable.",
    "humorous": "Write with wit, humor, and lightheartedness. Include tasteful jokes where appropriate.",
    "inspirational": "Write in a motivating, uplifting tone that inspires action and positive thinking.",
    "educational": "Write in a clear, informative tone that teaches and explains concepts accessibly.",
}

CONTENT_TYPE_INSTRUCTIONS: dict[str, str] = {
    "POST": "Create a concise, engaging social media post. Include relevant hashtags at the end.",
    "STORY": "Create compelling story content optimized for social media stories format. Keep it punchy and visual.",
    "REEL": "Write a script for a short-form video reel with a strong hook, main content, and call-to-action.",
    "VIDEO": "Write a detailed video script with a clear intro, main content sections, and an outro with CTA.",
    "BLOG": "Write a well-structured blog post with headings (##), subheadings (###), and clear paragraphs.",
}


class OpenAITextProvider(TextProvider):
    """OpenAI API provider for GPT chat completions."""

    key_setting = "OPENAI_API_KEY"

    def __init__(
        self,
        api_key: str | None,
        http_client: httpx.AsyncClient,
        model: str = "gpt-4o",
        base_url: str = "https://api.openai.com/v1",
    ) -> None:
        super().__init__(api_key, http_client)
        self.model = model
        self.base_url = base_url

    @property
    def name(self) -> str:
        return "openai"

    def build_messages(self, request: TextRequest) -> list[dict[str, str]]:
        """Build the system and user messages for a request."""
        max_words = LENGTH_WORDS.get(request.length, 500)
        tone = TONE_INSTRUCTIONS.get(request.tone, request.tone)
        guideline = CONTENT_TYPE_INSTRUCTIONS.get(request.content_type, "Create engaging content.")

        system_prompt = (
            "You are ContentForge AI, an expert content creator specializing in "
            "high-quality digital content.\n"
            f"Tone: {tone}\n"
            "Format: Respond with clean, well-formatted markdown."
        )
        user_prompt = (
            f"Create {request.content_type} content about the following topic:\n\n"
            f'"{request.prompt}"\n\n'
            "Guidelines:\n"
            f"- {guideline}\n"
            f"- Target length: approximately {max_words} words\n"
            "- Use markdown formatting where appropriate"
        )
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

    async def submit(self, request: TextRequest) -> TextResult:
        """Generate text using the chat completions endpoint."""
        api_key = self.require_api_key()
        max_words = LENGTH_WORDS.get(request.length, 500)

        payload: dict[str, Any] = {
            "model": self.model,
            "messages": self.build_messages(request),
            "max_tokens": max_words * 3,
            "temperature": 0.7,
        }

        logger.debug(
            "openai_request",
            model=self.model,
            content_type=request.content_type,
            length=request.length,
        )

        response = await self.http_client.post(
            f"{self.base_url}/chat/completions",
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            json=payload,
        )
        self.check_response(response)
        data = response.json()

        choices = data.get("choices") or [{}]
        text = (choices[0].get("message") or {}).get("content") or ""
        usage = data.get("usage") or {}
        prompt_tokens = usage.get("prompt_tokens", 0)
        completion_tokens = usage.get("completion_tokens", 0)
        total_tokens = usage.get("total_tokens", 0)

        logger.info(
            "openai_response",
            model=self.model,
            tokens_used=total_tokens,
            finish_reason=choices[0].get("finish_reason"),
        )

        return TextResult(
            text=text,
            model=data.get("model", self.model),
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            tokens_used=total_tokens,
            cost=self.estimate_cost(prompt_tokens, completion_tokens),
        )

    async def health_check(self) -> bool:
        """Check if OpenAI API is accessible."""
        if not await super().health_check():
            return False

        try:
            response = await self.http_client.get(
                f"{self.base_url}/models",
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.error("openai_health_check_failed", error=str(e))
            return False
