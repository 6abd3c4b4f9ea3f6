"""Text generation adapters."""

from contentforge.adapters.text.base import TextProvider, TextRequest, TextResult
from contentforge.adapters.text.openai import OpenAITextProvider
from contentforge.adapters.text.stub import StubTextProvider

__all__ = [
    "TextProvider",
    "TextRequest",
    "TextResult",
    "OpenAITextProvider",
    "StubTextProvider",
]
