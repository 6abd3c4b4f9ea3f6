"""Base interface for video generation providers."""

from abc import abstractmethod
from dataclasses import dataclass

from contentforge.adapters.base import AsyncJobProvider, FieldErrors, JobSubmission

PROMPT_MIN_LENGTH = 10
PROMPT_MAX_LENGTH = 2000

VIDEO_MODELS = ("gen3a_turbo", "gen4_turbo")
VIDEO_RATIOS = ("1280:720", "720:1280", "1104:832", "832:1104")
VIDEO_DURATIONS = (5, 10)

COST_PER_SECOND = 0.05


@dataclass
class VideoRequest:
    """Request for video generation."""

    prompt: str
    model: str
    ratio: str
    duration: int


class VideoProvider(AsyncJobProvider):
    """Abstract base class for video generation providers.

    Video generation is queue-based: ``submit`` returns a task id right away
    and the caller polls until the task reaches a terminal status.

    Implementations:
    - RunwayVideoProvider: Runway image_to_video tasks
    - StubVideoProvider: Simulated task progression for local development
    """

    def validate(self, request: VideoRequest) -> None:
        errors = FieldErrors()
        errors.check_length("prompt", request.prompt, PROMPT_MIN_LENGTH, PROMPT_MAX_LENGTH)
        errors.check_choice("model", request.model, VIDEO_MODELS)
        errors.check_choice("ratio", request.ratio, VIDEO_RATIOS)
        errors.check_choice("duration", request.duration, VIDEO_DURATIONS)
        errors.raise_if_any()

    @staticmethod
    def estimate_cost(duration: int) -> float:
        """Runway pricing: ~$0.05 per generated second."""
        return duration * COST_PER_SECOND

    @abstractmethod
    async def submit(self, request: VideoRequest) -> JobSubmission:
        """Submit a generation task and return its id."""
        ...
