"""Base interface for talking-avatar providers."""

from abc import abstractmethod
from dataclasses import dataclass

from contentforge.adapters.base import AsyncJobProvider, FieldErrors, JobSubmission

TEXT_MIN_LENGTH = 10
TEXT_MAX_LENGTH = 3000

AVATAR_IDS = (
    "Anna_public_3_20240108",
    "Tyler_public_incasualsuit_20220721",
    "Daisy_public_inskirt_20220818",
    "Eric_public_pro2_20230608",
)

DIMENSIONS: dict[str, dict[str, int]] = {
    "16:9": {"width": 1280, "height": 720},
    "9:16": {"width": 720, "height": 1280},
    "1:1": {"width": 1080, "height": 1080},
}
DEFAULT_DIMENSION = "16:9"

# Duration is not known up front, so cost assumes a typical clip length
COST_PER_SECOND = 0.08
ASSUMED_DURATION_SECONDS = 30


@dataclass
class AvatarRequest:
    """Request for a talking-avatar video."""

    text: str
    avatar_id: str
    voice_id: str
    dimension: str = DEFAULT_DIMENSION


class AvatarProvider(AsyncJobProvider):
    """Abstract base class for avatar video providers.

    Implementations:
    - HeyGenAvatarProvider: HeyGen v2 video generation
    - StubAvatarProvider: Simulated rendering for local development
    """

    def validate(self, request: AvatarRequest) -> None:
        errors = FieldErrors()
        errors.check_length("text", request.text, TEXT_MIN_LENGTH, TEXT_MAX_LENGTH)
        errors.check_choice("avatarId", request.avatar_id, AVATAR_IDS)
        if not request.voice_id.strip():
            errors.add("voiceId", "Required")
        errors.check_choice("dimension", request.dimension, DIMENSIONS)
        errors.raise_if_any()

    @staticmethod
    def estimate_cost() -> float:
        return COST_PER_SECOND * ASSUMED_DURATION_SECONDS

    @abstractmethod
    async def submit(self, request: AvatarRequest) -> JobSubmission:
        """Submit an avatar render and return its video id."""
        ...
