"""Domain models and business logic."""

from contentforge.domain.enums import (
    ContentStatus,
    ContentType,
    GenerationKind,
    JobStatus,
    TextLength,
    Tone,
)
from contentforge.domain.errors import (
    ContentForgeError,
    ContentPolicyError,
    ErrorCode,
    JobNotFoundError,
    NotFoundError,
    ProviderConfigError,
    ProviderHTTPError,
    RateLimitError,
    UnauthorizedError,
    ValidationError,
)
from contentforge.domain.models import (
    AuthenticatedUser,
    AvatarMetadata,
    GenerationMetadata,
    ImageMetadata,
    JobHandle,
    TextMetadata,
    VideoMetadata,
    VoiceMetadata,
    derive_title,
    describe_kind,
    dump_metadata,
    job_handle_of,
    load_metadata,
)

__all__ = [
    "AuthenticatedUser",
    "AvatarMetadata",
    "ContentForgeError",
    "ContentPolicyError",
    "ContentStatus",
    "ContentType",
    "ErrorCode",
    "GenerationKind",
    "GenerationMetadata",
    "ImageMetadata",
    "JobHandle",
    "JobNotFoundError",
    "JobStatus",
    "NotFoundError",
    "ProviderConfigError",
    "ProviderHTTPError",
    "RateLimitError",
    "TextLength",
    "TextMetadata",
    "Tone",
    "UnauthorizedError",
    "ValidationError",
    "VideoMetadata",
    "VoiceMetadata",
    "derive_title",
    "describe_kind",
    "dump_metadata",
    "job_handle_of",
    "load_metadata",
]
