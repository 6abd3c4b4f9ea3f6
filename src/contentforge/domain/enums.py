"""Domain enumerations."""

from enum import StrEnum


class ContentType(StrEnum):
    """Kind of creative artifact a Content record represents."""

    POST = "POST"  # Social post
    STORY = "STORY"
    REEL = "REEL"
    VIDEO = "VIDEO"  # Video script / video
    BLOG = "BLOG"


class ContentStatus(StrEnum):
    """Lifecycle status of a Content record."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class GenerationKind(StrEnum):
    """Modality of a single provider invocation."""

    TEXT = "TEXT"
    IMAGE = "IMAGE"
    VOICE = "VOICE"
    VIDEO = "VIDEO"
    AVATAR = "AVATAR"


class JobStatus(StrEnum):
    """Normalized status of a generation job, shared by every provider."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


class Tone(StrEnum):
    """Writing tone for text generation."""

    PROFESSIONAL = "professional"
    CASUAL = "casual"
    HUMOROUS = "humorous"
    INSPIRATIONAL = "inspirational"
    EDUCATIONAL = "educational"


class TextLength(StrEnum):
    """Target length bucket for text generation."""

    SHORT = "short"  # 100-200 words
    MEDIUM = "medium"  # 300-500 words
    LONG = "long"  # 700-1000 words
