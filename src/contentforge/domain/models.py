"""Domain models - pure Python classes independent of database.

Generation metadata is persisted as a tagged union keyed by ``kind`` so that
reconciliation code can pattern-match on the concrete record instead of probing
optional keys in an untyped dict.
"""

from dataclasses import dataclass
from typing import Annotated, Any, Literal, assert_never

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from contentforge.domain.enums import ContentType, GenerationKind, JobStatus

TITLE_PREFIX_CHARS = 50


class _MetadataBase(BaseModel):
    model_config = ConfigDict(extra="ignore")


class TextMetadata(_MetadataBase):
    kind: Literal["TEXT"] = "TEXT"
    content_type: ContentType
    tone: str
    length: str
    tokens_used: int = 0
    model: str


class ImageMetadata(_MetadataBase):
    kind: Literal["IMAGE"] = "IMAGE"
    size: str
    quality: str
    style: str
    revised_prompt: str | None = None


class VoiceMetadata(_MetadataBase):
    kind: Literal["VOICE"] = "VOICE"
    voice_id: str
    model_id: str
    duration_seconds: int
    blob_stored: bool = False


class VideoMetadata(_MetadataBase):
    kind: Literal["VIDEO"] = "VIDEO"
    model: str
    ratio: str
    duration: int
    task_id: str
    status: JobStatus = JobStatus.PENDING
    video_url: str | None = None


class AvatarMetadata(_MetadataBase):
    kind: Literal["AVATAR"] = "AVATAR"
    avatar_id: str
    voice_id: str
    dimension: str
    video_id: str
    status: JobStatus = JobStatus.PENDING
    video_url: str | None = None


GenerationMetadata = Annotated[
    TextMetadata | ImageMetadata | VoiceMetadata | VideoMetadata | AvatarMetadata,
    Field(discriminator="kind"),
]

_metadata_adapter: TypeAdapter[GenerationMetadata] = TypeAdapter(GenerationMetadata)


def load_metadata(raw: dict[str, Any]) -> GenerationMetadata:
    """Parse a stored metadata document into its typed record."""
    return _metadata_adapter.validate_python(raw)


def dump_metadata(metadata: GenerationMetadata) -> dict[str, Any]:
    """Serialize a typed metadata record for JSON storage."""
    return metadata.model_dump(mode="json")


@dataclass(frozen=True)
class AuthenticatedUser:
    """Caller identity resolved from a bearer token."""

    id: str
    email: str
    name: str | None = None


@dataclass(frozen=True)
class JobHandle:
    """Provider-native job id paired with the Generation tracking it."""

    job_id: str
    generation_id: str | None = None


@dataclass(frozen=True)
class KindDescriptor:
    """Static facts about a generation modality."""

    label: str
    content_type: ContentType | None  # None: chosen by the request


def describe_kind(kind: GenerationKind) -> KindDescriptor:
    """Return the descriptor for a modality."""
    match kind:
        case GenerationKind.TEXT:
            return KindDescriptor(label="Text", content_type=None)
        case GenerationKind.IMAGE:
            return KindDescriptor(label="Image", content_type=ContentType.POST)
        case GenerationKind.VOICE:
            return KindDescriptor(label="Voice", content_type=ContentType.POST)
        case GenerationKind.VIDEO:
            return KindDescriptor(label="Video", content_type=ContentType.VIDEO)
        case GenerationKind.AVATAR:
            return KindDescriptor(label="Avatar", content_type=ContentType.VIDEO)
        case _:
            assert_never(kind)


def job_handle_of(metadata: GenerationMetadata, generation_id: str | None = None) -> JobHandle | None:
    """Extract the job handle from an asynchronous generation's metadata."""
    match metadata:
        case VideoMetadata(task_id=task_id):
            return JobHandle(job_id=task_id, generation_id=generation_id)
        case AvatarMetadata(video_id=video_id):
            return JobHandle(job_id=video_id, generation_id=generation_id)
        case TextMetadata() | ImageMetadata() | VoiceMetadata():
            return None
        case _:
            assert_never(metadata)


def derive_title(label: str, prompt: str) -> str:
    """Build a Content title from a label and the prompt prefix."""
    snippet = prompt[:TITLE_PREFIX_CHARS]
    suffix = "…" if len(prompt) > TITLE_PREFIX_CHARS else ""
    return f"{label}: {snippet}{suffix}"
