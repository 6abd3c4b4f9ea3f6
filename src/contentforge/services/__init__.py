"""Business logic services."""

from contentforge.services.generation import (
    BestEffortResult,
    GenerationService,
    best_effort,
)
from contentforge.services.library import LibraryService
from contentforge.services.storage import BlobStorage, StoredArtifact

__all__ = [
    "BestEffortResult",
    "BlobStorage",
    "GenerationService",
    "LibraryService",
    "StoredArtifact",
    "best_effort",
]
