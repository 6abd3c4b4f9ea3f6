"""Tests for the generation service outside the HTTP layer."""

from unittest.mock import patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from contentforge.adapters.base import JobPollResult
from contentforge.adapters.registry import ProviderRegistry
from contentforge.adapters.text import TextRequest
from contentforge.adapters.video import VideoRequest
from contentforge.config import Settings
from contentforge.db.models import ContentModel, UserModel
from contentforge.domain.enums import GenerationKind, JobStatus
from contentforge.domain.errors import ValidationError
from contentforge.domain.models import AuthenticatedUser
from contentforge.services.generation import BestEffortResult, GenerationService, best_effort
from contentforge.services.storage import BlobStorage
from tests.conftest import ALICE

VIDEO_REQUEST = VideoRequest(
    prompt="Waves crashing on a rocky shore at dusk",
    model="gen4_turbo",
    ratio="720:1280",
    duration=5,
)


@pytest.fixture
def service(db_session: Session, stub_registry: ProviderRegistry) -> GenerationService:
    storage = BlobStorage(Settings(_env_file=None))
    return GenerationService(db_session, stub_registry, storage)


class TestOwnerUpsert:
    def test_creates_then_updates(self, service: GenerationService, db_session: Session) -> None:
        assert service.ensure_owner(ALICE).ok

        renamed = AuthenticatedUser(id=ALICE.id, email="alice@new.example.com", name=None)
        assert service.ensure_owner(renamed).ok

        owner = db_session.get(UserModel, ALICE.id)
        assert owner is not None
        assert owner.email == "alice@new.example.com"
        assert owner.name == "Alice"

    def test_failure_is_reported_not_raised(self, db_session: Session) -> None:
        def write() -> None:
            raise OperationalError("INSERT INTO users", {}, Exception("database is locked"))

        with patch.object(db_session, "rollback", wraps=db_session.rollback) as rollback:
            result = best_effort(db_session, "owner_upsert", write)

        assert result.ok is False
        assert result.operation == "owner_upsert"
        assert "database is locked" in (result.error or "")
        rollback.assert_called_once()

    @pytest.mark.asyncio
    async def test_generation_survives_failed_upsert(
        self, service: GenerationService, db_session: Session
    ) -> None:
        def failing_write() -> None:
            raise OperationalError("INSERT INTO users", {}, Exception("boom"))

        def broken_upsert(user: AuthenticatedUser) -> BestEffortResult:
            return best_effort(db_session, "owner_upsert", failing_write)

        with patch.object(service, "ensure_owner", side_effect=broken_upsert):
            outcome = await service.submit_text(
                ALICE,
                TextRequest(
                    prompt="Ideas for a weekend hiking trip",
                    content_type="STORY",
                    tone="casual",
                    length="short",
                ),
            )

        content = db_session.get(ContentModel, outcome.content_id)
        assert content is not None
        assert content.type == "STORY"


class TestReconcile:
    @pytest.mark.asyncio
    async def test_completion_written_once(self, service: GenerationService, db_session: Session) -> None:
        job = await service.submit_video(ALICE, VIDEO_REQUEST)
        generation = service.tracked_generation(ALICE, GenerationKind.VIDEO, job.job_id, job.generation_id)
        done = JobPollResult(status=JobStatus.COMPLETED, artifact_url="https://cdn.test/final.mp4")

        assert service.reconcile(generation, done) is True
        assert service.reconcile(generation, done) is False

        assert generation.result == "https://cdn.test/final.mp4"
        assert generation.metadata_["status"] == "completed"
        assert generation.metadata_["ratio"] == "720:1280"

    @pytest.mark.asyncio
    async def test_completed_without_url_is_ignored(self, service: GenerationService) -> None:
        job = await service.submit_video(ALICE, VIDEO_REQUEST)
        generation = service.tracked_generation(ALICE, GenerationKind.VIDEO, job.job_id, job.generation_id)

        assert service.reconcile(generation, JobPollResult(status=JobStatus.COMPLETED)) is False
        assert service.reconcile(generation, JobPollResult(status=JobStatus.PROCESSING)) is False
        assert generation.result == job.job_id

    @pytest.mark.asyncio
    async def test_failure_written_once(self, service: GenerationService) -> None:
        job = await service.submit_video(ALICE, VIDEO_REQUEST)
        generation = service.tracked_generation(ALICE, GenerationKind.VIDEO, job.job_id, job.generation_id)
        failed = JobPollResult(status=JobStatus.FAILED)

        assert service.reconcile(generation, failed) is True
        assert service.reconcile(generation, failed) is False
        assert generation.result == job.job_id

    @pytest.mark.asyncio
    async def test_tracked_generation_checks_kind(self, service: GenerationService) -> None:
        job = await service.submit_video(ALICE, VIDEO_REQUEST)

        with pytest.raises(ValidationError):
            service.tracked_generation(ALICE, GenerationKind.AVATAR, job.job_id, job.generation_id)

    @pytest.mark.asyncio
    async def test_poll_without_generation_writes_nothing(
        self, service: GenerationService, db_session: Session
    ) -> None:
        job = await service.submit_video(ALICE, VIDEO_REQUEST)

        for _ in range(3):
            outcome = await service.poll_video(ALICE, job.job_id)

        assert outcome.status is JobStatus.COMPLETED
        contents = db_session.scalars(select(ContentModel)).all()
        assert contents[0].generations[0].result == job.job_id

