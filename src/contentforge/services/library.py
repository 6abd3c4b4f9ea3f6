"""Read side of the per-user content library."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from contentforge.db.models import ContentModel, GenerationModel, ProjectModel, UserModel
from contentforge.domain.enums import ContentType
from contentforge.domain.errors import NotFoundError
from contentforge.domain.models import AuthenticatedUser
from contentforge.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ProjectSummary:
    project: ProjectModel
    content_count: int


@dataclass
class LibraryItem:
    """A Content with its most recent Generation, if any."""

    content: ContentModel
    latest: GenerationModel | None


@dataclass
class DashboardStats:
    """Per-owner totals plus the most recent contents."""

    content_count: int
    project_count: int
    generation_count: int
    total_cost: float
    recent: list[LibraryItem]


class LibraryService:
    """Owner-scoped queries over projects, contents and generations."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create_project(self, user: AuthenticatedUser, name: str, description: str | None = None) -> ProjectModel:
        # Projects reference the users table, so the owner row must exist first
        if self.session.get(UserModel, user.id) is None:
            self.session.add(UserModel(id=user.id, email=user.email, name=user.name))

        project = ProjectModel(user_id=user.id, name=name, description=description)
        self.session.add(project)
        self.session.commit()
        self.session.refresh(project)

        logger.info("project_created", project_id=str(project.id), user_id=user.id)
        return project

    def list_projects(self, user: AuthenticatedUser) -> list[ProjectSummary]:
        content_count = (
            select(ContentModel.project_id, func.count(ContentModel.id).label("n"))
            .where(ContentModel.user_id == user.id)
            .group_by(ContentModel.project_id)
            .subquery()
        )
        rows = self.session.execute(
            select(ProjectModel, func.coalesce(content_count.c.n, 0))
            .outerjoin(content_count, content_count.c.project_id == ProjectModel.id)
            .where(ProjectModel.user_id == user.id)
            .order_by(ProjectModel.created_at.desc())
        ).all()
        return [ProjectSummary(project=project, content_count=count) for project, count in rows]

    def list_contents(
        self,
        user: AuthenticatedUser,
        content_type: ContentType | None = None,
        project_id: UUID | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[LibraryItem]:
        """List the caller's contents, newest first."""
        query = (
            select(ContentModel)
            .options(selectinload(ContentModel.generations))
            .where(ContentModel.user_id == user.id)
            .order_by(ContentModel.created_at.desc())
        )
        if content_type is not None:
            query = query.where(ContentModel.type == content_type.value)
        if project_id is not None:
            query = query.where(ContentModel.project_id == project_id)
        query = query.limit(limit).offset(offset)

        contents = self.session.scalars(query).all()
        # generations relationship is ordered newest first
        return [
            LibraryItem(content=content, latest=content.generations[0] if content.generations else None)
            for content in contents
        ]

    def get_generation(self, user: AuthenticatedUser, generation_id: UUID) -> GenerationModel:
        generation = self.session.scalar(
            select(GenerationModel)
            .join(ContentModel, GenerationModel.content_id == ContentModel.id)
            .where(GenerationModel.id == generation_id, ContentModel.user_id == user.id)
        )
        if generation is None:
            raise NotFoundError("Generation not found")
        return generation

    def dashboard_stats(self, user: AuthenticatedUser, recent_limit: int = 5) -> DashboardStats:
        """Totals across the caller's library. ``total_cost`` sums generation cost estimates."""
        content_count = (
            self.session.scalar(
                select(func.count()).select_from(ContentModel).where(ContentModel.user_id == user.id)
            )
            or 0
        )
        project_count = (
            self.session.scalar(
                select(func.count()).select_from(ProjectModel).where(ProjectModel.user_id == user.id)
            )
            or 0
        )
        generation_count, total_cost = self.session.execute(
            select(func.count(GenerationModel.id), func.coalesce(func.sum(GenerationModel.cost), 0.0))
            .select_from(GenerationModel)
            .join(ContentModel, GenerationModel.content_id == ContentModel.id)
            .where(ContentModel.user_id == user.id)
        ).one()

        return DashboardStats(
            content_count=content_count,
            project_count=project_count,
            generation_count=generation_count,
            total_cost=float(total_cost),
            recent=self.list_contents(user, limit=recent_limit),
        )
