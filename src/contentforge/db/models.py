"""SQLAlchemy ORM models."""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID as PyUUID
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Float, ForeignKey, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class UserModel(Base):
    """Owner record mirrored from the identity provider."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    # Relationships
    projects: Mapped[list["ProjectModel"]] = relationship(
        "ProjectModel", back_populates="owner", cascade="all, delete-orphan"
    )
    contents: Mapped[list["ContentModel"]] = relationship(
        "ContentModel", back_populates="owner", cascade="all, delete-orphan"
    )


class ProjectModel(Base):
    """Project grouping a user's content."""

    __tablename__ = "projects"

    id: Mapped[PyUUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    # Relationships
    owner: Mapped["UserModel"] = relationship("UserModel", back_populates="projects")
    contents: Mapped[list["ContentModel"]] = relationship("ContentModel", back_populates="project")


class ContentModel(Base):
    """Logical creative artifact that accumulates generations."""

    __tablename__ = "contents"

    id: Mapped[PyUUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), server_default="draft", index=True)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    project_id: Mapped[PyUUID | None] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    # Relationships
    owner: Mapped["UserModel"] = relationship("UserModel", back_populates="contents")
    project: Mapped["ProjectModel | None"] = relationship("ProjectModel", back_populates="contents")
    generations: Mapped[list["GenerationModel"]] = relationship(
        "GenerationModel",
        back_populates="content",
        cascade="all, delete-orphan",
        order_by="GenerationModel.created_at.desc()",
    )


class GenerationModel(Base):
    """One provider invocation attached to a Content."""

    __tablename__ = "generations"

    id: Mapped[PyUUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    kind: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    # Artifact URL, inline data, or the provider job id until completion
    result: Mapped[str | None] = mapped_column(Text, nullable=True)
    metadata_: Mapped[dict[str, Any]] = mapped_column("metadata_", JSONDocument, nullable=False)
    cost: Mapped[float] = mapped_column(Float, server_default="0")
    content_id: Mapped[PyUUID] = mapped_column(
        Uuid, ForeignKey("contents.id", ondelete="CASCADE"), index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    # Relationships
    content: Mapped["ContentModel"] = relationship("ContentModel", back_populates="generations")
