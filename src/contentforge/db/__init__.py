"""Database layer."""

from contentforge.db.models import (
    Base,
    ContentModel,
    GenerationModel,
    ProjectModel,
    UserModel,
)
from contentforge.db.session import get_session, get_session_context, init_db

__all__ = [
    "Base",
    "get_session",
    "get_session_context",
    "init_db",
    # Models
    "ContentModel",
    "GenerationModel",
    "ProjectModel",
    "UserModel",
]
