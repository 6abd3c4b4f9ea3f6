"""API route modules."""

from contentforge.api.routes import (
    dashboard,
    generate,
    health,
    library,
    projects,
)

__all__ = ["dashboard", "generate", "health", "library", "projects"]
