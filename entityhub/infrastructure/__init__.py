"""Infrastructure layer implementations."""

from entityhub.infrastructure import notifications, storage

__all__ = ["storage", "notifications"]
