"""Service layer base classes."""

from clipstream.core.services.base import BaseService

__all__ = ["BaseService"]
