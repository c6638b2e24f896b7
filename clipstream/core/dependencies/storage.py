"""Storage dependency.

Routes receive the shared ``StorageService``; tests override
``get_storage`` with a service backed by a temporary directory.
"""

from typing import Annotated

from fastapi import Depends

from clipstream.infra.storage import StorageService, get_storage_service


def get_storage() -> StorageService:
    """FastAPI dependency returning the application-wide storage service."""
    return get_storage_service()


StorageDep = Annotated[StorageService, Depends(get_storage)]

__all__ = ["StorageDep", "get_storage"]
