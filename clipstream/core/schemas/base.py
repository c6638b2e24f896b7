"""Base schema classes for API payloads.

The public API speaks camelCase JSON while Python code keeps snake_case
attribute names; ``CamelModel`` bridges the two.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, SerializerFunctionWrapHandler, model_serializer
from pydantic.alias_generators import to_camel


class CustomBase(BaseModel):
    """Base model with common configuration for all schemas.

    Example:
        class VideoUpdate(CustomBase):
            caption: str | None = None
    """

    model_config = ConfigDict(
        # Allow creation from ORM models (SQLAlchemy)
        from_attributes=True,
        # Populate models by field name (not alias)
        populate_by_name=True,
        # Ignore extra fields (silently drop unexpected data)
        extra="ignore",
        # Strip leading/trailing whitespace from strings
        str_strip_whitespace=True,
    )


class CamelModel(CustomBase):
    """Schema serialized with camelCase keys.

    Fields listed in ``omit_when_none`` are dropped from the output instead
    of being rendered as ``null``; viewer-specific flags such as ``isLiked``
    only appear for authenticated callers.

    Example:
        class VideoOut(CamelModel):
            omit_when_none: ClassVar[frozenset[str]] = frozenset({"is_liked"})

            video_url: str
            is_liked: bool | None = None
    """

    model_config = ConfigDict(alias_generator=to_camel)

    omit_when_none: ClassVar[frozenset[str]] = frozenset()

    @model_serializer(mode="wrap")
    def _omit_absent_flags(self, handler: SerializerFunctionWrapHandler):  # noqa: ANN202
        data = handler(self)
        if self.omit_when_none and isinstance(data, dict):
            for name in self.omit_when_none:
                if getattr(self, name, None) is None:
                    data.pop(name, None)
                    data.pop(to_camel(name), None)
        return data


__all__ = ["CamelModel", "CustomBase"]
