"""Shared API schemas."""

from clipstream.core.schemas.base import CamelModel, CustomBase
from clipstream.core.schemas.problem_details import ProblemDetails, ValidationErrorDetail

__all__ = ["CamelModel", "CustomBase", "ProblemDetails", "ValidationErrorDetail"]
