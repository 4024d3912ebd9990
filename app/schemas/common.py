"""Response envelope shared by all endpoints."""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """``{"message": <code>, "data": <payload or null>}``."""

    message: str
    data: Optional[T] = None


__all__ = ["ApiResponse"]
