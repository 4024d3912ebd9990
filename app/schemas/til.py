"""Request bodies forwarded to the LLM service."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class ConvertTilRequest(BaseModel):
    """Raw TIL text to be turned into Markdown."""

    content: str = Field(..., min_length=10, max_length=5000)
    image: Optional[str] = Field(
        None, description="Optional base64-encoded image to include in the summary."
    )


class EnhanceTilRequest(BaseModel):
    """Markdown to analyse for keywords and image suggestions."""

    content: str = Field(..., min_length=1)
    language: Literal["ko", "en"]
    include_images: bool


__all__ = ["ConvertTilRequest", "EnhanceTilRequest"]
