"""Schemas for the AI blog drafting assistant."""

from __future__ import annotations

from pydantic import BaseModel, Field


class BlogDraftRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=4000)
    image_url: str | None = Field(default=None, max_length=2000)


class BlogDraftResponse(BaseModel):
    title: str
    slug: str
    excerpt: str
    content: str
    category: str
    tags: list[str] = Field(default_factory=list)
    read_time: int


__all__ = ["BlogDraftRequest", "BlogDraftResponse"]
