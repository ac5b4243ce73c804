"""
Request and response models for the back-office.
"""

from typing import Optional

from pydantic import BaseModel, field_validator


class EpisodeForm(BaseModel):
    title: str

    @field_validator('title')
    @classmethod
    def title_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('title cannot be empty')
        return v.strip()


class StoryForm(BaseModel):
    title: str
    notes: str = ""
    presenter: str
    # Only used when adding; a story cannot move between segments.
    segment: Optional[str] = None

    @field_validator('title')
    @classmethod
    def title_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('title cannot be empty')
        return v.strip()

    @field_validator('presenter')
    @classmethod
    def presenter_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('presenter cannot be empty')
        return v.strip()


class HealthResponse(BaseModel):
    status: str
    version: str
    episodes: int
