"""Schemas for the session-level project aggregate."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from launchcraft.schemas.copy import GenerationKind, GenerationResult
from launchcraft.schemas.project import ProjectDescription


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GenerationState(BaseModel):
    """Transient progress of an in-flight generation (never persisted)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_generating: bool = False
    current_step: str = ""
    progress: float = Field(default=0, ge=0, le=100)
    error: Optional[str] = None


class Project(BaseModel):
    """A project description plus at most one generated result per kind."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    description: ProjectDescription
    results: dict[GenerationKind, GenerationResult] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def field_name(cls, key: str) -> Optional[str]:
        """Resolve an attribute or wire name to the attribute name, if it is a field."""
        if key in cls.model_fields:
            return key
        for name, info in cls.model_fields.items():
            if info.alias == key:
                return name
        return None
