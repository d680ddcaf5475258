"""Schema for registered users."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from launchcraft.schemas.session import utcnow


class User(BaseModel):
    """A registered user. The web layer exposes it through UserSerializer, without `password_hash`."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    email: str
    password_hash: str
    created_at: datetime = Field(default_factory=utcnow)
