import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field

from rokthona.models.base import CamelModel


BlogStatus = Literal["draft", "published"]

class Blog(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    thumbnail: str | None = None
    content: str
    status: BlogStatus = "draft"
    author_email: EmailStr | None = None
    created_at: datetime = Field(default_factory=datetime.now)
