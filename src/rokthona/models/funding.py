import uuid
from datetime import datetime

from pydantic import EmailStr, Field

from rokthona.models.base import CamelModel


class FundingEntry(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    email: EmailStr
    amount_cents: int = Field(..., ge=0)
    transaction_id: str
    date: datetime = Field(default_factory=datetime.now)
