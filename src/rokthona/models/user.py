from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field

from rokthona.models.base import BloodGroup, CamelModel, Role


AccountStatus = Literal["active", "blocked"]

class User(CamelModel):
    email: EmailStr
    name: str | None = None
    avatar: str | None = None
    blood_group: BloodGroup | None = None
    district: str | None = None
    upazila: str | None = None
    phone: str | None = None

    role: Role = "donor"
    status: AccountStatus = "active"

    created_at: datetime = Field(default_factory=datetime.now)

class Principal(CamelModel):
    """The identity behind a verified bearer token. Lives for one request."""

    uid: str
    email: EmailStr
    name: str | None = None
    role_claim: str | None = None
