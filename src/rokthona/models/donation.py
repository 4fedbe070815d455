import uuid
from datetime import date, datetime
from pydantic import EmailStr, Field
from typing import Literal

from rokthona.models.base import BloodGroup, CamelModel


DonationStatus = Literal["pending", "inprogress", "done", "canceled"]
FinishedStatus = Literal["done", "canceled"]

# Fields stamped by a confirming donor. Present exactly while the request is
# inprogress or done.
DONOR_FIELDS = ("donor_name", "donor_email", "donor_id", "confirmed_at")

class DonationRequest(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))

    requester_name: str | None = None
    requester_email: EmailStr

    recipient_name: str
    blood_group: BloodGroup
    recipient_district: str
    recipient_upazila: str
    hospital_name: str | None = None
    full_address: str | None = None
    donation_date: date
    donation_time: str | None = None
    request_message: str | None = None

    status: DonationStatus = "pending"

    donor_name: str | None = None
    donor_email: EmailStr | None = None
    donor_id: str | None = None
    confirmed_at: datetime | None = None

    created_at: datetime = Field(default_factory=datetime.now)
