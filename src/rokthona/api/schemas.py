from datetime import date, datetime
from pydantic import ConfigDict, EmailStr, Field
from typing import Optional

from rokthona.models.base import BloodGroup, CamelModel, Role
from rokthona.models.content import BlogStatus
from rokthona.models.donation import DonationRequest, DonationStatus, FinishedStatus
from rokthona.models.user import AccountStatus, User


# Creation payloads drop fields the server owns (role, status, ids) instead of
# failing; update payloads reject them.

class UserCreateRequest(CamelModel):
    model_config = ConfigDict(extra="ignore")

    email: EmailStr
    name: Optional[str] = None
    avatar: Optional[str] = None
    blood_group: Optional[BloodGroup] = None
    district: Optional[str] = None
    upazila: Optional[str] = None
    phone: Optional[str] = None

class UserProfileUpdateRequest(CamelModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    avatar: Optional[str] = None
    blood_group: Optional[BloodGroup] = None
    district: Optional[str] = None
    upazila: Optional[str] = None
    phone: Optional[str] = None

class UserStatusRequest(CamelModel):
    status: AccountStatus

class RoleAssignmentRequest(CamelModel):
    role: Role

class RoleAssignmentResponse(CamelModel):
    message: str
    user: User

class StatsResponse(CamelModel):
    total_users: int
    total_requests: int
    total_funding: float

class DonationRequestCreateRequest(CamelModel):
    model_config = ConfigDict(extra="ignore")

    requester_name: Optional[str] = None
    recipient_name: str
    blood_group: BloodGroup
    recipient_district: str
    recipient_upazila: str
    hospital_name: Optional[str] = None
    full_address: Optional[str] = None
    donation_date: date
    donation_time: Optional[str] = None
    request_message: Optional[str] = None

class DonationFinishRequest(CamelModel):
    status: FinishedStatus

class DonationStatusRequest(CamelModel):
    status: DonationStatus

class DonationRequestResult(CamelModel):
    message: str
    request: DonationRequest

class DonationRequestPage(CamelModel):
    requests: list[DonationRequest]
    total_pages: int

class BlogCreateRequest(CamelModel):
    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., min_length=1)
    thumbnail: Optional[str] = None
    content: str
    status: BlogStatus = "draft"

class BlogStatusRequest(CamelModel):
    status: BlogStatus

class PaymentIntentRequest(CamelModel):
    amount: float = Field(..., gt=0)

class PaymentIntentResponse(CamelModel):
    client_secret: str

class PaymentRecordRequest(CamelModel):
    amount: float = Field(..., gt=0)
    transaction_id: str = Field(..., min_length=1)
    date: Optional[datetime] = None

class SeedResponse(CamelModel):
    districts: int
    upazilas: int

class MessageResponse(CamelModel):
    message: str
