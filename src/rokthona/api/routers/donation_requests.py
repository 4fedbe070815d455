from fastapi import APIRouter, Depends, Query
from typing import Optional

from rokthona.api.dependencies import get_donation_service
from rokthona.api.guards import (
    get_current_principal,
    get_role_resolver,
    require_admin,
    require_admin_or_volunteer,
    require_self,
)
from rokthona.api.schemas import (
    DonationFinishRequest,
    DonationRequestCreateRequest,
    DonationRequestPage,
    DonationRequestResult,
    DonationStatusRequest,
)
from rokthona.models.donation import DonationRequest, DonationStatus
from rokthona.models.user import Principal
from rokthona.services.access_control import RoleResolver
from rokthona.services.donation_service import DonationService

router = APIRouter(tags=["donation-requests"])


@router.post("/donation-requests", response_model=DonationRequestResult)
def create_donation_request(
    body: DonationRequestCreateRequest,
    principal: Principal = Depends(get_current_principal),
    donations: DonationService = Depends(get_donation_service),
):
    request = donations.create_request(principal, body.model_dump())
    return DonationRequestResult(message="Donation request created", request=request)


@router.get("/donation-requests/public", response_model=list[DonationRequest])
def list_pending_requests(
    _: Principal = Depends(get_current_principal),
    donations: DonationService = Depends(get_donation_service),
):
    return donations.list_pending()


@router.get("/donation-requests/by-requester", response_model=DonationRequestPage)
def list_requests_by_requester(
    email: str,
    status: Optional[DonationStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    _: Principal = Depends(require_self),
    donations: DonationService = Depends(get_donation_service),
):
    return donations.list_by_requester(email, status, page, limit)


@router.get("/donation-requests/by-donor", response_model=list[DonationRequest])
def list_requests_by_donor(
    email: str,
    _: Principal = Depends(require_self),
    donations: DonationService = Depends(get_donation_service),
):
    return donations.list_by_donor(email)


@router.get("/admin/donation-requests", response_model=DonationRequestPage)
def list_all_requests(
    status: Optional[DonationStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    _: Principal = Depends(require_admin),
    donations: DonationService = Depends(get_donation_service),
):
    return donations.list_all(status, page, limit)


@router.get("/donation-requests/{request_id}", response_model=DonationRequest)
def get_donation_request(
    request_id: str,
    _: Principal = Depends(get_current_principal),
    donations: DonationService = Depends(get_donation_service),
):
    return donations.get_request(request_id)


@router.patch("/donation-requests/{request_id}/confirm", response_model=DonationRequestResult)
def confirm_donation_request(
    request_id: str,
    principal: Principal = Depends(get_current_principal),
    donations: DonationService = Depends(get_donation_service),
):
    """Claim a pending request as its donor. Only one donor can ever win."""
    request = donations.confirm_request(request_id, principal)
    return DonationRequestResult(message="Donation confirmed!", request=request)


@router.patch("/donation-requests/{request_id}/finish", response_model=DonationRequestResult)
def finish_donation_request(
    request_id: str,
    body: DonationFinishRequest,
    principal: Principal = Depends(get_current_principal),
    resolver: RoleResolver = Depends(get_role_resolver),
    donations: DonationService = Depends(get_donation_service),
):
    request = donations.finish_request(request_id, body.status, principal, resolver)
    return DonationRequestResult(message=f"Donation marked {body.status}", request=request)


@router.patch("/donation-requests/{request_id}/status", response_model=DonationRequestResult)
def override_donation_status(
    request_id: str,
    body: DonationStatusRequest,
    _: Principal = Depends(require_admin_or_volunteer),
    donations: DonationService = Depends(get_donation_service),
):
    request = donations.override_status(request_id, body.status)
    return DonationRequestResult(message="Status updated successfully", request=request)
