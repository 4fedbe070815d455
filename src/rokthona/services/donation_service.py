import logging
import math
import uuid
from datetime import datetime

from rokthona.core.errors import AlreadyConfirmedOrMissing, InvalidInput, NotFound
from rokthona.data_access.dynamodb import DynamoDataAccess
from rokthona.models.donation import DonationRequest
from rokthona.models.user import Principal
from rokthona.services.access_control import ADMIN_OR_VOLUNTEER, RoleResolver, ensure_role

logger = logging.getLogger(__name__)


def _check_id(request_id: str) -> None:
    try:
        uuid.UUID(request_id)
    except ValueError:
        raise InvalidInput("Invalid donation request ID")


def paginate(items: list, page: int, limit: int) -> tuple[list, int]:
    start = (page - 1) * limit
    return items[start:start + limit], math.ceil(len(items) / limit)


class DonationService:
    """
    Donation request lifecycle: pending -> inprogress -> done | canceled.

    Every transition is a single conditional write on the request's current
    status, so concurrent callers cannot both win.
    """

    def __init__(self, data_access: DynamoDataAccess):
        self.data_access = data_access

    def create_request(self, principal: Principal, details: dict) -> dict:
        details = {k: v for k, v in details.items() if k not in ("status", "requester_email")}
        if not details.get("requester_name"):
            details["requester_name"] = principal.name
        request = DonationRequest(**details, requester_email=principal.email, status="pending")
        created = self.data_access.create_donation_request(request)
        logger.info(f"Donation request {request.id} created by {principal.email}")
        return created

    def get_request(self, request_id: str) -> dict:
        _check_id(request_id)
        request = self.data_access.get_donation_request(request_id)
        if request is None:
            raise NotFound("Donation request not found")
        return request

    def confirm_request(self, request_id: str, donor: Principal) -> dict:
        _check_id(request_id)
        updated = self.data_access.confirm_donation_request(
            request_id=request_id,
            donor_name=donor.name or donor.email,
            donor_email=donor.email,
            donor_id=donor.uid,
            confirmed_at=datetime.now(),
        )
        if updated is None:
            logger.warning(f"Confirmation of {request_id} by {donor.email} lost: not pending or missing")
            raise AlreadyConfirmedOrMissing()

        logger.info(f"Donation request {request_id} confirmed by {donor.email}")
        return updated

    def finish_request(self, request_id: str, status: str, principal: Principal,
                       resolver: RoleResolver) -> dict:
        """Close an inprogress request. Open to its requester, its donor, and staff."""
        request = self.get_request(request_id)
        participants = {request.get("requester_email"), request.get("donor_email")}
        if principal.email not in participants:
            ensure_role(resolver, principal, ADMIN_OR_VOLUNTEER)

        updated = self.data_access.finish_donation_request(request_id, status)
        if updated is None:
            raise AlreadyConfirmedOrMissing("Donation request is not in progress.")

        logger.info(f"Donation request {request_id} marked {status} by {principal.email}")
        return updated

    def override_status(self, request_id: str, status: str) -> dict:
        _check_id(request_id)
        updated = self.data_access.override_donation_status(request_id, status)
        if updated is not None:
            logger.info(f"Donation request {request_id} status overridden to {status}")
            return updated

        if self.data_access.get_donation_request(request_id) is None:
            raise NotFound("Donation request not found")
        raise InvalidInput(f"A donation request needs a confirmed donor to be marked {status}")

    def list_by_requester(self, email: str, status: str | None, page: int, limit: int) -> dict:
        requests = self.data_access.list_donation_requests(requester_email=email, status=status)
        page_items, total_pages = paginate(requests, page, limit)
        return {"requests": page_items, "total_pages": total_pages}

    def list_by_donor(self, email: str) -> list[dict]:
        return self.data_access.list_donation_requests(donor_email=email)

    def list_pending(self) -> list[dict]:
        return self.data_access.list_donation_requests(status="pending")

    def list_all(self, status: str | None, page: int, limit: int) -> dict:
        requests = self.data_access.list_donation_requests(status=status)
        page_items, total_pages = paginate(requests, page, limit)
        return {"requests": page_items, "total_pages": total_pages}
