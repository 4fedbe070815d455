from fastapi import APIRouter, Depends

from rokthona.api.dependencies import get_funding_service
from rokthona.api.guards import get_current_principal
from rokthona.api.schemas import PaymentIntentRequest, PaymentIntentResponse, PaymentRecordRequest
from rokthona.models.funding import FundingEntry
from rokthona.models.user import Principal
from rokthona.services.funding_service import FundingService

router = APIRouter(tags=["funding"])


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
def create_payment_intent(
    body: PaymentIntentRequest,
    _: Principal = Depends(get_current_principal),
    funding: FundingService = Depends(get_funding_service),
):
    client_secret = funding.create_payment_intent(body.amount)
    return PaymentIntentResponse(client_secret=client_secret)


@router.post("/payments", response_model=FundingEntry)
def record_payment(
    body: PaymentRecordRequest,
    principal: Principal = Depends(get_current_principal),
    funding: FundingService = Depends(get_funding_service),
):
    """Append a completed payment to the funding ledger."""
    return funding.record_payment(principal, body.amount, body.transaction_id, body.date)
