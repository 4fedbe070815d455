import logging
import stripe

from rokthona.core.errors import InvalidInput, UpstreamFailure
from rokthona.data_access.dynamodb import DynamoDataAccess
from rokthona.models.funding import FundingEntry
from rokthona.models.user import Principal

logger = logging.getLogger(__name__)


class StripePaymentGateway:
    """Creates card payment intents. Expects ``stripe.api_key`` to be set."""

    def __init__(self, currency: str = "usd"):
        self.currency = currency

    def create_payment_intent(self, amount_cents: int) -> str:
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount_cents,
                currency=self.currency,
                payment_method_types=["card"],
            )
            return intent.client_secret
        except stripe.StripeError as e:
            logger.error(f"Error creating Stripe intent: {e}")
            raise UpstreamFailure("Failed to create payment intent") from e


class FundingService:
    def __init__(self, data_access: DynamoDataAccess, payment_gateway, min_amount: float = 10):
        self.data_access = data_access
        self.payment_gateway = payment_gateway
        self.min_amount = min_amount

    def create_payment_intent(self, amount: float) -> str:
        if amount < self.min_amount:
            raise InvalidInput("Amount too small")
        return self.payment_gateway.create_payment_intent(round(amount * 100))

    def record_payment(self, payer: Principal, amount: float, transaction_id: str, date=None) -> dict:
        fields = {
            "name": payer.name or "Anonymous",
            "email": payer.email,
            "amount_cents": round(amount * 100),
            "transaction_id": transaction_id,
        }
        if date is not None:
            fields["date"] = date
        entry = FundingEntry(**fields)
        saved = self.data_access.create_funding_entry(entry)
        logger.info(f"Recorded payment {transaction_id} of {entry.amount_cents} cents from {payer.email}")
        return saved
