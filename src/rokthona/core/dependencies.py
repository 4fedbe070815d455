import boto3
import stripe
from functools import lru_cache

from rokthona.core.config import get_settings
from rokthona.data_access.dynamodb import DynamoDataAccess
from rokthona.services.funding_service import StripePaymentGateway
from rokthona.services.identity_service import CognitoIdentityProvider


@lru_cache()
def get_boto_session() -> boto3.Session:
    settings = get_settings()
    return boto3.Session(
        region_name=settings.AWS_REGION,
        profile_name=settings.AWS_PROFILE
    )

@lru_cache()
def get_data_access() -> DynamoDataAccess:
    settings = get_settings()
    dynamo_resource = get_boto_session().resource(
        'dynamodb',
        endpoint_url=settings.DYNAMODB_ENDPOINT_URL
    )
    table = dynamo_resource.Table(settings.DYNAMODB_TABLE_NAME)
    return DynamoDataAccess(table=table)

@lru_cache()
def get_identity_provider() -> CognitoIdentityProvider:
    settings = get_settings()
    return CognitoIdentityProvider(
        client=get_boto_session().client('cognito-idp'),
        user_pool_id=settings.COGNITO_USER_POOL_ID,
        role_attribute=settings.COGNITO_ROLE_ATTRIBUTE
    )

@lru_cache()
def get_payment_gateway() -> StripePaymentGateway:
    settings = get_settings()
    stripe.api_key = settings.STRIPE_SECRET_KEY
    return StripePaymentGateway(currency=settings.PAYMENT_CURRENCY)
