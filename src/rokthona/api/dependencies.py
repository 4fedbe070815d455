from fastapi import Depends

from rokthona.core.config import get_settings
from rokthona.core.dependencies import get_data_access, get_payment_gateway
from rokthona.data_access.dynamodb import DynamoDataAccess
from rokthona.services.blog_service import BlogService
from rokthona.services.donation_service import DonationService
from rokthona.services.funding_service import FundingService
from rokthona.services.geo_service import GeoService
from rokthona.services.user_service import UserService


def get_user_service(data_access: DynamoDataAccess = Depends(get_data_access)) -> UserService:
    return UserService(data_access)

def get_donation_service(data_access: DynamoDataAccess = Depends(get_data_access)) -> DonationService:
    return DonationService(data_access)

def get_blog_service(data_access: DynamoDataAccess = Depends(get_data_access)) -> BlogService:
    return BlogService(data_access)

def get_geo_service(data_access: DynamoDataAccess = Depends(get_data_access)) -> GeoService:
    return GeoService(data_access)

def get_min_payment_amount() -> float:
    return get_settings().MIN_PAYMENT_AMOUNT

def get_seed_data_dir() -> str:
    return get_settings().SEED_DATA_DIR

def get_funding_service(
    data_access: DynamoDataAccess = Depends(get_data_access),
    payment_gateway=Depends(get_payment_gateway),
    min_amount: float = Depends(get_min_payment_amount),
) -> FundingService:
    return FundingService(data_access, payment_gateway, min_amount)
