from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):

    AWS_REGION: str
    AWS_PROFILE: str | None = None

    DYNAMODB_TABLE_NAME: str
    DYNAMODB_ENDPOINT_URL: str | None = None

    COGNITO_USER_POOL_ID: str
    COGNITO_ROLE_ATTRIBUTE: str = "custom:role"

    STRIPE_SECRET_KEY: str
    PAYMENT_CURRENCY: str = "usd"
    MIN_PAYMENT_AMOUNT: float = 10

    SEED_DATA_DIR: str = "data"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

@lru_cache()
def get_settings() -> Settings:
    return Settings()
