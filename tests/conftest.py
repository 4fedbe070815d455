"""
Shared fixtures.

DynamoDB is moto-backed; the identity provider and payment gateway are
in-memory doubles wired in through ``app.dependency_overrides``.
"""

import os

import boto3
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws

os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

from rokthona.api.dependencies import get_min_payment_amount, get_seed_data_dir
from rokthona.api.main import app
from rokthona.core.dependencies import get_data_access, get_identity_provider, get_payment_gateway
from rokthona.core.errors import InvalidCredential, NotFound, UpstreamFailure
from rokthona.data_access.dynamodb import DynamoDataAccess, create_table
from rokthona.models.user import Principal, User

TABLE_NAME = "rokthona-test"


# =============================================================================
# Test Doubles
# =============================================================================


class FakeIdentityProvider:
    """Issues opaque tokens per email and keeps role claims in memory."""

    def __init__(self):
        self.tokens: dict[str, tuple[str, str | None]] = {}
        self.claims: dict[str, str] = {}
        self.verify_calls = 0
        self.fail_claim_updates = False

    def issue(self, email: str, name: str | None = None) -> str:
        token = f"token-{email}"
        self.tokens[token] = (email, name)
        return token

    def verify(self, token: str) -> Principal:
        self.verify_calls += 1
        if token not in self.tokens:
            raise InvalidCredential()
        email, name = self.tokens[token]
        return Principal(uid=f"uid-{email}", email=email, name=name, role_claim=self.claims.get(email))

    def get_user_by_email(self, email: str) -> dict:
        if not any(known == email for known, _ in self.tokens.values()):
            raise NotFound(f"No identity found for {email}")
        return {"username": email, "uid": f"uid-{email}", "email": email, "role": self.claims.get(email)}

    def set_role_claim(self, username: str, role: str) -> None:
        if self.fail_claim_updates:
            raise UpstreamFailure("Failed to update role claim")
        self.claims[username] = role


class FakePaymentGateway:
    def __init__(self):
        self.intents: list[int] = []

    def create_payment_intent(self, amount_cents: int) -> str:
        self.intents.append(amount_cents)
        return f"pi_secret_{len(self.intents)}"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def aws():
    with mock_aws():
        yield


@pytest.fixture
def table(aws):
    resource = boto3.resource("dynamodb", region_name="us-east-1")
    return create_table(resource, TABLE_NAME)


@pytest.fixture
def data_access(table):
    return DynamoDataAccess(table)


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def gateway():
    return FakePaymentGateway()


@pytest.fixture
def seed_dir(tmp_path):
    return tmp_path


@pytest.fixture
def client(data_access, identity, gateway, seed_dir):
    app.dependency_overrides[get_data_access] = lambda: data_access
    app.dependency_overrides[get_identity_provider] = lambda: identity
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_min_payment_amount] = lambda: 10
    app.dependency_overrides[get_seed_data_dir] = lambda: str(seed_dir)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(data_access, identity):
    """Create a directory user with a role and return bearer headers for them."""

    def _make_user(email: str, role: str = "donor", name: str | None = None, **profile) -> dict:
        data_access.create_user(User(email=email, name=name, **profile))
        if role != "donor":
            data_access.update_user(email, {"role": role})
        token = identity.issue(email, name)
        return {"Authorization": f"Bearer {token}"}

    return _make_user
