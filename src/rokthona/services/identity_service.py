import logging
from botocore.exceptions import BotoCoreError, ClientError

from rokthona.core.errors import InvalidCredential, NotFound, UpstreamFailure
from rokthona.models.user import Principal

logger = logging.getLogger(__name__)

# Cognito error codes that mean "this token is no good", as opposed to
# "Cognito could not answer".
_REJECTED_TOKEN_CODES = {
    "NotAuthorizedException",
    "UserNotFoundException",
    "UserNotConfirmedException",
    "PasswordResetRequiredException",
}


def _attributes(raw: list[dict]) -> dict[str, str]:
    return {attribute["Name"]: attribute["Value"] for attribute in raw}


class CognitoIdentityProvider:
    """
    Identity provider backed by a Cognito user pool.

    Tokens are verified by Cognito itself (GetUser with the access token), so
    revoked or expired tokens are rejected even before their natural expiry.
    Role claims live in a custom user attribute.
    """

    def __init__(self, client, user_pool_id: str, role_attribute: str = "custom:role"):
        self.cognito_client = client
        self.user_pool_id = user_pool_id
        self.role_attribute = role_attribute

    def verify(self, token: str) -> Principal:
        try:
            response = self.cognito_client.get_user(AccessToken=token)
        except ClientError as e:
            code = e.response['Error']['Code']
            if code in _REJECTED_TOKEN_CODES:
                logger.warning(f"Identity provider rejected token: {code}")
                raise InvalidCredential() from e
            logger.error(f"Identity provider error during token verification: {e}")
            raise UpstreamFailure("Identity provider unavailable") from e
        except BotoCoreError as e:
            logger.error(f"Identity provider unreachable: {e}")
            raise UpstreamFailure("Identity provider unavailable") from e

        attributes = _attributes(response.get("UserAttributes", []))
        if not attributes.get("email"):
            raise InvalidCredential("Token does not carry an email")

        return Principal(
            uid=attributes.get("sub", response["Username"]),
            email=attributes["email"],
            name=attributes.get("name"),
            role_claim=attributes.get(self.role_attribute),
        )

    def get_user_by_email(self, email: str) -> dict:
        try:
            response = self.cognito_client.admin_get_user(
                UserPoolId=self.user_pool_id,
                Username=email
            )
        except ClientError as e:
            if e.response['Error']['Code'] == 'UserNotFoundException':
                raise NotFound(f"No identity found for {email}") from e
            logger.error(f"Error looking up identity for {email}: {e}")
            raise UpstreamFailure("Identity provider unavailable") from e
        except BotoCoreError as e:
            logger.error(f"Identity provider unreachable: {e}")
            raise UpstreamFailure("Identity provider unavailable") from e

        attributes = _attributes(response.get("UserAttributes", []))
        return {
            "username": response["Username"],
            "uid": attributes.get("sub", response["Username"]),
            "email": attributes.get("email", email),
            "role": attributes.get(self.role_attribute),
        }

    def set_role_claim(self, username: str, role: str) -> None:
        try:
            self.cognito_client.admin_update_user_attributes(
                UserPoolId=self.user_pool_id,
                Username=username,
                UserAttributes=[{"Name": self.role_attribute, "Value": role}]
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error setting role claim for {username}: {e}")
            raise UpstreamFailure("Failed to update role claim") from e
