import logging

from rokthona.core.errors import Conflict, NotFound
from rokthona.data_access.dynamodb import DynamoDataAccess
from rokthona.models.user import User

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, data_access: DynamoDataAccess):
        self.data_access = data_access

    def register(self, profile: dict) -> dict:
        # Everyone starts as a donor; roles are only granted through set-role.
        profile = {k: v for k, v in profile.items() if k not in ("role", "status", "created_at")}
        user = User(**profile)
        created = self.data_access.create_user(user)
        if created is None:
            raise Conflict("User already exists")
        logger.info(f"Registered user {user.email}")
        return created

    def get_user(self, email: str) -> dict:
        user = self.data_access.get_user(email)
        if user is None:
            raise NotFound("User not found")
        return user

    def update_profile(self, email: str, fields: dict) -> dict:
        updated = self.data_access.update_user(email, fields)
        if updated is None:
            raise NotFound("User not found")
        return updated

    def set_status(self, email: str, status: str) -> dict:
        updated = self.data_access.update_user(email, {"status": status})
        if updated is None:
            raise NotFound("User not found")
        logger.info(f"Account status of {email} set to {status}")
        return updated

    def list_users(self, role: str | None = None, status: str | None = None) -> list[dict]:
        return self.data_access.list_users(role=role, status=status)

    def list_recipients(self) -> list[dict]:
        return self.data_access.list_users(role="recipient")

    def search_donors(self, blood_group: str | None = None, district: str | None = None,
                      upazila: str | None = None) -> list[dict]:
        if blood_group:
            blood_group = blood_group.strip().upper()
            # An unencoded "+" in a query string arrives as a space.
            if blood_group in ("A", "B", "O", "AB"):
                blood_group += "+"
        return self.data_access.search_donors(blood_group, district, upazila)

    def get_stats(self) -> dict:
        return {
            "total_users": self.data_access.count_users(),
            "total_requests": self.data_access.count_donation_requests(),
            "total_funding": self.data_access.get_total_funding() / 100.0,
        }
