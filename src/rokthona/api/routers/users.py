from fastapi import APIRouter, Depends, Query
from typing import Optional

from rokthona.api.dependencies import get_user_service
from rokthona.api.guards import (
    get_current_principal,
    require_admin,
    require_self,
    require_volunteer,
)
from rokthona.api.schemas import (
    RoleAssignmentRequest,
    RoleAssignmentResponse,
    StatsResponse,
    UserCreateRequest,
    UserProfileUpdateRequest,
    UserStatusRequest,
)
from rokthona.core.dependencies import get_data_access, get_identity_provider
from rokthona.models.base import Role
from rokthona.models.user import AccountStatus, Principal, User
from rokthona.services.access_control import assign_role
from rokthona.services.user_service import UserService

router = APIRouter(tags=["users"])


@router.post("/users", response_model=User)
def register_user(body: UserCreateRequest, users: UserService = Depends(get_user_service)):
    return users.register(body.model_dump(exclude_none=True))


@router.get("/users", response_model=list[User])
def list_users(
    role: Optional[Role] = None,
    status: Optional[AccountStatus] = None,
    _: Principal = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    return users.list_users(role=role, status=status)


@router.get("/users/{email}", response_model=User)
def get_user(
    email: str,
    _: Principal = Depends(require_self),
    users: UserService = Depends(get_user_service),
):
    return users.get_user(email)


@router.put("/users/{email}", response_model=User)
def update_profile(
    email: str,
    body: UserProfileUpdateRequest,
    _: Principal = Depends(require_self),
    users: UserService = Depends(get_user_service),
):
    return users.update_profile(email, body.model_dump(mode="json", exclude_unset=True))


@router.patch("/users/{email}/status", response_model=User)
def set_account_status(
    email: str,
    body: UserStatusRequest,
    _: Principal = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    return users.set_status(email, body.status)


@router.put("/set-role/{email}", response_model=RoleAssignmentResponse)
def set_role(
    email: str,
    body: RoleAssignmentRequest,
    _: Principal = Depends(require_admin),
    data_access=Depends(get_data_access),
    identity_provider=Depends(get_identity_provider),
):
    """Change a user's role in Cognito and the directory. Admins only."""
    user = assign_role(data_access, identity_provider, email, body.role)
    return RoleAssignmentResponse(message=f"User updated to {body.role}.", user=user)


@router.get("/recipients", response_model=list[User])
def list_recipients(
    _: Principal = Depends(get_current_principal),
    users: UserService = Depends(get_user_service),
):
    return users.list_recipients()


@router.get("/donors", response_model=list[User])
def search_donors(
    blood_group: Optional[str] = Query(None, alias="bloodGroup"),
    district: Optional[str] = None,
    upazila: Optional[str] = None,
    users: UserService = Depends(get_user_service),
):
    return users.search_donors(blood_group, district, upazila)


@router.get("/admin/stats", response_model=StatsResponse)
def admin_stats(
    _: Principal = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    return users.get_stats()


@router.get("/volunteers/stats", response_model=StatsResponse)
def volunteer_stats(
    _: Principal = Depends(require_volunteer),
    users: UserService = Depends(get_user_service),
):
    return users.get_stats()
