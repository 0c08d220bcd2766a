"""Authentication router and principal dependencies."""
from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from dokumenta.config import Settings, get_settings
from dokumenta.database import get_db
from dokumenta.errors import Forbidden, InvalidCredential, NotFoundError
from dokumenta.models.tenant import AdminAccount
from dokumenta.models.user import User
from dokumenta.schemas.tenant import AdminRead
from dokumenta.schemas.user import LoginRequest, LoginResponse, UserRead
from dokumenta.services.authorization import (
    Principal,
    Role,
    authenticate_admin,
    authenticate_user,
    create_access_token,
    resolve_principal,
)

router = APIRouter(tags=["auth"])

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Principal:
    """Resolve the bearer token into a principal."""
    if credentials is None or not credentials.credentials:
        raise InvalidCredential("Token required")
    return resolve_principal(db, credentials.credentials, settings)


def require_role(*roles: Role):
    """Dependency to require specific roles."""
    async def role_checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in roles:
            raise Forbidden()
        return principal
    return role_checker


require_user = require_role(Role.USER)
require_admin = require_role(Role.ADMIN)


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """End user login."""
    user = authenticate_user(db, credentials.username, credentials.password, credentials.tenant_id)
    token = create_access_token(user.id, Role.USER, settings)
    return LoginResponse(
        token=token,
        user=UserRead.model_validate(user).model_dump(mode="json") | {"role": Role.USER.value},
    )


@router.post("/admin/login", response_model=LoginResponse)
async def admin_login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Tenant admin login."""
    admin = authenticate_admin(db, credentials.username, credentials.password)
    token = create_access_token(admin.id, Role.ADMIN, settings)
    return LoginResponse(
        token=token,
        user=AdminRead.model_validate(admin).model_dump(mode="json") | {"role": Role.ADMIN.value},
    )


@router.get("/me", response_model=UserRead)
async def get_me(
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Current end user."""
    user = db.get(User, principal.id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.get("/admin/me", response_model=AdminRead)
async def get_admin_me(
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Current admin."""
    admin = db.get(AdminAccount, principal.id)
    if admin is None:
        raise NotFoundError("Admin not found")
    return admin
