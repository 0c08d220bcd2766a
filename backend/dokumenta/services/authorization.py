"""Principal resolution for bearer tokens.

Two principal kinds exist: end users and admins. An admin is the root of
its own tenant, so its tenant id is its own id. For end users the tenant
id is always read from the current account row, never from the token, so
reassignment or deactivation takes effect on the next request.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

from dokumenta.config import Settings
from dokumenta.errors import AccountInactive, InvalidCredential, PrincipalNotFound, TokenExpired
from dokumenta.models.tenant import AdminAccount
from dokumenta.models.user import User

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class Role(str, Enum):
    """Principal roles."""
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller."""
    id: int
    tenant_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError:
        # Malformed stored hash
        return False


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def create_access_token(
    subject_id: int,
    role: Role,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed, time-limited JWT for a principal."""
    if expires_delta is None:
        minutes = (
            settings.admin_token_expire_minutes if role == Role.ADMIN
            else settings.access_token_expire_minutes
        )
        expires_delta = timedelta(minutes=minutes)
    to_encode = {
        "sub": str(subject_id),
        "role": role.value,
        "exp": datetime.utcnow() + expires_delta,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str, settings: Settings) -> tuple[int, Role]:
    """Verify signature and validity window; return (subject id, role)."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpired()
    except JWTError:
        raise InvalidCredential("Could not validate credentials")

    try:
        subject_id = int(payload["sub"])
        role = Role(payload["role"])
    except (KeyError, TypeError, ValueError):
        raise InvalidCredential("Malformed token payload")
    return subject_id, role


def resolve_principal(db: Session, token: str, settings: Settings) -> Principal:
    """Resolve a bearer token to a principal backed by a live account."""
    subject_id, role = decode_token(token, settings)

    if role == Role.ADMIN:
        admin = db.get(AdminAccount, subject_id)
        if admin is None:
            raise PrincipalNotFound()
        if not admin.is_active:
            raise AccountInactive()
        return Principal(id=admin.id, tenant_id=admin.id, role=Role.ADMIN)

    user = db.get(User, subject_id)
    if user is None:
        raise PrincipalNotFound()
    if not user.is_active or (user.tenant is not None and not user.tenant.is_active):
        raise AccountInactive()
    return Principal(id=user.id, tenant_id=user.tenant_id, role=Role.USER)


def authenticate_admin(db: Session, username: str, password: str) -> AdminAccount:
    """Check admin credentials and stamp the last login."""
    admin = db.query(AdminAccount).filter(AdminAccount.username == username).first()
    if not admin or not verify_password(password, admin.hashed_password):
        logger.info(f"Failed admin login for '{username}'")
        raise InvalidCredential("Incorrect username or password")
    if not admin.is_active:
        raise AccountInactive()

    admin.last_login = datetime.utcnow()
    db.commit()
    db.refresh(admin)
    return admin


def authenticate_user(
    db: Session,
    username: str,
    password: str,
    tenant_id: int | None = None,
) -> User:
    """Check end user credentials and stamp the last login.

    Usernames are unique per tenant only. Without a tenant id the login
    succeeds only if exactly one account with that username accepts the
    password.
    """
    query = db.query(User).filter(User.username == username)
    if tenant_id is not None:
        query = query.filter(User.tenant_id == tenant_id)

    matches = [u for u in query.all() if verify_password(password, u.hashed_password)]
    if len(matches) != 1:
        logger.info(f"Failed user login for '{username}' ({len(matches)} matching accounts)")
        raise InvalidCredential("Incorrect username or password")

    user = matches[0]
    if not user.is_active or not user.tenant.is_active:
        raise AccountInactive()

    user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(user)
    return user
