"""Tenant and end user account store.

Usernames and emails are unique within a tenant, not globally. The
limit check before creating a user is not atomic with the insert: two
concurrent creations near max_clients can both pass.
"""
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from dokumenta.errors import DuplicateAccount, HasDependentDocuments, LimitExceeded, NotFoundError, PortalError
from dokumenta.models.document import Document
from dokumenta.models.history import StatusHistory
from dokumenta.models.tenant import AdminAccount, SubscriptionPlan
from dokumenta.models.user import User, UserStatus
from dokumenta.schemas.tenant import TenantLimits
from dokumenta.schemas.user import UserCreate, UserUpdate
from dokumenta.services.authorization import get_password_hash

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


class AccountStore:
    """Admin (tenant) and end user accounts."""

    def __init__(self, db: Session):
        self.db = db

    # ============ Tenants ============

    def create_tenant(
        self,
        username: str,
        password: str,
        company_name: str,
        subscription_plan: SubscriptionPlan = SubscriptionPlan.BASIC,
        max_clients: int = 10,
        max_storage_mb: int = 1024,
        email: str | None = None,
    ) -> AdminAccount:
        if self.db.query(AdminAccount).filter(AdminAccount.username == username).first():
            raise DuplicateAccount("Admin username already exists")
        admin = AdminAccount(
            username=username,
            hashed_password=get_password_hash(password),
            email=email,
            company_name=company_name,
            subscription_plan=SubscriptionPlan(subscription_plan).value,
            max_clients=max_clients,
            max_storage_mb=max_storage_mb,
            is_active=True,
        )
        self.db.add(admin)
        self.db.commit()
        self.db.refresh(admin)
        logger.info(f"Tenant {admin.id} ({company_name}) created")
        return admin

    def get_tenant(self, tenant_id: int) -> AdminAccount:
        tenant = self.db.get(AdminAccount, tenant_id)
        if tenant is None:
            raise NotFoundError("Tenant not found")
        return tenant

    def delete_tenant(self, tenant_id: int) -> None:
        """Remove a tenant; blocked while it owns any user or document."""
        tenant = self.get_tenant(tenant_id)
        owns_users = self.db.query(User.id).filter(User.tenant_id == tenant_id).first() is not None
        owns_documents = self.db.query(Document.id).filter(Document.tenant_id == tenant_id).first() is not None
        if owns_users or owns_documents:
            raise HasDependentDocuments("Tenant still owns users or documents")
        # Transitions of already deleted documents go with their tenant
        self.db.query(StatusHistory).filter(StatusHistory.changed_by == tenant_id).delete(synchronize_session=False)
        self.db.delete(tenant)
        self.db.commit()
        logger.info(f"Tenant {tenant_id} deleted")

    def storage_used_bytes(self, tenant_id: int) -> int:
        return int(self.db.query(func.coalesce(func.sum(Document.original_size), 0)).filter(
            Document.tenant_id == tenant_id
        ).scalar())

    def active_client_count(self, tenant_id: int) -> int:
        return self.db.query(func.count(User.id)).filter(
            User.tenant_id == tenant_id,
            User.status == UserStatus.ACTIVE.value,
        ).scalar()

    def check_limits(self, tenant_id: int) -> TenantLimits:
        """Current usage against the tenant's subscription limits."""
        tenant = self.get_tenant(tenant_id)
        active_clients = self.active_client_count(tenant_id)
        storage_used_mb = round(self.storage_used_bytes(tenant_id) / BYTES_PER_MB, 2)
        return TenantLimits(
            tenant_id=tenant_id,
            active_clients=active_clients,
            max_clients=tenant.max_clients,
            storage_used_mb=storage_used_mb,
            max_storage_mb=tenant.max_storage_mb,
            can_add_client=active_clients < tenant.max_clients,
            storage_exceeded=storage_used_mb >= tenant.max_storage_mb,
        )

    def ensure_storage_available(self, tenant_id: int, incoming_bytes: int) -> None:
        tenant = self.get_tenant(tenant_id)
        used = self.storage_used_bytes(tenant_id)
        if used + incoming_bytes > tenant.max_storage_mb * BYTES_PER_MB:
            raise LimitExceeded(
                f"Storage limit of {tenant.max_storage_mb} MB reached",
                storage_used_mb=round(used / BYTES_PER_MB, 2),
            )

    # ============ Users ============

    def username_exists(self, tenant_id: int, username: str, exclude_id: int | None = None) -> bool:
        query = self.db.query(User.id).filter(User.tenant_id == tenant_id, User.username == username)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None

    def get_by_email(self, tenant_id: int, email: str) -> User | None:
        return self.db.query(User).filter(User.tenant_id == tenant_id, User.email == email).first()

    def list_users(self, tenant_id: int) -> list[User]:
        return self.db.query(User).filter(User.tenant_id == tenant_id).order_by(User.created_at.desc(), User.id.desc()).all()

    def get_user(self, tenant_id: int, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id, User.tenant_id == tenant_id).first()
        if not user:
            raise NotFoundError("User not found")
        return user

    def _ensure_client_slot(self, tenant_id: int) -> None:
        limits = self.check_limits(tenant_id)
        if not limits.can_add_client:
            raise LimitExceeded(
                f"Client limit of {limits.max_clients} reached",
                active_clients=limits.active_clients,
            )

    def create_user(self, tenant_id: int, data: UserCreate) -> User:
        self._ensure_client_slot(tenant_id)
        if self.username_exists(tenant_id, data.username):
            raise DuplicateAccount("Username already exists")
        if data.email and self.get_by_email(tenant_id, data.email):
            raise DuplicateAccount("Email already registered")

        user = User(
            tenant_id=tenant_id,
            username=data.username,
            email=data.email,
            hashed_password=get_password_hash(data.password),
            full_name=data.full_name,
            phone=data.phone,
            status=UserStatus.ACTIVE.value,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"User {user.id} ({user.username}) created in tenant {tenant_id}")
        return user

    # Explicit allow-list: only these fields can be changed through update_user

    def _set_username(self, user: User, value: str) -> None:
        if self.username_exists(user.tenant_id, value, exclude_id=user.id):
            raise DuplicateAccount("Username already exists")
        user.username = value

    def _set_email(self, user: User, value: str | None) -> None:
        if value:
            existing = self.get_by_email(user.tenant_id, value)
            if existing and existing.id != user.id:
                raise DuplicateAccount("Email already registered")
        user.email = value

    def _set_full_name(self, user: User, value: str | None) -> None:
        user.full_name = value

    def _set_phone(self, user: User, value: str | None) -> None:
        user.phone = value

    def _set_password(self, user: User, value: str) -> None:
        user.hashed_password = get_password_hash(value)

    def _set_status(self, user: User, value: UserStatus) -> None:
        value = UserStatus(value).value
        if value == UserStatus.ACTIVE.value and user.status != UserStatus.ACTIVE.value:
            self._ensure_client_slot(user.tenant_id)
        user.status = value

    _SETTERS = {
        "username": _set_username,
        "email": _set_email,
        "full_name": _set_full_name,
        "phone": _set_phone,
        "password": _set_password,
        "status": _set_status,
    }

    def update_user(self, tenant_id: int, user_id: int, data: UserUpdate) -> User:
        user = self.get_user(tenant_id, user_id)
        try:
            for field, value in data.model_dump(exclude_unset=True).items():
                setter = self._SETTERS.get(field)
                if setter is None:
                    continue
                if value is None and field in ("username", "password", "status"):
                    continue
                setter(self, user, value)
        except PortalError:
            self.db.rollback()
            raise
        self.db.commit()
        self.db.refresh(user)
        return user

    def deactivate_user(self, tenant_id: int, user_id: int) -> User:
        return self.update_user(tenant_id, user_id, UserUpdate(status=UserStatus.INACTIVE))

    def delete_user(self, tenant_id: int, user_id: int) -> None:
        """Delete an account that owns no documents."""
        user = self.get_user(tenant_id, user_id)
        document_count = self.db.query(func.count(Document.id)).filter(Document.user_id == user.id).scalar()
        if document_count:
            raise HasDependentDocuments(
                f"User owns {document_count} document(s)",
                document_count=document_count,
            )
        self.db.delete(user)
        self.db.commit()
        logger.info(f"User {user_id} deleted from tenant {tenant_id}")
