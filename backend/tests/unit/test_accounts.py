"""Tests for the tenant and account store."""
import pytest


def add_active_users(db_session, tenant_id, count, prefix="client"):
    """Insert users directly, skipping bcrypt."""
    from dokumenta.models.user import User

    for i in range(count):
        db_session.add(User(tenant_id=tenant_id, username=f"{prefix}{i}", hashed_password="x"))
    db_session.commit()


class TestUniqueness:
    """Usernames and emails are unique per tenant only."""

    def test_username_scoped_to_tenant(self, accounts, sample_user, sample_tenant, other_tenant):
        """Test username lookup only sees the given tenant."""
        assert accounts.username_exists(sample_tenant.id, "ana")
        assert not accounts.username_exists(other_tenant.id, "ana")

    def test_email_scoped_to_tenant(self, accounts, sample_user, sample_tenant, other_tenant):
        """Test email lookup only sees the given tenant."""
        assert accounts.get_by_email(sample_tenant.id, "ana@example.com").id == sample_user.id
        assert accounts.get_by_email(other_tenant.id, "ana@example.com") is None

    def test_duplicate_username_rejected(self, accounts, sample_user, sample_tenant):
        """Test a taken username in the same tenant is refused."""
        from dokumenta.errors import DuplicateAccount
        from dokumenta.schemas.user import UserCreate

        with pytest.raises(DuplicateAccount):
            accounts.create_user(sample_tenant.id, UserCreate(username="ana", password="x"))

    def test_duplicate_email_rejected(self, accounts, sample_user, sample_tenant):
        """Test a taken email in the same tenant is refused."""
        from dokumenta.errors import DuplicateAccount
        from dokumenta.schemas.user import UserCreate

        with pytest.raises(DuplicateAccount):
            accounts.create_user(sample_tenant.id, UserCreate(username="ana2", email="ana@example.com", password="x"))

    def test_blank_email_stored_as_null(self, accounts, sample_tenant):
        """Test several users without an email can share a tenant."""
        from dokumenta.schemas.user import UserCreate, UserUpdate

        first = accounts.create_user(sample_tenant.id, UserCreate(username="bez1", email="", password="x"))
        second = accounts.create_user(sample_tenant.id, UserCreate(username="bez2", email="  ", password="x"))
        third = accounts.create_user(sample_tenant.id, UserCreate(username="bez3", email="b@example.com", password="x"))
        third = accounts.update_user(sample_tenant.id, third.id, UserUpdate(email=""))

        assert first.email is None
        assert second.email is None
        assert third.email is None

    def test_same_username_allowed_in_other_tenant(self, accounts, sample_user, other_tenant):
        """Test another tenant may reuse a username and email."""
        from dokumenta.schemas.user import UserCreate

        twin = accounts.create_user(other_tenant.id, UserCreate(username="ana", email="ana@example.com", password="x"))
        assert twin.tenant_id == other_tenant.id


class TestLimits:
    """Test subscription limit accounting."""

    def test_check_limits_counts_active_clients_only(self, db_session, accounts, sample_tenant, sample_user):
        """Test inactive users do not count against the client limit."""
        add_active_users(db_session, sample_tenant.id, 2)
        accounts.deactivate_user(sample_tenant.id, sample_user.id)

        limits = accounts.check_limits(sample_tenant.id)

        assert limits.active_clients == 2
        assert limits.max_clients == 10
        assert limits.can_add_client is True

    def test_create_user_at_limit_rejected(self, db_session, accounts, sample_tenant):
        """Test creating a user at max_clients fails."""
        from dokumenta.errors import LimitExceeded
        from dokumenta.schemas.user import UserCreate

        add_active_users(db_session, sample_tenant.id, 10)
        assert accounts.check_limits(sample_tenant.id).can_add_client is False

        with pytest.raises(LimitExceeded):
            accounts.create_user(sample_tenant.id, UserCreate(username="eleventh", password="x"))

    def test_reactivation_respects_limit(self, db_session, accounts, sample_tenant, sample_user):
        """Test reactivation fails when the tenant is full."""
        from dokumenta.errors import LimitExceeded
        from dokumenta.models.user import UserStatus
        from dokumenta.schemas.user import UserUpdate

        accounts.deactivate_user(sample_tenant.id, sample_user.id)
        add_active_users(db_session, sample_tenant.id, 10)

        with pytest.raises(LimitExceeded):
            accounts.update_user(sample_tenant.id, sample_user.id, UserUpdate(status=UserStatus.ACTIVE))
        assert accounts.get_user(sample_tenant.id, sample_user.id).status == "inactive"

    def test_storage_usage_in_mb(self, accounts, sample_tenant, uploaded_document):
        """Test storage usage is reported in megabytes."""
        limits = accounts.check_limits(sample_tenant.id)

        assert limits.storage_used_mb == round(uploaded_document.original_size / (1024 * 1024), 2)
        assert limits.storage_exceeded is False

    def test_storage_quota(self, db_session, accounts, sample_tenant):
        """Test the quota allows exactly max_storage_mb."""
        from dokumenta.errors import LimitExceeded

        sample_tenant.max_storage_mb = 1
        db_session.commit()

        accounts.ensure_storage_available(sample_tenant.id, 1024 * 1024)
        with pytest.raises(LimitExceeded):
            accounts.ensure_storage_available(sample_tenant.id, 1024 * 1024 + 1)


class TestUserLifecycle:
    """Test update, deactivation and deletion."""

    def test_update_allow_listed_fields(self, accounts, sample_tenant, sample_user):
        """Test allow-listed fields are updated."""
        from dokumenta.schemas.user import UserUpdate
        from dokumenta.services.authorization import verify_password

        user = accounts.update_user(
            sample_tenant.id,
            sample_user.id,
            UserUpdate(full_name="Ana Novak", phone="+381 11 123", password="nova"),
        )

        assert user.full_name == "Ana Novak"
        assert user.phone == "+381 11 123"
        assert verify_password("nova", user.hashed_password)
        assert user.tenant_id == sample_tenant.id

    def test_update_rejects_taken_username(self, accounts, sample_tenant, sample_user):
        """Test renaming to a taken username fails."""
        from dokumenta.errors import DuplicateAccount
        from dokumenta.schemas.user import UserCreate, UserUpdate

        accounts.create_user(sample_tenant.id, UserCreate(username="marko", password="x"))

        with pytest.raises(DuplicateAccount):
            accounts.update_user(sample_tenant.id, sample_user.id, UserUpdate(username="marko"))

    def test_update_other_tenant_user_not_found(self, accounts, other_tenant, sample_user):
        """Test a user of another tenant cannot be updated."""
        from dokumenta.errors import NotFoundError
        from dokumenta.schemas.user import UserUpdate

        with pytest.raises(NotFoundError):
            accounts.update_user(other_tenant.id, sample_user.id, UserUpdate(full_name="x"))

    def test_delete_user_with_documents_blocked(self, accounts, document_store, sample_tenant, sample_user, uploaded_document):
        """Test a user is deletable only once their documents are gone."""
        from dokumenta.errors import HasDependentDocuments

        with pytest.raises(HasDependentDocuments):
            accounts.delete_user(sample_tenant.id, sample_user.id)

        document_store.delete(sample_tenant.id, uploaded_document.id)
        accounts.delete_user(sample_tenant.id, sample_user.id)

        assert accounts.list_users(sample_tenant.id) == []

    def test_delete_tenant_blocked_while_owning_users(self, accounts, sample_tenant, sample_user):
        """Test a tenant is deletable only once it owns no users."""
        from dokumenta.errors import HasDependentDocuments

        with pytest.raises(HasDependentDocuments):
            accounts.delete_tenant(sample_tenant.id)

        accounts.delete_user(sample_tenant.id, sample_user.id)
        accounts.delete_tenant(sample_tenant.id)

        from dokumenta.errors import NotFoundError
        with pytest.raises(NotFoundError):
            accounts.get_tenant(sample_tenant.id)

    def test_delete_tenant_removes_leftover_history(self, db_session, accounts, document_store, lifecycle, sample_tenant, sample_user, uploaded_document):
        """Test tenant removal clears transitions of its deleted documents."""
        from dokumenta.models.history import StatusHistory

        lifecycle.set_status(sample_tenant.id, uploaded_document.id, "approved", sample_tenant.id)
        document_store.delete(sample_tenant.id, uploaded_document.id)
        accounts.delete_user(sample_tenant.id, sample_user.id)

        accounts.delete_tenant(sample_tenant.id)

        assert db_session.query(StatusHistory).count() == 0
