"""Pytest configuration and fixtures."""
import io
import os

# Must be set before dokumenta.database builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dokumenta.config import Settings
from dokumenta.database import Base
import dokumenta.models  # noqa: F401


@pytest.fixture
def settings(tmp_path):
    """Test settings."""
    return Settings(
        database_url="sqlite://",
        secret_key="test-secret-key",
        upload_dir=str(tmp_path / "uploads"),
        debug=True,
    )


@pytest.fixture(scope="function")
def db_session():
    """Create a test database session."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSessionLocal()
    
    yield session
    
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def accounts(db_session):
    from dokumenta.services.accounts import AccountStore
    return AccountStore(db_session)


@pytest.fixture
def sample_tenant(accounts):
    """Tenant 'acme' with default limits."""
    return accounts.create_tenant(username="acme", password="acme-pass", company_name="Acme d.o.o.")


@pytest.fixture
def other_tenant(accounts):
    """A second, unrelated tenant."""
    return accounts.create_tenant(username="globex", password="globex-pass", company_name="Globex")


@pytest.fixture
def sample_user(accounts, sample_tenant):
    """End user 'ana' in the sample tenant."""
    from dokumenta.schemas.user import UserCreate
    return accounts.create_user(
        sample_tenant.id,
        UserCreate(username="ana", email="ana@example.com", password="ana-pass", full_name="Ana Anić"),
    )


@pytest.fixture
def storage(settings):
    from dokumenta.services.storage import FileStorage
    return FileStorage.from_settings(settings)


@pytest.fixture
def processor(settings, storage):
    from dokumenta.services.processing import FileProcessor
    return FileProcessor(settings, storage)


@pytest.fixture
def document_store(db_session, settings, storage):
    from dokumenta.services.documents import DocumentStore
    return DocumentStore(db_session, settings, storage)


@pytest.fixture
def notifications(db_session):
    from dokumenta.services.notifications import NotificationService
    return NotificationService(db_session)


@pytest.fixture
def event_bus(notifications):
    from dokumenta.services.events import EventBus
    bus = EventBus()
    notifications.register(bus)
    return bus


@pytest.fixture
def lifecycle(db_session, document_store, event_bus):
    from dokumenta.services.lifecycle import LifecycleEngine
    return LifecycleEngine(db_session, document_store, event_bus)


@pytest.fixture
def upload_service(db_session, settings, processor, accounts, document_store, lifecycle):
    from dokumenta.services.uploads import UploadService
    return UploadService(db_session, settings, processor, accounts, document_store, lifecycle)


@pytest.fixture
def make_image():
    """Factory for in-memory images."""
    def _make(size=(800, 600), fmt="JPEG", color=(200, 120, 40), noise=False, **save_kwargs) -> bytes:
        if noise:
            img = Image.effect_noise(size, 60).convert("RGB")
        else:
            img = Image.new("RGB", size, color)
        buffer = io.BytesIO()
        img.save(buffer, format=fmt, **save_kwargs)
        return buffer.getvalue()
    return _make


@pytest.fixture
def uploaded_document(upload_service, sample_tenant, sample_user, make_image):
    """A JPEG receipt uploaded by the sample user."""
    return upload_service.upload(
        tenant_id=sample_tenant.id,
        user_id=sample_user.id,
        buffer=make_image(),
        original_filename="receipt.jpg",
        mime_type="image/jpeg",
        document_type="racun",
    )
