"""Database setup with SQLAlchemy."""
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

from dokumenta.config import get_settings


settings = get_settings()


def build_engine(database_url: str):
    """Create an engine; SQLite gets a single shared connection."""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def get_db():
    """Dependency for database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables."""
    import dokumenta.models  # noqa: F401  registers mappers
    Base.metadata.create_all(bind=engine)


def ping_db(db) -> bool:
    """Run a trivial query to confirm connectivity."""
    db.execute(text("SELECT 1"))
    return True
