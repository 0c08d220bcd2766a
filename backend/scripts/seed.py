"""Seed script to create a demo tenant admin and end user."""
import logging

from dokumenta.database import SessionLocal, init_db
from dokumenta.errors import DuplicateAccount
from dokumenta.logging_config import setup_logging
from dokumenta.models.tenant import AdminAccount, SubscriptionPlan
from dokumenta.models.user import User
from dokumenta.schemas.user import UserCreate
from dokumenta.services.accounts import AccountStore

logger = logging.getLogger("seed")


def seed_database():
    """Create the demo tenant and its demo user if missing."""
    init_db()
    db = SessionLocal()
    accounts = AccountStore(db)
    
    try:
        admin = db.query(AdminAccount).filter(AdminAccount.username == "admin").first()
        
        if not admin:
            admin = accounts.create_tenant(
                username="admin",
                password="admin123",
                company_name="Demo Firma",
                subscription_plan=SubscriptionPlan.PROFESSIONAL,
                max_clients=25,
                max_storage_mb=5120,
            )
            logger.info(f"Created admin: {admin.id} (admin / admin123)")
        else:
            logger.info(f"Admin already exists: {admin.id}")
        
        demo = db.query(User).filter(User.tenant_id == admin.id, User.username == "demo").first()
        
        if not demo:
            try:
                demo = accounts.create_user(
                    admin.id,
                    UserCreate(username="demo", password="demo123", full_name="Demo Korisnik"),
                )
                logger.info(f"Created user: {demo.id} (demo / demo123)")
            except DuplicateAccount:
                logger.info("Demo user already exists")
        
        logger.info("Seed completed successfully")
        
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    seed_database()
