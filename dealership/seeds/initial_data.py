import logging
from sqlalchemy.orm import Session

from dealership.db.session import SessionLocal, init_db
from dealership.models import User
from dealership.core.security import get_password_hash

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def seed_database():
    logger.info("Creating tables...")
    init_db()

    db: Session = SessionLocal()

    try:
        # Create default admin user
        admin_user = db.query(User).filter(User.username == "admin").first()
        if not admin_user:
            logger.info("Creating default admin user...")
            admin_user = User(
                username="admin",
                email="admin@example.com",
                full_name="System Administrator",
                role="admin",
                hashed_password=get_password_hash("admin123"),
                is_active=True
            )
            db.add(admin_user)
        else:
            logger.info("Default admin user already exists.")

        db.commit()

        logger.info("Seeding complete.")

        print("-" * 50)
        logger.info("Default admin user credentials:")
        print("Username: admin")
        print("Password: admin123")
        print("-" * 50)

    except Exception as e:
        logger.error(f"An error occurred during seeding: {e}")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    # Run from the project root: python -m dealership.seeds.initial_data
    seed_database()
