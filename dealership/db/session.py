from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from dealership.core.config import settings

DATABASE_URL = settings.DATABASE_URL

# SQLite connections are shared with FastAPI's threadpool workers
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db() -> None:
    """Create all tables known to the models' metadata."""
    # Imported here so the models are registered before create_all runs.
    from dealership.models import Base

    Base.metadata.create_all(bind=engine)
