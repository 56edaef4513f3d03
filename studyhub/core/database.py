from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from studyhub.core.config import get_settings

settings = get_settings()

engine = create_engine(settings.database_url, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a database session for one request and always close it."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
