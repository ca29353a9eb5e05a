from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from deck_backend.app.core.settings import get_settings

settings = get_settings()

# SQLite needs check_same_thread=False when FastAPI hands the session to a worker thread
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Yield a database session and make sure it is closed after the request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
