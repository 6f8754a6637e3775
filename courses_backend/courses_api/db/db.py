import os
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv

from courses_api.db.models import Base

# Load environment variables from .env file
load_dotenv()

DATABASE_URL = os.environ.get("DATABASE_URL")

if not DATABASE_URL:
    raise ValueError("DATABASE_URL environment variable must be set in your .env file (see .env.example)")


# PUBLIC_INTERFACE
def engine_options(url: str) -> dict:
    """Extra create_engine() arguments for the given database URL."""
    if make_url(url).get_backend_name() == "sqlite":
        # Handlers run in FastAPI's threadpool, not the thread that opened the connection
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(DATABASE_URL, echo=False, future=True, **engine_options(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# PUBLIC_INTERFACE
def init_db(bind=None):
    """Create every table known to the models' metadata."""
    Base.metadata.create_all(bind=bind or engine)


# PUBLIC_INTERFACE
def get_db():
    """
    Yields a SQLAlchemy session for use in dependency injection.
    Closes the session after use.
    Example usage (FastAPI):
        def endpoint(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
