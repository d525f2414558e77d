"""Database connection and session management."""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from gamereview.config import settings
from gamereview.models.base import Base

# Railway/Heroku use postgres:// but SQLAlchemy 1.4+ requires postgresql://
database_url = settings.database_url
if database_url.startswith("postgres://"):
    database_url = database_url.replace("postgres://", "postgresql://", 1)

# In-memory SQLite must share one connection; file databases get a real pool
# so batch moderation workers each hold their own connection.
engine = create_engine(
    database_url,
    connect_args={"check_same_thread": False} if "sqlite" in database_url else {},
    poolclass=StaticPool if ":memory:" in database_url else None,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def session_factory_for(db: Session) -> sessionmaker:
    """Session factory bound to the same engine as ``db``.

    Used by batch moderation, where every id runs in its own session.
    """
    return sessionmaker(autocommit=False, autoflush=False, bind=db.get_bind())


def init_db() -> None:
    """Create all tables."""
    Base.metadata.create_all(bind=engine)
