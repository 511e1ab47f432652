"""
SQLAlchemy engine and session. Supports PostgreSQL and SQLite (local use and tests).
One session per request via get_db; the record store wraps it (see services/store.py).
"""
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from taskboard.config import settings

logger = logging.getLogger(__name__)

_is_sqlite = "sqlite" in settings.database_url
_connect_args = {"check_same_thread": False} if _is_sqlite else {}
engine = create_engine(
    settings.database_url,
    pool_pre_ping=not _is_sqlite,
    connect_args=_connect_args,
    echo=False,  # Set True for SQL logging during development
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# Demo accounts (email, name, role, password). Passwords double as the demo bypass values.
DEMO_USERS = (
    ("admin@university.edu", "Administrateur", "admin", "admin123"),
    ("student@university.edu", "Étudiant Test", "student", "student123"),
    ("enseignant@university.edu", "Enseignant Test", "teacher", "enseignant123"),
)


def create_tables():
    """Import all models so they register with Base, then create missing tables."""
    from taskboard.models import user, task, announcement, event, school_class, progress  # noqa: F401
    Base.metadata.create_all(bind=engine)


def seed_demo_users(db) -> int:
    """Insert the demo accounts when no user exists yet. Returns the number of users created."""
    from taskboard.models.user import User
    from taskboard.services.auth import hash_password

    if db.query(User).count() > 0:
        return 0
    for email, name, role, password in DEMO_USERS:
        db.add(User(email=email, name=name, role=role, password_hash=hash_password(password)))
    db.commit()
    logger.info("Seeded %s demo users", len(DEMO_USERS))
    return len(DEMO_USERS)


def init_db():
    """Create tables (SQLite only; PostgreSQL uses Alembic) and seed demo users. Call once at app startup."""
    if _is_sqlite:
        create_tables()
    if not settings.seed_demo_users:
        return
    db = SessionLocal()
    try:
        seed_demo_users(db)
    except Exception as e:
        db.rollback()
        logger.warning("Demo user seed failed (run: alembic upgrade head): %s", e)
    finally:
        db.close()


def get_db():
    """Dependency: yield a DB session, close after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
