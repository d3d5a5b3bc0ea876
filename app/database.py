"""
Database connection, session management, and table creation.
Uses SQLAlchemy; SQLite for development, PostgreSQL in production. All models
are auto-imported here so create_tables() creates every table in one call.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

_engine_kwargs: dict = {"echo": False}   # Set True to log all SQL queries (debug only)
if _is_sqlite:
    # Background tasks open their own sessions outside the request thread
    _engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
    _engine_kwargs.update({
        "pool_pre_ping": True,          # Auto-reconnect if DB connection drops
        "pool_size": 10,
        "max_overflow": 20,
    })

engine = create_engine(settings.DATABASE_URL, **_engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from app.models.user import User                           # noqa
    from app.models.vehicle import Vehicle                     # noqa
    from app.models.vehicle_document import VehicleDocument    # noqa
    from app.models.vehicle_history import VehicleAssignment, VehicleStatusChange  # noqa
    from app.models.chauffeur import Chauffeur                 # noqa
    from app.models.trip import Trip                           # noqa
    from app.models.notification import SystemNotification     # noqa
    from app.models.email import SimulatedEmail                # noqa

    Base.metadata.create_all(bind=engine)
