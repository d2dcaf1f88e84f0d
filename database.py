import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from config import settings

logger = logging.getLogger(__name__)

# ---------------- SQLAlchemy setup ----------------
DATABASE_URL = settings.DATABASE_URL

_engine_kwargs = {"echo": settings.SQL_ECHO, "pool_pre_ping": True}
if DATABASE_URL.startswith("sqlite"):
    # TestClient serves requests from a worker thread
    _engine_kwargs["connect_args"] = {"check_same_thread": False}

engine = create_engine(DATABASE_URL, **_engine_kwargs)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db():
    # Import models so SQLAlchemy registers their tables.
    from model import admin_model, appointment_model, doctor_model, patient_model, session_model  # noqa: F401
    Base.metadata.create_all(bind=engine)


def check_connection() -> bool:
    try:
        with engine.connect():
            logger.info("Successfully connected to database")
        return True
    except SQLAlchemyError as e:
        logger.error("Error connecting to the database: %s", e)
        return False


# ---------------- get_db for FastAPI dependencies ----------------
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
