from sqlalchemy import create_engine, event            # SQLAlchemy engine factory
from sqlalchemy.orm import declarative_base, sessionmaker  # Base class / session factory

from config.settings import settings                    # ✅ environment settings


def _make_engine(url: str):
    connect_args = {}
    if url.startswith("sqlite"):
        # FastAPI runs sync endpoints in a thread pool
        connect_args["check_same_thread"] = False
    eng = create_engine(url, echo=settings.DB_ECHO, connect_args=connect_args)

    if url.startswith("sqlite"):
        # SQLite leaves foreign keys off unless asked per connection
        @event.listens_for(eng, "connect")
        def _enable_sqlite_fk(dbapi_conn, _record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return eng


# ✅ engine built from the configured DB URL
engine = _make_engine(settings.DATABASE_URL)

# ✅ session factory: one session per request
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ✅ declarative Base shared by every model
Base = declarative_base()


# ==========================================================
# [common] request-scoped DB session
# ==========================================================
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create every table registered on Base (no migrations)."""
    # table modules must be imported so they register on Base
    from models import grades, students, subjects  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
