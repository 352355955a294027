# foodcourt/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from foodcourt.utils.settings import DATABASE_URL, DB_TIMEOUT_SECONDS


def _engine_kwargs(url: str) -> dict:
    #every statement is bounded, a timeout fails the operation
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"timeout": DB_TIMEOUT_SECONDS, "check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            #one shared connection, otherwise each thread sees an empty db
            kwargs["poolclass"] = StaticPool
        return kwargs

    return {
        "pool_pre_ping": True,
        "pool_timeout": DB_TIMEOUT_SECONDS,
        "connect_args": {
            "connect_timeout": DB_TIMEOUT_SECONDS,
            "options": f"-c statement_timeout={DB_TIMEOUT_SECONDS * 1000}",
        },
    }


engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
