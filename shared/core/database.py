from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, declarative_base
from shared.core.config import FARM_DATABASE_URL

Base = declarative_base()

POOL_SIZE = 5
MAX_OVERFLOW = 5


def _engine_options(url: str) -> dict:
    if make_url(url).get_backend_name() == "sqlite":
        # sqlite connections are shared between request threads
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_size": POOL_SIZE,          # max idle connections
        "max_overflow": MAX_OVERFLOW,    # max temporary extra connections
        "pool_timeout": 30,              # wait time before failing
    }


# Farm DB
farm_engine = create_engine(FARM_DATABASE_URL, **_engine_options(FARM_DATABASE_URL))
FarmSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=farm_engine)


# Dependency


def get_farm_db():
    db = FarmSessionLocal()
    try:
        yield db
    finally:
        db.close()
