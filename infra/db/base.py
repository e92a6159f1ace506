# infra/db/base.py
from __future__ import annotations
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy import create_engine, event
from pathlib import Path
import logging

from infra.path import default_db_path

logger = logging.getLogger(__name__)

Base = declarative_base()

db_path: Path = default_db_path()
db_path.parent.mkdir(parents=True, exist_ok=True)

db_url = f"sqlite:///{db_path.as_posix()}"
logger.info("Using SQLite database at: %s", db_url)


def enable_sqlite_foreign_keys(engine) -> None:
    # SQLite ignores ON DELETE CASCADE unless the pragma is on per connection
    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_engine(
    db_url,
    echo=False,
    future=True,
)
enable_sqlite_foreign_keys(engine)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
