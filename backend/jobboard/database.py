from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from jobboard.config import settings


class Base(DeclarativeBase):
    pass


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(db_path: Path | None = None):
    path = db_path or settings.db_path
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def make_session_factory(db_path: Path | None = None) -> sessionmaker:
    return sessionmaker(bind=get_engine(db_path), autoflush=False, autocommit=False)


def init_db(db_path: Path | None = None):
    # Importing the models registers every table on Base.metadata
    import jobboard.models  # noqa: F401

    path = db_path or settings.db_path
    path.parent.mkdir(parents=True, exist_ok=True)
    engine = get_engine(path)
    Base.metadata.create_all(engine)
    engine.dispose()
