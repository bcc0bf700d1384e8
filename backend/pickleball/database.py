from pathlib import Path
from typing import Generator

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from pickleball.config import DATABASE_URL, SQL_ECHO

_is_sqlite = DATABASE_URL.startswith("sqlite")
_connect_args = {"check_same_thread": False} if _is_sqlite else {}

if _is_sqlite and ":memory:" not in DATABASE_URL:
    db_path = DATABASE_URL.replace("sqlite:///", "", 1)
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

engine: Engine = create_engine(
    DATABASE_URL,
    echo=SQL_ECHO,
    connect_args=_connect_args,
)


def get_session() -> Generator[Session, None, None]:
    """Get database session"""
    with Session(engine) as session:
        yield session


def init_db() -> None:
    """Initialize database - create all tables"""
    # Import all models to ensure they're registered with SQLModel metadata
    from pickleball.models.court import Court  # noqa: F401
    from pickleball.models.match import Match  # noqa: F401
    from pickleball.models.partnership import Partnership  # noqa: F401
    from pickleball.models.play_date import PlayDate  # noqa: F401
    from pickleball.models.player import Player  # noqa: F401
    from pickleball.models.score_change import ScoreChange  # noqa: F401

    SQLModel.metadata.create_all(engine)
