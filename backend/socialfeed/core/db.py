from sqlmodel import Session, SQLModel, create_engine

from socialfeed import models  # noqa: F401  registers every table on SQLModel.metadata
from socialfeed.core.config import settings

engine = create_engine(str(settings.SQLALCHEMY_DATABASE_URI), pool_pre_ping=True)


def init_db(session: Session) -> None:
    # Tables are normally created by Alembic migrations. This is used for
    # local SQLite setups where migrations are not run.
    SQLModel.metadata.create_all(session.get_bind())
