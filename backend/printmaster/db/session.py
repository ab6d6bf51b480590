from functools import lru_cache

from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from printmaster import config


def make_engine(url: str, echo: bool = False):
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(url, echo=echo)


@lru_cache(maxsize=None)
def get_engine():
    return make_engine(config.DATABASE_URL, echo=config.SQL_ECHO)


def create_tables(engine) -> None:
    # registers the table on SQLModel.metadata
    from printmaster.models.record import StoredRecord  # noqa: F401

    SQLModel.metadata.create_all(engine)
