from sqlmodel import SQLModel, create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from .db.models import KeyValueEntry  # noqa: F401  (registers the table)

# kv_entries keys are unsized binary primary keys, which MySQL/MariaDB cannot index
SUPPORTED_BACKENDS = ("sqlite", "postgresql")


def build_engine(db_url: str, echo: bool = False) -> Engine:
    backend = make_url(db_url).get_backend_name()
    if backend not in SUPPORTED_BACKENDS:
        raise ValueError(f"Unsupported database backend {backend!r}; use one of {SUPPORTED_BACKENDS}")

    # Choose engine options based on database scheme
    engine_kwargs = {}

    if db_url.startswith("sqlite"):
        # SQLite specific connect args
        engine_kwargs.update({
            "connect_args": {"check_same_thread": False}
        })
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every checkout sees an empty database
            engine_kwargs["poolclass"] = StaticPool
    else:
        # Better resiliency for managed Postgres
        engine_kwargs.update({
            "pool_pre_ping": True,
            "pool_recycle": 300,
            "pool_size": 5,
            "max_overflow": 10,
        })

    return create_engine(db_url, echo=echo, **engine_kwargs)


def create_db_and_tables(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)
