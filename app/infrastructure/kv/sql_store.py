import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from ...application.ports.kv_store import KeyValueStore
from ...db.models import KeyValueEntry
from ...exceptions import StorageFailure
from .ranges import prefix_upper_bound

logger = logging.getLogger(__name__)


class _SqlTransaction:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, key: bytes) -> Optional[bytes]:
        entry = self.session.get(KeyValueEntry, key)
        return entry.value if entry else None

    def scan_prefix(self, prefix: bytes, limit: Optional[int] = None) -> Iterator[Tuple[bytes, bytes]]:
        query = select(KeyValueEntry).where(col(KeyValueEntry.key) >= prefix)
        upper = prefix_upper_bound(prefix)
        if upper is not None:
            query = query.where(col(KeyValueEntry.key) < upper)
        query = query.order_by(col(KeyValueEntry.key))
        if limit is not None:
            query = query.limit(limit)
        for entry in self.session.exec(query):
            yield entry.key, entry.value

    def put(self, key: bytes, value: bytes) -> None:
        self.session.merge(KeyValueEntry(key=key, value=value))


class SqlKeyValueStore(KeyValueStore):
    """Key-value space kept in a single ``kv_entries`` table.

    Keys are compared as raw bytes (BLOB on SQLite, BYTEA on Postgres), which
    gives the same ordering as the in-memory store.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    @contextmanager
    def _transaction(self) -> Iterator[_SqlTransaction]:
        with Session(self.engine) as session:
            try:
                with session.begin():
                    yield _SqlTransaction(session)
            except SQLAlchemyError as e:
                logger.error(f"Key-value transaction failed: {str(e)}")
                raise StorageFailure(f"database error: {e.__class__.__name__}") from e

    def read_transaction(self):
        return self._transaction()

    def write_transaction(self):
        return self._transaction()

    def close(self) -> None:
        self.engine.dispose()
