import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Tuple

try:
    import redis
except ImportError:  # pragma: no cover
    redis = None

from ...application.ports.kv_store import KeyValueStore
from ...exceptions import StorageFailure
from .ranges import prefix_upper_bound

logger = logging.getLogger(__name__)


class _RedisTransaction:
    def __init__(self, store: "RedisKeyValueStore") -> None:
        self.store = store
        self.pending: Dict[bytes, bytes] = {}

    def get(self, key: bytes) -> Optional[bytes]:
        if key in self.pending:
            return self.pending[key]
        return self.store.client.hget(self.store.data_key, key)

    def scan_prefix(self, prefix: bytes, limit: Optional[int] = None) -> Iterator[Tuple[bytes, bytes]]:
        upper = prefix_upper_bound(prefix)
        low = b"[" + prefix
        high = b"(" + upper if upper is not None else b"+"
        if limit is None:
            keys = self.store.client.zrangebylex(self.store.index_key, low, high)
        else:
            keys = self.store.client.zrangebylex(self.store.index_key, low, high, start=0, num=limit)
        if not keys:
            return
        values = self.store.client.hmget(self.store.data_key, keys)
        for key, value in zip(keys, values):
            if value is None:
                raise StorageFailure(f"index entry without value: {key!r}")
            yield key, value

    def put(self, key: bytes, value: bytes) -> None:
        self.pending[key] = value


class RedisKeyValueStore(KeyValueStore):
    """Key-value space on Redis.

    Values live in one hash; keys are mirrored in a sorted set with score 0 so
    that ZRANGEBYLEX returns them in byte order. A write transaction is sent as
    one MULTI/EXEC pipeline, so readers never see a key without its value.
    """

    def __init__(self, url: str, prefix: str = "ldn:") -> None:
        if redis is None:
            raise RuntimeError("redis package is not installed")
        self.client = redis.Redis.from_url(url)
        self.prefix = prefix
        self.data_key = f"{prefix}data"
        self.index_key = f"{prefix}index"

    @contextmanager
    def read_transaction(self) -> Iterator[_RedisTransaction]:
        try:
            yield _RedisTransaction(self)
        except redis.RedisError as e:
            logger.error(f"Redis read failed: {str(e)}")
            raise StorageFailure(f"redis error: {e.__class__.__name__}") from e

    @contextmanager
    def write_transaction(self) -> Iterator[_RedisTransaction]:
        txn = _RedisTransaction(self)
        try:
            yield txn
            if txn.pending:
                pipe = self.client.pipeline(transaction=True)
                pipe.hset(self.data_key, mapping=txn.pending)
                pipe.zadd(self.index_key, {key: 0 for key in txn.pending})
                pipe.execute()
        except redis.RedisError as e:
            logger.error(f"Redis write failed: {str(e)}")
            raise StorageFailure(f"redis error: {e.__class__.__name__}") from e

    def close(self) -> None:
        self.client.close()
