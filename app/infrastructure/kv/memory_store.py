import threading
from bisect import bisect_left, insort
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple

from ...application.ports.kv_store import KeyValueStore


class _Snapshot:
    def __init__(self, keys: List[bytes], values: Dict[bytes, bytes]) -> None:
        self.keys = keys
        self.values = values


class _MemoryTransaction:
    def __init__(self, snapshot: _Snapshot) -> None:
        self._snapshot = snapshot
        self._pending: Dict[bytes, bytes] = {}

    def get(self, key: bytes) -> Optional[bytes]:
        if key in self._pending:
            return self._pending[key]
        return self._snapshot.values.get(key)

    def scan_prefix(self, prefix: bytes, limit: Optional[int] = None) -> Iterator[Tuple[bytes, bytes]]:
        # Pending writes are not visible to scans; only committed data is.
        keys = self._snapshot.keys
        count = 0
        for i in range(bisect_left(keys, prefix), len(keys)):
            key = keys[i]
            if not key.startswith(prefix):
                break
            if limit is not None and count >= limit:
                break
            count += 1
            yield key, self._snapshot.values[key]

    def put(self, key: bytes, value: bytes) -> None:
        self._pending[bytes(key)] = bytes(value)


class InMemoryKeyValueStore(KeyValueStore):
    """Ordered key-value store held in process memory.

    Committed state is an immutable snapshot; a write transaction builds the
    next snapshot and swaps it in under a lock, so readers always see either
    all of a transaction's writes or none of them.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = _Snapshot([], {})

    @contextmanager
    def read_transaction(self) -> Iterator[_MemoryTransaction]:
        yield _MemoryTransaction(self._snapshot)

    @contextmanager
    def write_transaction(self) -> Iterator[_MemoryTransaction]:
        txn = _MemoryTransaction(self._snapshot)
        yield txn
        if not txn._pending:
            return
        with self._lock:
            current = self._snapshot
            keys = list(current.keys)
            values = dict(current.values)
            for key, value in txn._pending.items():
                if key not in values:
                    insort(keys, key)
                values[key] = value
            self._snapshot = _Snapshot(keys, values)

    def close(self) -> None:
        pass

    def __len__(self) -> int:
        return len(self._snapshot.keys)
