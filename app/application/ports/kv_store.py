from typing import ContextManager, Iterator, Optional, Protocol, Tuple


class ReadTransaction(Protocol):
    def get(self, key: bytes) -> Optional[bytes]:
        ...

    def scan_prefix(self, prefix: bytes, limit: Optional[int] = None) -> Iterator[Tuple[bytes, bytes]]:
        ...


class WriteTransaction(ReadTransaction, Protocol):
    def put(self, key: bytes, value: bytes) -> None:
        ...


class KeyValueStore(Protocol):
    """Ordered key-value space.

    Read transactions observe a consistent snapshot. Writes made through a
    write transaction become visible only once the transaction exits cleanly;
    on error they are discarded. Engine errors surface as StorageFailure.
    """

    def read_transaction(self) -> ContextManager[ReadTransaction]:
        ...

    def write_transaction(self) -> ContextManager[WriteTransaction]:
        ...

    def close(self) -> None:
        ...
