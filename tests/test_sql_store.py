import pytest

from app.database import build_engine, create_db_and_tables
from app.exceptions import StorageFailure
from app.infrastructure.kv.ranges import prefix_upper_bound
from app.infrastructure.kv.sql_store import SqlKeyValueStore


@pytest.fixture
def store():
    engine = build_engine("sqlite://")
    create_db_and_tables(engine)
    s = SqlKeyValueStore(engine)
    yield s
    s.close()


def put(store, key, value):
    with store.write_transaction() as txn:
        txn.put(key, value)


def test_prefix_upper_bound():
    assert prefix_upper_bound(b"ab") == b"ac"
    assert prefix_upper_bound(b"a\xff") == b"b"
    assert prefix_upper_bound(b"\xff\xff") is None
    assert prefix_upper_bound(b"") is None


def test_put_and_get(store):
    put(store, b"k", b"v")
    with store.read_transaction() as txn:
        assert txn.get(b"k") == b"v"
        assert txn.get(b"missing") is None


def test_put_overwrites(store):
    put(store, b"k", b"1")
    put(store, b"k", b"2")
    with store.read_transaction() as txn:
        assert txn.get(b"k") == b"2"


def test_scan_prefix_is_ordered_and_bounded(store):
    for key in (b"b/2", b"a/1", b"b/1", b"c/1", b"b", b"b/10", b"b0"):
        put(store, key, b"v")
    with store.read_transaction() as txn:
        assert [k for k, _ in txn.scan_prefix(b"b/")] == [b"b/1", b"b/10", b"b/2"]
        assert [k for k, _ in txn.scan_prefix(b"b/", limit=2)] == [b"b/1", b"b/10"]


def test_scan_prefix_handles_high_bytes(store):
    put(store, b"p\xff\x01", b"v")
    put(store, b"q", b"v")
    with store.read_transaction() as txn:
        assert [k for k, _ in txn.scan_prefix(b"p\xff")] == [b"p\xff\x01"]


def test_failed_write_transaction_rolls_back(store):
    with pytest.raises(RuntimeError):
        with store.write_transaction() as txn:
            txn.put(b"k", b"v")
            raise RuntimeError("boom")
    with store.read_transaction() as txn:
        assert txn.get(b"k") is None


def test_engine_errors_surface_as_storage_failure():
    # No tables created
    s = SqlKeyValueStore(build_engine("sqlite://"))
    with pytest.raises(StorageFailure):
        with s.read_transaction() as txn:
            txn.get(b"k")


@pytest.mark.parametrize("url", ["mysql://u:p@localhost/inbox", "mariadb+pymysql://u:p@localhost/inbox"])
def test_build_engine_rejects_backends_without_binary_primary_keys(url):
    with pytest.raises(ValueError):
        build_engine(url)


def test_build_engine_accepts_postgres_url():
    pytest.importorskip("psycopg2")
    engine = build_engine("postgresql://u:p@localhost/inbox")
    assert engine.dialect.name == "postgresql"
    engine.dispose()
