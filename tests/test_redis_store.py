import pytest

redis = pytest.importorskip("redis")

from app.exceptions import StorageFailure
from app.infrastructure.kv import redis_store as mod


class FakePipe:
    def __init__(self, client):
        self.client = client
        self.ops = []

    def hset(self, name, mapping):
        self.ops.append(("hset", name, dict(mapping)))
        return self

    def zadd(self, name, mapping):
        self.ops.append(("zadd", name, dict(mapping)))
        return self

    def execute(self):
        if self.client.fail:
            raise redis.exceptions.ConnectionError("down")
        for op, name, mapping in self.ops:
            if op == "hset":
                self.client.hashes.setdefault(name, {}).update(mapping)
            else:
                self.client.zsets.setdefault(name, set()).update(mapping)
        return [len(mapping) for _, _, mapping in self.ops]


class FakeRedis:
    def __init__(self):
        self.hashes = {}
        self.zsets = {}
        self.fail = False

    @classmethod
    def from_url(cls, url):
        return cls()

    def pipeline(self, transaction=True):
        return FakePipe(self)

    def hget(self, name, key):
        if self.fail:
            raise redis.exceptions.ConnectionError("down")
        return self.hashes.get(name, {}).get(key)

    def hmget(self, name, keys):
        return [self.hashes.get(name, {}).get(k) for k in keys]

    def zrangebylex(self, name, low, high, start=None, num=None):
        def above(k):
            return k >= low[1:] if low[:1] == b"[" else k > low[1:]

        def below(k):
            if high == b"+":
                return True
            return k < high[1:] if high[:1] == b"(" else k <= high[1:]

        keys = sorted(k for k in self.zsets.get(name, ()) if above(k) and below(k))
        if start is not None:
            keys = keys[start:start + num]
        return keys

    def close(self):
        pass


@pytest.fixture
def store(monkeypatch):
    monkeypatch.setattr(mod.redis, "Redis", FakeRedis)
    return mod.RedisKeyValueStore(url="redis://fake", prefix="t:")


def put(store, key, value):
    with store.write_transaction() as txn:
        txn.put(key, value)


def test_put_get_and_scan(store):
    for key in (b"b/2", b"a/1", b"b/1", b"b0"):
        put(store, key, key.upper())
    with store.read_transaction() as txn:
        assert txn.get(b"a/1") == b"A/1"
        assert txn.get(b"zzz") is None
        assert list(txn.scan_prefix(b"b/")) == [(b"b/1", b"B/1"), (b"b/2", b"B/2")]
        assert list(txn.scan_prefix(b"b/", limit=1)) == [(b"b/1", b"B/1")]
        assert list(txn.scan_prefix(b"x/")) == []
    assert store.client.hashes.keys() == {"t:data"}


def test_failed_write_transaction_sends_nothing(store):
    with pytest.raises(RuntimeError):
        with store.write_transaction() as txn:
            txn.put(b"k", b"v")
            raise RuntimeError("boom")
    assert store.client.hashes == {}


def test_redis_errors_surface_as_storage_failure(store):
    store.client.fail = True
    with pytest.raises(StorageFailure):
        put(store, b"k", b"v")
    with pytest.raises(StorageFailure):
        with store.read_transaction() as txn:
            txn.get(b"k")
