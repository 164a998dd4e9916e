import json

import pytest
import redis

from loggingdrain.errors import InternalError
from loggingdrain.miner import TemplateMiner
from loggingdrain.persistence import PersistenceHandler, RedisPersistence


class FakePubSub:
    def __init__(self):
        self.channels = []

    def subscribe(self, *channels):
        self.channels.extend(channels)


class FakeRedis:
    def __init__(self):
        self.store = {}

    def set(self, key, value):
        self.store[key] = value.encode() if isinstance(value, str) else value
        return True

    def get(self, key):
        return self.store.get(key)

    def pubsub(self):
        return FakePubSub()


class BrokenRedis(FakeRedis):
    def set(self, key, value):
        raise redis.ConnectionError("connection refused")

    def get(self, key):
        raise redis.ConnectionError("connection refused")


def _miner():
    miner = TemplateMiner()
    for log in ["A format 1", "A format 2", "B other 1"]:
        miner.add_log_message(log)
    return miner


def _persistence(client):
    password = "password"
    return RedisPersistence("localhost:6379", password, 0, "svc", client=client)


def test_works_as_a_persistence_handler():
    handler = _persistence(FakeRedis())
    assert isinstance(handler, PersistenceHandler)
    miner = _miner()
    handler.save(miner)
    loaded = handler.load()
    assert loaded == miner
    assert loaded.match("A format 7").template() == "A format [*]"


def test_save_then_load_round_trip():
    client = FakeRedis()
    store = _persistence(client)
    miner = _miner()
    store.save(miner)
    assert store.load() == miner


def test_save_stores_miner_document_under_service_key():
    client = FakeRedis()
    store = _persistence(client)
    store.save(_miner())
    assert list(client.store) == ["svc"]
    assert json.loads(client.store["svc"]) == _miner().to_dict()


def test_load_missing_key_raises():
    store = _persistence(FakeRedis())
    with pytest.raises(InternalError):
        store.load()


def test_load_garbage_raises():
    client = FakeRedis()
    client.store["svc"] = b"not json at all"
    with pytest.raises(InternalError):
        _persistence(client).load()


def test_connection_errors_are_wrapped():
    store = _persistence(BrokenRedis())
    with pytest.raises(InternalError) as saved:
        store.save(_miner())
    assert isinstance(saved.value.__cause__, redis.ConnectionError)
    with pytest.raises(InternalError):
        store.load()


def test_subscribe_uses_service_key():
    pubsub = _persistence(FakeRedis()).subscribe()
    assert pubsub.channels == ["svc"]


def test_default_client_uses_address():
    password = "password"
    store = RedisPersistence("cache.example.com:6380", password, 2, "svc")
    kwargs = store.client.connection_pool.connection_kwargs
    assert kwargs["host"] == "cache.example.com"
    assert kwargs["port"] == 6380
    assert kwargs["db"] == 2