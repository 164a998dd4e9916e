"""Saving and loading template miners."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import redis

from .errors import LoggingDrainError, internal_error
from .miner import TemplateMiner

_DEFAULT_REDIS_PORT = 6379


class PersistenceHandler(ABC):
    """Stores and restores the state of a template miner."""

    @abstractmethod
    def save(self, miner: TemplateMiner) -> None:
        """Persist ``miner``."""

    @abstractmethod
    def load(self) -> TemplateMiner:
        """Restore a previously saved miner."""


def _split_addr(addr: str) -> tuple[str, int]:
    host, sep, port = addr.rpartition(":")
    if not sep:
        return addr, _DEFAULT_REDIS_PORT
    return host or "localhost", int(port)


class RedisPersistence(PersistenceHandler):
    """Keeps a serialised miner under one key of a Redis database."""

    def __init__(
        self,
        addr: str = "localhost:6379",
        password: str | None = None,
        db: int = 0,
        service_key: str = "loggingdrain",
        client: Any = None,
    ):
        self.addr = addr
        self.password = password
        self.db = db
        self.service_key = service_key
        if client is None:
            host, port = _split_addr(addr)
            client = redis.Redis(host=host, port=port, password=password or None, db=db)
        self.client = client

    def save(self, miner: TemplateMiner) -> None:
        try:
            data = miner.to_json()
        except (TypeError, ValueError) as exc:
            raise internal_error(exc) from exc
        try:
            self.client.set(self.service_key, data)
        except redis.RedisError as exc:
            raise internal_error(exc) from exc

    def load(self) -> TemplateMiner:
        try:
            value = self.client.get(self.service_key)
        except redis.RedisError as exc:
            raise internal_error(exc) from exc
        if value is None:
            raise internal_error(detail="key %s not found" % self.service_key)
        try:
            return TemplateMiner.from_json(value)
        except (ValueError, TypeError, KeyError, LoggingDrainError) as exc:
            raise internal_error(exc) from exc

    def subscribe(self) -> Any:
        """Return a pub/sub handle subscribed to the service key's channel."""
        pubsub = self.client.pubsub()
        pubsub.subscribe(self.service_key)
        return pubsub