import json
import logging
from dataclasses import asdict, replace
from typing import List

from ...application.ports.id_generator import IdGenerator
from ...application.ports.kv_store import KeyValueStore
from ...application.ports.notification_repo import NotificationDto, NotificationRepository
from ...exceptions import NotFound, StorageFailure
from .key_codec import inbox_prefix, notification_key

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 128

_FIELDS = ("id", "actor", "object", "target", "updated")


def serialize_notification(notification: NotificationDto) -> bytes:
    return json.dumps(asdict(notification)).encode("utf-8")


def deserialize_notification(raw: bytes) -> NotificationDto:
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise StorageFailure(f"stored notification is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise StorageFailure("stored notification is not a JSON object")
    values = {}
    for field in _FIELDS:
        value = data.get(field, "")
        if not isinstance(value, str):
            raise StorageFailure(f"stored notification field {field!r} is not a string")
        values[field] = value
    return NotificationDto(**values)


class KvNotificationRepository(NotificationRepository):
    def __init__(self, store: KeyValueStore, id_generator: IdGenerator, max_results: int = DEFAULT_MAX_RESULTS):
        if max_results < 0:
            raise ValueError("max_results must not be negative")
        self.store = store
        self.id_generator = id_generator
        self.max_results = max_results

    def list_by_inbox(self, inbox_id: str) -> List[NotificationDto]:
        prefix = inbox_prefix(inbox_id)
        notifications: List[NotificationDto] = []
        with self.store.read_transaction() as txn:
            for key, value in txn.scan_prefix(prefix, limit=self.max_results):
                if len(notifications) >= self.max_results:
                    break
                try:
                    notifications.append(deserialize_notification(value))
                except StorageFailure:
                    logger.error(f"Corrupt notification record at key {key!r}")
                    raise
        return notifications

    def get_one(self, inbox_id: str, notification_id: str) -> NotificationDto:
        key = notification_key(inbox_id, notification_id)
        with self.store.read_transaction() as txn:
            raw = txn.get(key)
        if raw is None:
            raise NotFound()
        return deserialize_notification(raw)

    def create(self, inbox_id: str, notification: NotificationDto) -> NotificationDto:
        stored = replace(notification, id=self.id_generator.new_id())
        try:
            payload = serialize_notification(stored)
        except (TypeError, ValueError) as e:
            raise StorageFailure(f"could not serialize notification: {e}") from e
        key = notification_key(inbox_id, stored.id)
        with self.store.write_transaction() as txn:
            txn.put(key, payload)
        return stored
