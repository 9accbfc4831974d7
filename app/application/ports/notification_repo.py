from dataclasses import dataclass
from typing import List, Protocol


@dataclass
class NotificationDto:
    id: str
    actor: str
    object: str
    target: str
    updated: str


class NotificationRepository(Protocol):
    def list_by_inbox(self, inbox_id: str) -> List[NotificationDto]:
        ...

    def get_one(self, inbox_id: str, notification_id: str) -> NotificationDto:
        ...

    def create(self, inbox_id: str, notification: NotificationDto) -> NotificationDto:
        ...
