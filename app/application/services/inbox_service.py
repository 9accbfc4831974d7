import logging
from dataclasses import dataclass

from ..ports.notification_repo import NotificationDto, NotificationRepository
from ...schemas.notifications.notification import AnnounceActivity, LdpContainer, NotificationCreate
from .linked_data import UriMinter, build_container, build_member_resource

logger = logging.getLogger(__name__)


def member_uri_minter(inbox_uri: str) -> UriMinter:
    """URIs of inbox members are the inbox URI plus one path segment."""
    base = inbox_uri.rstrip("/")
    return lambda notification_id: f"{base}/{notification_id}"


@dataclass
class InboxService:
    repo: NotificationRepository

    def receive(self, inbox_id: str, payload: NotificationCreate) -> NotificationDto:
        notification = NotificationDto(
            id="",
            actor=payload.actor,
            object=payload.object,
            target=payload.target,
            updated=payload.updated,
        )
        stored = self.repo.create(inbox_id, notification)
        logger.info(f"Stored notification {stored.id} in inbox {inbox_id!r}")
        return stored

    def container(self, inbox_id: str, inbox_uri: str) -> LdpContainer:
        notifications = self.repo.list_by_inbox(inbox_id)
        logger.debug(f"Listing inbox {inbox_id!r}: {len(notifications)} notification(s)")
        return build_container(inbox_uri, member_uri_minter(inbox_uri), notifications)

    def member(self, inbox_id: str, notification_id: str, inbox_uri: str) -> AnnounceActivity:
        notification = self.repo.get_one(inbox_id, notification_id)
        logger.debug(f"Fetched notification {notification_id} from inbox {inbox_id!r}")
        return build_member_resource(member_uri_minter(inbox_uri), notification)
