"""Linked-Data projections of stored notifications.

Both builders are pure: they copy fields verbatim and never look at storage.
Public URIs come from a caller-supplied ``mint_uri(bare_id)`` callable, since
only the HTTP layer knows the request host and path.
"""
from typing import Callable, Iterable

from ..ports.notification_repo import NotificationDto
from ...schemas.notifications.notification import AnnounceActivity, LdpContainer

UriMinter = Callable[[str], str]

LDP_CONTEXT = "http://www.w3.org/ns/ldp"
ACTIVITYSTREAMS_CONTEXT = "https://www.w3.org/ns/activitystreams"
ANNOUNCE_TYPE = "Announce"


def build_container(self_uri: str, mint_uri: UriMinter, notifications: Iterable[NotificationDto]) -> LdpContainer:
    return LdpContainer(
        context=LDP_CONTEXT,
        id=self_uri,
        contains=[mint_uri(n.id) for n in notifications],
    )


def build_member_resource(mint_uri: UriMinter, notification: NotificationDto) -> AnnounceActivity:
    return AnnounceActivity(
        context=ACTIVITYSTREAMS_CONTEXT,
        id=mint_uri(notification.id),
        type=ANNOUNCE_TYPE,
        actor=notification.actor,
        object=notification.object,
        target=notification.target,
        updated=notification.updated,
    )
