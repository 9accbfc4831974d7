"""Storage keys for notifications in the shared key-value space.

Layout::

    b"ldn/" + 8 hex digits (UTF-8 byte length of inbox_id) + inbox_id + b"/" + notification_id

The length field is fixed-width and the inbox bytes that follow have exactly
that length, so the prefix of one inbox can never match a key that belongs to
a different inbox, whatever characters the identifiers contain. This module is
the only place that builds notification keys.
"""
from ...exceptions import BadInput

NAMESPACE = b"ldn/"
SEPARATOR = b"/"
LENGTH_WIDTH = 8
MAX_INBOX_ID_BYTES = 16 ** LENGTH_WIDTH - 1


def inbox_prefix(inbox_id: str) -> bytes:
    """Prefix shared by every key of the given inbox and by no other key."""
    raw = inbox_id.encode("utf-8")
    if len(raw) > MAX_INBOX_ID_BYTES:
        raise BadInput("inbox identifier is too long")
    return NAMESPACE + b"%08x" % len(raw) + raw + SEPARATOR


def notification_key(inbox_id: str, notification_id: str) -> bytes:
    return inbox_prefix(inbox_id) + notification_id.encode("utf-8")
