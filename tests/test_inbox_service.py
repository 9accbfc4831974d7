from app.application.ports.notification_repo import NotificationDto
from app.application.services.inbox_service import InboxService, member_uri_minter
from app.schemas import NotificationCreate


class FakeRepo:
    def __init__(self):
        self.rows = {}
        self._id = 1

    def create(self, inbox_id, notification):
        stored = NotificationDto(f"n{self._id}", notification.actor, notification.object,
                                 notification.target, notification.updated)
        self._id += 1
        self.rows.setdefault(inbox_id, []).append(stored)
        return stored

    def list_by_inbox(self, inbox_id):
        return list(self.rows.get(inbox_id, []))

    def get_one(self, inbox_id, notification_id):
        return next(n for n in self.rows[inbox_id] if n.id == notification_id)


def test_member_uri_minter_appends_segment():
    assert member_uri_minter("http://h/texts/w/inbox")("x") == "http://h/texts/w/inbox/x"
    assert member_uri_minter("http://h/texts/w/inbox/")("x") == "http://h/texts/w/inbox/x"


def test_receive_stores_payload_fields():
    repo = FakeRepo()
    svc = InboxService(repo=repo)
    out = svc.receive("w", NotificationCreate(actor="u1", object="o1", target="t1", updated="2024"))
    assert out.id == "n1"
    assert repo.rows["w"][0].actor == "u1"


def test_container_and_member():
    repo = FakeRepo()
    svc = InboxService(repo=repo)
    svc.receive("w", NotificationCreate(actor="u1"))
    svc.receive("w", NotificationCreate(actor="u2"))
    c = svc.container("w", "http://h/texts/w/inbox")
    assert c.contains == ["http://h/texts/w/inbox/n1", "http://h/texts/w/inbox/n2"]
    m = svc.member("w", "n2", "http://h/texts/w/inbox")
    assert m.id == "http://h/texts/w/inbox/n2"
    assert m.actor == "u2"
    assert m.type == "Announce"
