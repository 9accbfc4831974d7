from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from ..application.services.inbox_service import InboxService, member_uri_minter
from ..config import Settings
from ..dependencies import get_app_settings, get_inbox_service, inbox_uri
from ..exceptions import BadInput, format_validation_errors
from ..schemas.notifications.notification import NotificationCreate

# Only the routes below exist; any other method on these paths is answered with
# a plain 404 by the HTTPException handler, before a handler or store is reached.
router = APIRouter(prefix="/texts/{urn}/inbox", tags=["Inbox"])

LD_JSON = "application/ld+json"


class LinkedDataResponse(JSONResponse):
    media_type = LD_JSON


def parse_notification(body: bytes) -> NotificationCreate:
    """Decode a POST body as a JSON notification whatever Content-Type the client sent."""
    try:
        return NotificationCreate.model_validate_json(body)
    except ValidationError as e:
        raise BadInput(format_validation_errors(e.errors())) from e


@router.post("", status_code=201, response_class=Response)
async def post_notification(
    urn: str,
    request: Request,
    service: InboxService = Depends(get_inbox_service),
    settings: Settings = Depends(get_app_settings),
):
    """Store a notification and point the client at its member resource."""
    payload = parse_notification(await request.body())
    stored = await run_in_threadpool(service.receive, urn, payload)
    location = member_uri_minter(inbox_uri(request, settings, urn))(stored.id)
    return Response(status_code=201, media_type=LD_JSON, headers={"Location": location})


@router.get("")
def get_inbox(
    urn: str,
    request: Request,
    service: InboxService = Depends(get_inbox_service),
    settings: Settings = Depends(get_app_settings),
):
    container = service.container(urn, inbox_uri(request, settings, urn))
    return LinkedDataResponse(container.model_dump(by_alias=True))


@router.get("/{notification_id}")
def get_notification(
    urn: str,
    notification_id: str,
    request: Request,
    service: InboxService = Depends(get_inbox_service),
    settings: Settings = Depends(get_app_settings),
):
    activity = service.member(urn, notification_id, inbox_uri(request, settings, urn))
    return LinkedDataResponse(activity.model_dump(by_alias=True))
