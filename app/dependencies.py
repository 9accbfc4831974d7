from urllib.parse import quote

from fastapi import Request

from .application.services.inbox_service import InboxService
from .config import Settings

# Characters left as-is in the URN path segment of public URIs
URN_SAFE_CHARS = ":@!$&'()*+,;=~"


def get_inbox_service(request: Request) -> InboxService:
    return request.app.state.inbox_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def public_base_url(request: Request, settings: Settings) -> str:
    if settings.PUBLIC_BASE_URL:
        return settings.PUBLIC_BASE_URL.rstrip("/")
    host = request.headers.get("host") or request.url.netloc
    return f"http://{host}"


def inbox_uri(request: Request, settings: Settings, urn: str) -> str:
    return f"{public_base_url(request, settings)}/texts/{quote(urn, safe=URN_SAFE_CHARS)}/inbox"
