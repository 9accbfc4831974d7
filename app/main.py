import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load environment variables as early as possible
load_dotenv()

from .application.ports.id_generator import IdGenerator
from .application.ports.kv_store import KeyValueStore
from .application.services.inbox_service import InboxService
from .config import Settings, get_settings
from .database import build_engine, create_db_and_tables
from .exceptions import InboxError, http_exception_handler, inbox_exception_handler
from .infrastructure.ids.uuid_generator import UuidGenerator
from .infrastructure.kv.memory_store import InMemoryKeyValueStore
from .infrastructure.kv.redis_store import RedisKeyValueStore
from .infrastructure.kv.sql_store import SqlKeyValueStore
from .infrastructure.persistence.notification_repository_kv import KvNotificationRepository
from .middleware import ErrorHandlingMiddleware, LoggingMiddleware
from .routers import inbox_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=settings.LOG_FORMAT
    )


def build_store(settings: Settings) -> KeyValueStore:
    backend = settings.store_backend
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "redis":
        if not settings.REDIS_URL:
            raise ValueError("STORE_BACKEND=redis requires REDIS_URL")
        return RedisKeyValueStore(settings.REDIS_URL, prefix=settings.REDIS_PREFIX)
    return SqlKeyValueStore(build_engine(settings.DATABASE_URL, echo=settings.DEBUG))


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    id_generator: Optional[IdGenerator] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)
    if store is None:
        store = build_store(settings)
    if id_generator is None:
        id_generator = UuidGenerator()
    repo = KvNotificationRepository(
        store,
        id_generator,
        max_results=settings.MAX_INBOX_RESPONSE_SIZE,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info(f"Starting {settings.APP_NAME} with {type(store).__name__}...")
        if isinstance(store, SqlKeyValueStore):
            create_db_and_tables(store.engine)
            logger.info("Database initialized successfully")
        yield
        # Shutdown
        logger.info(f"Shutting down {settings.APP_NAME}...")
        store.close()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url=("/docs" if settings.DOCS_ENABLED else None),
        redoc_url=("/redoc" if settings.DOCS_ENABLED else None),
        openapi_url=("/openapi.json" if settings.DOCS_ENABLED else None)
    )
    app.state.settings = settings
    app.state.inbox_service = InboxService(repo=repo)

    app.add_exception_handler(InboxError, inbox_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.include_router(inbox_router.router)

    @app.get("/health")
    def health():
        return {"status": "healthy", "store": type(store).__name__}

    return app


app = create_app()


# ------------------------
# Run with correct PORT in local/production
# ------------------------
if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        workers=1,
        log_level=settings.LOG_LEVEL.lower()
    )
