import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend_fastapi.api.error_handlers import register_error_handlers
from backend_fastapi.api.routes.tasks import router as tasks_router
from infrastructure.container import get_event_channel
from infrastructure.events.channel import ThreadPoolEventChannel
from infrastructure.logging_setup import setup_logging
from infrastructure.settings import get_settings

settings = get_settings()
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"API de tareas iniciada (ORM={settings.orm}, eventos={settings.event_dispatch})")
    yield
    channel = get_event_channel()
    if isinstance(channel, ThreadPoolEventChannel):
        channel.shutdown(wait=True)


app = FastAPI(title="Task Tracker API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

register_error_handlers(app)
app.include_router(tasks_router)
