import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger

from eventdesk.core.config import settings
from eventdesk.core.errors import register_exception_handlers
from eventdesk.core.logging import configure_logging
from eventdesk.database.db import Base, engine
from eventdesk.models import bookings, events, users  # noqa: F401  register tables with Base.metadata
from eventdesk.routes import bookings as booking_routes
from eventdesk.routes import events as event_routes
from eventdesk.services.images import UPLOADS_PATH

configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables (in production, use migrations such as Alembic)
    Base.metadata.create_all(bind=engine)
    logger.info("{} {} started", settings.PROJECT_NAME, settings.VERSION)
    yield


app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)

register_exception_handlers(app)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount(UPLOADS_PATH, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

# Include the routers
app.include_router(event_routes.router)
app.include_router(booking_routes.router)
