import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session, sessionmaker

from kosthub.application.use_cases.notifications import NotificationPipeline
from kosthub.config import Settings, get_settings
from kosthub.infrastructure.database import SessionLocal, initialize_database
from kosthub.infrastructure.email import build_email_sink
from kosthub.infrastructure.notifications import NotificationHub, NotificationPublisher
from kosthub.infrastructure.scheduler import ReminderScheduler
from kosthub.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema and run the periodic jobs while the app is up."""

    factory: sessionmaker[Session] = app.state.session_factory
    initialize_database(factory.kw.get("bind"))

    scheduler: ReminderScheduler | None = None
    if app.state.start_scheduler:
        scheduler = ReminderScheduler(
            session_factory=factory,
            pipeline=app.state.pipeline,
            hub=app.state.hub,
            settings=app.state.settings,
        )
        scheduler.start()
    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.shutdown()
        bind = factory.kw.get("bind")
        if bind is not None:
            bind.dispose()


def create_app(
    *,
    session_factory: sessionmaker[Session] | None = None,
    settings: Settings | None = None,
    start_scheduler: bool | None = None,
) -> FastAPI:
    """Build the API with its hub, notification pipeline and scheduler wiring."""

    settings = settings or get_settings()
    app = FastAPI(title="Kost Hub", lifespan=lifespan)

    hub = NotificationHub()
    publisher = NotificationPublisher(hub)
    app.state.settings = settings
    app.state.session_factory = session_factory or SessionLocal
    app.state.hub = hub
    app.state.pipeline = NotificationPipeline(
        publisher, email_sink=build_email_sink(settings)
    )
    app.state.start_scheduler = (
        settings.scheduler_enabled if start_scheduler is None else start_scheduler
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
