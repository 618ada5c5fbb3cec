import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ispmedia.config import get_settings
from ispmedia.infrastructure.database import engine, initialize_database
from ispmedia.infrastructure.realtime import (
    ConnectionRegistry,
    RealtimeHub,
    WebSocketTransport,
)
from ispmedia.interfaces.api.routes import register_routes


def create_realtime_hub() -> RealtimeHub:
    """Build the registry, transport and hub used for realtime notifications."""

    settings = get_settings()
    registry = ConnectionRegistry()
    transport = WebSocketTransport(on_send_failure=registry.unregister)
    return RealtimeHub(
        registry,
        transport,
        close_superseded=settings.realtime_close_superseded,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Inicializa a base de dados e o hub de tempo real; liberta os recursos ao fechar."""

    initialize_database()
    app.state.realtime = create_realtime_hub()
    yield
    app.state.realtime.shutdown()
    engine.dispose()


def create_app() -> FastAPI:
    """Cria e configura a aplicação principal de FastAPI."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="ISPMedia", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
