# pizza_api/main.py
import time
from typing import Callable

import uvicorn
from fastapi import FastAPI

from pizza_api.api import build_dispatcher
from pizza_api.api.routers import unified
from pizza_api.data.seed import MENU_COLLECTION, seed_menu
from pizza_api.data.store import DocumentStore
from pizza_api.repos import cart_repo, token_repo, user_repo
from pizza_api.services.checkout_service import SettlementGateway
from pizza_api.utils.logging import get_logger, setup_logging
from pizza_api.utils.settings import Settings, load_settings

logger = get_logger(__name__)

COLLECTIONS = (user_repo.COLLECTION, token_repo.COLLECTION, cart_repo.COLLECTION, MENU_COLLECTION)


def create_app(
    settings: Settings | None = None,
    gateway: SettlementGateway | None = None,
    clock: Callable[[], float] = time.time,
) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings.log_level, settings.log_file)

    store = DocumentStore(settings.data_dir)
    store.ensure_collections(COLLECTIONS)
    seed_menu(store)

    app = FastAPI(
        title="Pizza Delivery API",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.dispatcher = build_dispatcher(settings, store, gateway=gateway, clock=clock)
    app.include_router(unified.router)

    logger.info(f"Pizza API ready [{settings.env_name}], data in {settings.data_dir}")
    return app


def run() -> None:
    settings = load_settings()
    app = create_app(settings)

    if settings.ssl_keyfile and settings.ssl_certfile:
        uvicorn.run(
            app,
            host="0.0.0.0",
            port=settings.https_port,
            ssl_keyfile=settings.ssl_keyfile,
            ssl_certfile=settings.ssl_certfile,
        )
    else:
        uvicorn.run(app, host="0.0.0.0", port=settings.http_port)


if __name__ == "__main__":
    run()
