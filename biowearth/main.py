import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from biowearth.config import settings
from biowearth.routers import admin, catalog, dashboard, directory, orders, quotes, tasks
from biowearth.services.collection_store import CollectionStore
from biowearth.services.provider_factory import get_collection_store
from biowearth.services.settings_service import init_default_settings
from biowearth.services.snapshot_hub import SnapshotHub

logging.basicConfig(level=settings.log_level.upper(), format='%(asctime)s %(levelname)s %(name)s: %(message)s')
logger = logging.getLogger(__name__)


def create_app(store: CollectionStore | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = store if store is not None else get_collection_store()
        app.state.hub = SnapshotHub(app.state.store)
        init_default_settings(app.state.store)
        app.state.hub.start()
        logger.info('Biowearth OS started with %s', type(app.state.store).__name__)
        yield
        app.state.hub.stop()

    app = FastAPI(title='Biowearth OS', lifespan=lifespan)
    app.include_router(directory.router)
    app.include_router(dashboard.router)
    app.include_router(quotes.router)
    app.include_router(catalog.router)
    app.include_router(tasks.router)
    app.include_router(orders.router)
    app.include_router(admin.router)

    @app.get('/robots.txt', response_class=PlainTextResponse)
    def robots_txt() -> str:
        return 'User-agent: *\nDisallow: /\n'

    return app


app = create_app()
