import asyncio
import contextlib
from collections.abc import AsyncIterator

from fastapi import FastAPI

from app.api.routes import router
from app.logging.logger import Log
from app.processor.container import Container
from app.worker.sweeper import StoreSweeper


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run the expiry sweeper for the app's lifetime; clean up on shutdown."""
    container: Container = app.state.container
    sweeper = StoreSweeper(
        container.status_store,
        container.document_store,
        interval_seconds=container.settings.sweep_interval_seconds,
    )
    sweep_task = asyncio.create_task(sweeper.run(), name="store-sweeper")
    try:
        yield
    finally:
        sweep_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweep_task
        await container.aclose()
        Log.info("Shutdown complete")


def create_app(container: Container) -> FastAPI:
    app = FastAPI(
        title="docpipeline",
        description="Pay-per-document generation pipeline",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.container = container
    app.include_router(router)
    return app
