"""
Production FastAPI Application

Single process: the serial transaction gate and the journal fan-out loop live in memory,
so granian must run exactly one worker.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Gala] Starting up...')

    tracing = TracingConfig(service_name='gala-service')
    tracing.setup()
    Logger.base.info('📊 [Gala] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Gala] Dependency injection wired')

    database = container.database()
    await database.create_tables()
    tracing.instrument_sqlalchemy(engine=database.engine)
    Logger.base.info('🗄️  [Gala] Database ready + instrumented')

    broadcaster = container.journal_broadcaster()
    async with anyio.create_task_group() as tg:
        tg.start_soon(broadcaster.run)
        Logger.base.info('✅ [Gala] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Gala] Shutting down...')
        # Coordinator drains, closes every subscriber stream and returns
        await broadcaster.aclose()

    await database.dispose()
    Logger.base.info('🗄️  [Gala] Database engine disposed')

    tracing.shutdown()
    container.unwire()
    container.reset_singletons()
    Logger.base.info('👋 [Gala] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
