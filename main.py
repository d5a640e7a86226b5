from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.api import order, payment, product, stats, system, user
from app.api.stats_utils.composer import StatsComposer
from app.core.cache import CacheStore, InvalidationCoordinator
from app.core.config import FRONTEND_URL
from app.core.exceptions import AppError
from app.core.logger import configure_logging
from app.core.store import Store
from app.database import AsyncSessionLocal, engine, init_models

logger = logging.getLogger(__name__)


def create_app(
    sessionmaker: async_sessionmaker[AsyncSession] = AsyncSessionLocal,
    bind: AsyncEngine = engine,
    create_tables: bool = True,
) -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Storefront Admin Backend",
        description="""
        API for the storefront administration panel.
        Manages users, products, orders and coupons, and serves cached
        dashboard statistics kept consistent by event-driven invalidation.
        """,
        version="1.0.0",
        contact={
            "name": "Storefront Dev Team",
        },
        license_info={
            "name": "MIT",
        },
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[FRONTEND_URL, "http://127.0.0.1:5173", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Content-Type"],
    )

    # one cache per process, reachable only through the request dependencies
    store = Store(sessionmaker)
    cache = CacheStore()
    app.state.store = store
    app.state.cache = cache
    app.state.invalidator = InvalidationCoordinator(cache)
    app.state.composer = StatsComposer(store, cache)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.message},
        )

    @app.on_event("startup")
    async def on_startup():
        if create_tables:
            await init_models(bind)
        logger.info("Storefront API started")

    app.include_router(user.router, prefix="/api/v1/user", tags=["Users"])
    app.include_router(product.router, prefix="/api/v1/product", tags=["Products"])
    app.include_router(order.router, prefix="/api/v1/order", tags=["Orders"])
    app.include_router(payment.router, prefix="/api/v1/payment", tags=["Coupons"])
    app.include_router(stats.router, prefix="/api/v1/dashboard", tags=["Dashboard"])
    app.include_router(system.router, prefix="/api/v1", tags=["System"])

    @app.get("/")
    async def root():
        return {"message": "Storefront API is running"}

    return app


app = create_app()
