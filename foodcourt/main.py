# foodcourt/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError
import uvicorn

from foodcourt.data.database import Base, engine
from foodcourt.api.routers import (
    analytics,
    carts,
    health,
    menu,
    orders,
    payments,
    ratings,
    reports,
    stalls,
    users,
    ws,
)
from foodcourt.domain.errors import DependencyError, FoodCourtError
from foodcourt.services.realtime import (
    RedisConnectionDirectory,
    RedisEventSubscriber,
    RedisNotificationTransport,
    make_async_redis_client,
    make_redis_client,
)
from foodcourt.utils.logging import get_logger

logger = get_logger(__name__)

#import every model before create_all
import foodcourt.data.models  # noqa: E402,F401


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ready")
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise

    #one directory / transport per app instance, shared by all requests
    redis_client = make_redis_client()
    app.state.connection_directory = RedisConnectionDirectory(redis_client)
    app.state.notification_transport = RedisNotificationTransport(redis_client)

    #websocket relays share one async client, each opens its own pubsub
    async_client = make_async_redis_client()
    app.state.event_subscriber = RedisEventSubscriber(async_client)

    yield

    await async_client.aclose()
    redis_client.close()


async def handle_domain_error(request: Request, exc: FoodCourtError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
    )


async def handle_db_unavailable(request: Request, exc: OperationalError):
    #timeouts and lost connections, failed visibly, retries are up to the client
    logger.error(f"{request.method} {request.url.path} database unavailable: {exc}")
    return await handle_domain_error(request, DependencyError("Database unavailable"))


def create_app() -> FastAPI:
    app = FastAPI(
        title="Food Court Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(FoodCourtError, handle_domain_error)
    app.add_exception_handler(OperationalError, handle_db_unavailable)

    # Include routers
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(stalls.router)
    app.include_router(menu.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(payments.router)
    app.include_router(ratings.router)
    app.include_router(analytics.router)
    app.include_router(reports.router)
    app.include_router(ws.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
