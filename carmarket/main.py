# carmarket/main.py
import time

from fastapi import FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware
import uvicorn

from carmarket.data.database import Base, engine
from carmarket.api.errors import register_exception_handlers
from carmarket.api.routers import applications, auth, cars, favorites, health, messages, users, ws
from carmarket.services.connection_manager import ConnectionManager
from carmarket.services.login_guard import LoginGuard, build_login_guard
from carmarket.utils.settings import IS_PRODUCTION, SESSION_MAX_AGE_SECONDS, SESSION_SECRET
from carmarket.utils.logging import get_logger

logger = get_logger(__name__)

# every model has to be imported before create_all
import carmarket.data.models  # noqa: E402,F401

logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")

try:
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")
except Exception as e:
    logger.error(f"Failed to create tables: {e}")
    raise


async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    if request.url.path.startswith("/api"):
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{request.method} {request.url.path} {response.status_code} in {duration_ms:.0f}ms")
    return response


def create_app(login_guard: LoginGuard | None = None) -> FastAPI:
    app = FastAPI(
        title="Car Market",
        version="1.0.0",
    )

    # shared process state, reached by handlers through request.app.state
    app.state.login_guard = login_guard or build_login_guard()
    app.state.connections = ConnectionManager()

    app.add_middleware(
        SessionMiddleware,
        secret_key=SESSION_SECRET,
        session_cookie="carmarket_session",
        max_age=SESSION_MAX_AGE_SECONDS,
        same_site="strict",
        https_only=IS_PRODUCTION,
    )
    app.middleware("http")(log_requests)

    register_exception_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(cars.router)
    app.include_router(applications.router)
    app.include_router(favorites.router)
    app.include_router(messages.router)
    app.include_router(users.router)
    app.include_router(ws.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=5000, proxy_headers=True)
