import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette import status
from starlette.responses import JSONResponse

from matchday.config import Environment, config, environment
from matchday.database import database
from matchday.routes import matches, notifications, registrations, supervisor_reports
from matchday.utils.alembic import alembic_run_migrations
from matchday.utils.errors import LifecycleError
from matchday.utils.logging import logger


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    await database.connect()

    if config.auto_run_migrations and environment is not Environment.CI:
        await asyncio.to_thread(alembic_run_migrations)

    try:
        yield
    finally:
        await database.disconnect()


routers = {
    "Matches": matches.router,
    "Registrations": registrations.router,
    "Supervisor reports": supervisor_reports.router,
    "Notifications": notifications.router,
}

app = FastAPI(
    title="Matchday API",
    summary="Lifecycle of league matches, season registrations and supervisor reports",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin for origin in config.cors_origins.split(",") if origin],
    allow_origin_regex=config.cors_origin_regex or None,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/ping", summary="Healthcheck ping")
async def ping() -> str:
    return "ping"


@app.exception_handler(LifecycleError)
async def lifecycle_error_handler(_: Request, exc: LifecycleError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    _: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


for tag, router in routers.items():
    app.include_router(router, tags=[tag])
