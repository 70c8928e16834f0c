import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    if exc.base_error.reason:
        error_dict["reason"] = exc.base_error.reason
    if exc.base_error.details:
        error_dict["details"] = exc.base_error.details
    logger.warning(f"Client error: {error_dict['code']} {error_dict['message']}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code} {exc.base_error.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


def build_lifespan(ApplicationConfig):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ApplicationConfig.BOOTSTRAP_PLATFORM:
            await bootstrap_platform(ApplicationConfig)
        yield

    return lifespan


async def bootstrap_platform(ApplicationConfig):
    """Create tables and the platform tenant on first start"""
    from sqlmodel import SQLModel

    from src.app.use_cases.tenants import BootstrapPlatformCommand, BootstrapPlatformUseCase
    from src.depends import engine, unit_of_work_factory

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    result = await BootstrapPlatformUseCase(unit_of_work_factory()).execute(
        BootstrapPlatformCommand(
            name=ApplicationConfig.PLATFORM_TENANT_NAME,
            admin_email=ApplicationConfig.PLATFORM_ADMIN_EMAIL,
        )
    )
    if result.is_err():
        logger.error(f"Platform bootstrap failed: {result.error.code} {result.error.message}")
    elif result.value.created:
        logger.info(f"Platform tenant created: {result.value.tenant_id}")


def create_app(ApplicationConfig) -> FastAPI:
    logging.basicConfig(level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO))

    app = FastAPI(
        title="Tenancy Lifecycle API",
        version="0.1.0",
        lifespan=build_lifespan(ApplicationConfig),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import admin, health_check, records, tenants

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(records.router, prefix=ApplicationConfig.API_PREFIX, tags=["Records"])
    app.include_router(tenants.router, prefix=ApplicationConfig.API_PREFIX, tags=["Tenant"])
    app.include_router(admin.router, prefix=ApplicationConfig.API_PREFIX, tags=["Admin"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
