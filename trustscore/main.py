"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from trustscore.config import get_settings
from trustscore.routers import health_router, sandbox_router, scores_router
from trustscore.services import EnvironmentIsolationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting Trust Score Engine...")
    settings = get_settings()
    logger.info(f"Environment: {'DEBUG' if settings.debug else 'PRODUCTION'}")
    yield
    logger.info("Shutting down Trust Score Engine...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="""
        ## Trust Score Engine API

        Risk, team-fit, hiring-confidence and profile-strength scoring for
        candidate entities.

        ### Environments:
        - **Production**: persistent scores per entity and tenant
        - **Sandbox**: time-boxed sessions; scores expire with the session
        """,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(scores_router)
    app.include_router(sandbox_router)

    @app.exception_handler(EnvironmentIsolationError)
    async def isolation_exception_handler(request: Request, exc: EnvironmentIsolationError):
        logger.critical(f"Environment isolation violation on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Environment isolation violation", "error": str(exc)}
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error": str(exc)}
        )

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("trustscore.main:app", host="0.0.0.0", port=8000, reload=True)
