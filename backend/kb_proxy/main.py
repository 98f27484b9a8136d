"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kb_proxy import __version__
from kb_proxy.config import get_settings
from kb_proxy.dependencies import build_http_client
from kb_proxy.routes import health, knowledgebase, chat, metrics
from kb_proxy.modules.observability import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the shared upstream connection pool."""
    settings = get_settings()
    logger = structlog.get_logger()

    logger.info(
        "Starting Knowledge Base Proxy",
        env=settings.app_env,
        context_api=settings.context_api_base_url,
    )
    missing = settings.missing_chat_settings()
    if missing:
        logger.warning("Chat settings missing, /api/chat will fail", missing=missing)

    app.state.http_client = build_http_client()

    yield

    await app.state.http_client.aclose()
    logger.info("Shutting down Knowledge Base Proxy")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: every request gets a JSON answer."""
    structlog.get_logger().exception("Unhandled error", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc) or exc.__class__.__name__},
    )


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Relay between the frontend, the Context API and Gemini",
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health.router, tags=["Health"])
    app.include_router(knowledgebase.router, prefix="/api/knowledgebase", tags=["Knowledge Base"])
    app.include_router(chat.router, prefix="/api/chat", tags=["Chat"])
    app.include_router(metrics.router, prefix="/metrics", tags=["Metrics"])

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "kb_proxy.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
