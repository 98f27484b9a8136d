"""FastAPI dependencies for upstream clients."""

import httpx
from fastapi import Depends, Request

from kb_proxy.config import Settings, get_settings
from kb_proxy.modules.generation import GeminiGenerator
from kb_proxy.modules.knowledge import KnowledgeClient


def build_http_client(transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Connection pool for upstream calls. Follows redirects."""
    return httpx.AsyncClient(transport=transport, follow_redirects=True)


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared connection pool created in the application lifespan."""
    return request.app.state.http_client


def get_knowledge_client(
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> KnowledgeClient:
    return KnowledgeClient(
        http_client,
        base_url=settings.context_api_base_url,
        api_key=settings.api_key,
        list_timeout=settings.list_timeout_seconds,
        timeout=settings.upstream_timeout_seconds,
    )


def get_generator(settings: Settings = Depends(get_settings)) -> GeminiGenerator:
    return GeminiGenerator(api_key=settings.gemini_api_key, model=settings.generation_model)
