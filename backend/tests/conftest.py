"""Pytest configuration and fixtures."""

import json
import sys
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

# Add backend directory to path so tests can import kb_proxy without installing
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from kb_proxy.config import Settings, get_settings  # noqa: E402
from kb_proxy.dependencies import build_http_client, get_generator, get_http_client  # noqa: E402
from kb_proxy.main import app as main_app  # noqa: E402
from kb_proxy.modules.generation import GeminiGenerator  # noqa: E402
from kb_proxy.modules.knowledge import KnowledgeClient  # noqa: E402
from kb_proxy.modules.observability import reset_latency_stats, reset_relay_metrics  # noqa: E402

BASE_URL = "https://context.test"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeContextAPI:
    """
    In-process stand-in for the knowledge-base service.

    Register responses per (method, path); every request is recorded.
    Unregistered routes answer 404.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method, path)] = handler

    def respond(self, method: str, path: str, status_code: int = 200, json_body: Any = None) -> None:
        self.add(method, path, lambda request: httpx.Response(status_code, json=json_body))

    def fail(self, method: str, path: str, exc_type: type[httpx.RequestError] = httpx.ConnectError) -> None:
        def raise_error(request: httpx.Request) -> httpx.Response:
            raise exc_type("connection refused", request=request)

        self.add(method, path, raise_error)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"detail": "no route"})
        return handler(request)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        api_key="test-api-key",
        knowledge_base_id="kb-123",
        gemini_api_key="test-gemini-key",
        context_api_base_url=BASE_URL,
    )


@pytest.fixture
def context_api() -> FakeContextAPI:
    return FakeContextAPI()


@pytest.fixture
def http_client(context_api: FakeContextAPI) -> httpx.AsyncClient:
    return build_http_client(transport=httpx.MockTransport(context_api.handle))


@pytest.fixture
def knowledge_client(http_client: httpx.AsyncClient, settings: Settings) -> KnowledgeClient:
    return KnowledgeClient(
        http_client,
        base_url=settings.context_api_base_url,
        api_key=settings.api_key,
        list_timeout=settings.list_timeout_seconds,
        timeout=settings.upstream_timeout_seconds,
    )


@pytest.fixture
def generator() -> MagicMock:
    fake = MagicMock(spec=GeminiGenerator)
    fake.generate = AsyncMock(return_value="Generated answer")
    return fake


@pytest.fixture(autouse=True)
def reset_metrics():
    reset_latency_stats()
    reset_relay_metrics()
    yield


@pytest.fixture
def app(settings: Settings, http_client: httpx.AsyncClient, generator: MagicMock):
    """Application with settings and upstream clients replaced."""
    main_app.dependency_overrides[get_settings] = lambda: settings
    main_app.dependency_overrides[get_http_client] = lambda: http_client
    main_app.dependency_overrides[get_generator] = lambda: generator
    yield main_app
    main_app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)
