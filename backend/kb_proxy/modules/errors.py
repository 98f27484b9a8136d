"""Error types raised by the upstream clients and the chat flow."""

from typing import Any


class ProxyError(Exception):
    """Base class for proxy failures."""


class UpstreamFailure(ProxyError):
    """An upstream call failed. Either an UpstreamError or a TransportError."""


class UpstreamError(UpstreamFailure):
    """Upstream answered with a non-2xx status."""

    def __init__(self, status_code: int, body: Any = None):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Upstream responded with status {status_code}")


class TransportError(UpstreamFailure):
    """Upstream call failed below the HTTP layer (network, timeout, DNS)."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class GenerationError(ProxyError):
    """The language model call failed or produced no text."""


class ConfigurationError(ProxyError):
    """Required settings are absent at request time."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing configuration: {', '.join(missing)}")
