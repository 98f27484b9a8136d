"""Mapping of upstream failures to HTTP responses."""

from fastapi import status
from fastapi.responses import JSONResponse

from kb_proxy.modules.errors import TransportError, UpstreamError
from kb_proxy.modules.observability import record_upstream_failure


def failure_response(exc: Exception, operation: str) -> JSONResponse:
    """
    Convert a failed relay into a response.

    - UpstreamError: upstream status and body, verbatim
    - TransportError: 500 with the transport message
    - anything else: 500 with the exception message
    """
    if isinstance(exc, UpstreamError):
        record_upstream_failure(operation, exc.status_code)
        body = exc.body if exc.body not in (None, "") else {"error": str(exc)}
        return JSONResponse(status_code=exc.status_code, content=body)

    if isinstance(exc, TransportError):
        record_upstream_failure(operation, None)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": exc.message},
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc) or exc.__class__.__name__},
    )
