"""HTTP client for the Context API knowledge-base service."""

from dataclasses import dataclass
from typing import Any, Sequence

import httpx
import structlog

from kb_proxy.modules.errors import TransportError, UpstreamError

logger = structlog.get_logger()

DEFAULT_KNOWLEDGE_BASE_NAME = "New Knowledge Base"


@dataclass(frozen=True)
class UploadedDocument:
    """A file attachment forwarded to the knowledge-base service."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


def decode_body(response: httpx.Response) -> Any:
    """Decode a response body as JSON, falling back to raw text."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class KnowledgeClient:
    """
    Authenticated calls against the knowledge-base service.

    Every call attaches the ``x-api-key`` header. Non-2xx responses raise
    UpstreamError with the decoded body; transport failures raise
    TransportError.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        api_key: str,
        list_timeout: float = 8.0,
        timeout: float = 30.0,
    ):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.list_timeout = list_timeout
        self.timeout = timeout

    @property
    def headers(self) -> dict[str, str]:
        return {"x-api-key": self.api_key}

    async def _send(self, operation: str, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        kwargs.setdefault("timeout", self.timeout)
        try:
            response = await self.http_client.request(
                method, url, headers=self.headers, **kwargs
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            body = decode_body(e.response)
            logger.error(
                "Upstream returned error status",
                operation=operation,
                status_code=e.response.status_code,
            )
            raise UpstreamError(e.response.status_code, body) from e
        except httpx.RequestError as e:
            message = str(e) or e.__class__.__name__
            logger.error("Upstream transport failure", operation=operation, error=message)
            raise TransportError(message) from e

        return decode_body(response)

    async def list_knowledge_bases(self) -> Any:
        """List knowledge bases. Uses the short listing timeout."""
        return await self._send(
            "list_knowledge_bases", "GET", "/knowledgebase", timeout=self.list_timeout
        )

    async def create_knowledge_base(
        self,
        name: str | None = None,
        description: str | None = None,
        files: Sequence[UploadedDocument] = (),
    ) -> Any:
        """
        Create a knowledge base from uploaded files.

        The request is always multipart/form-data, even with no files
        attached. Plain fields are sent as filename-less parts.

        Returns:
            Upstream body, including the request id used for status polling
        """
        parts: list[tuple[str, tuple]] = [
            ("name", (None, name or DEFAULT_KNOWLEDGE_BASE_NAME)),
        ]
        if description:
            parts.append(("description", (None, description)))
        for document in files:
            parts.append(
                ("files", (document.filename, document.content, document.content_type))
            )

        logger.info(
            "Creating knowledge base",
            name=name or DEFAULT_KNOWLEDGE_BASE_NAME,
            file_count=len(files),
        )
        return await self._send("create_knowledge_base", "POST", "/knowledgebase", files=parts)

    async def get_creation_status(self, request_id: str) -> Any:
        """Fetch processing status for a creation request."""
        return await self._send(
            "get_creation_status", "GET", f"/knowledgebase/{request_id}"
        )

    async def retrieve(self, knowledge_base_id: str, query: str, top_k: int = 5) -> list[str]:
        """
        Similarity search against a knowledge base.

        Returns:
            Non-blank chunk contents in the order the service ranked them
        """
        payload = {
            "knowledgeBaseId": knowledge_base_id,
            "query": query,
            "topK": top_k,
        }
        data = await self._send(
            "retrieve",
            "POST",
            f"/knowledgebase/{knowledge_base_id}/embeddings",
            json=payload,
        )
        embeddings = data.get("embeddings") if isinstance(data, dict) else None
        chunks = [item.get("content") for item in embeddings or []]
        return [chunk for chunk in chunks if isinstance(chunk, str) and chunk.strip()]
