"""Knowledge-base service client."""

from kb_proxy.modules.knowledge.client import (
    DEFAULT_KNOWLEDGE_BASE_NAME,
    KnowledgeClient,
    UploadedDocument,
    decode_body,
)

__all__ = [
    "DEFAULT_KNOWLEDGE_BASE_NAME",
    "KnowledgeClient",
    "UploadedDocument",
    "decode_body",
]
