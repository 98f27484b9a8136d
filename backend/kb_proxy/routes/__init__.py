"""API route modules."""

from kb_proxy.routes import health, knowledgebase, chat, metrics

__all__ = ["health", "knowledgebase", "chat", "metrics"]
