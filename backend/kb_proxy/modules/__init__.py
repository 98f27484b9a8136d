"""Core proxy modules."""

from kb_proxy.modules import errors, knowledge, generation, orchestration, observability

__all__ = ["errors", "knowledge", "generation", "orchestration", "observability"]
