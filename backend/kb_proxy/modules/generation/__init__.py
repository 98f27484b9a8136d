"""Response generation module."""

from kb_proxy.modules.generation.gemini_backend import DEFAULT_MODEL, GeminiGenerator

__all__ = [
    "DEFAULT_MODEL",
    "GeminiGenerator",
]
