"""Knowledge base proxy: relays a frontend to the Context API and Gemini."""

__version__ = "0.1.0"
