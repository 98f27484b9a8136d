"""Chat orchestration."""

from kb_proxy.modules.orchestration.rag_flow import (
    NO_RESULTS_ANSWER,
    ChatExchange,
    PROMPT_TEMPLATE,
    answer_query,
    build_context,
    build_prompt,
)

__all__ = [
    "NO_RESULTS_ANSWER",
    "ChatExchange",
    "PROMPT_TEMPLATE",
    "answer_query",
    "build_context",
    "build_prompt",
]
