"""Retrieval-augmented answering: retrieve chunks, then generate."""

from dataclasses import dataclass

import structlog

from kb_proxy.config import Settings
from kb_proxy.modules.errors import ConfigurationError
from kb_proxy.modules.generation import GeminiGenerator
from kb_proxy.modules.knowledge import KnowledgeClient

logger = structlog.get_logger()

NO_RESULTS_ANSWER = "No relevant information found."

PROMPT_TEMPLATE = """
Use the following context to answer clearly and concisely.

Context:
{context}

Question:
{query}
"""

CHUNK_PREVIEW_CHARS = 80


@dataclass(frozen=True)
class ChatExchange:
    """One question and its answer. Lives for a single request."""
    query: str
    answer: str
    chunks_used: int = 0

    @property
    def generated(self) -> bool:
        return self.chunks_used > 0


def build_context(chunks: list[str]) -> str:
    """Join trimmed chunks, in retrieval order, separated by a blank line."""
    return "\n\n".join(chunk.strip() for chunk in chunks)


def build_prompt(context: str, query: str) -> str:
    return PROMPT_TEMPLATE.format(context=context, query=query)


async def answer_query(
    query: str,
    settings: Settings,
    knowledge: KnowledgeClient,
    generator: GeminiGenerator,
) -> ChatExchange:
    """
    Answer a question from the configured knowledge base.

    Process:
    1. Fail fast if credentials or the knowledge base id are missing
    2. Retrieve the top-k chunks for the query
    3. Return a canned answer when nothing relevant was found
    4. Build the context and prompt, then generate the answer

    Retrieval and generation are independent steps. A generation failure
    leaves nothing behind to roll back.

    Raises:
        ConfigurationError: required settings are absent
        UpstreamFailure: retrieval failed
        GenerationError: generation failed
    """
    missing = settings.missing_chat_settings()
    if missing:
        logger.error("Chat settings missing", missing=missing)
        raise ConfigurationError(missing)

    logger.info("Retrieving context", knowledge_base_id=settings.knowledge_base_id)
    chunks = await knowledge.retrieve(
        settings.knowledge_base_id,
        query,
        top_k=settings.retrieval_top_k,
    )
    logger.info("Retrieval completed", chunks_found=len(chunks))

    if not chunks:
        logger.warning("No relevant chunks found", knowledge_base_id=settings.knowledge_base_id)
        return ChatExchange(query=query, answer=NO_RESULTS_ANSWER)

    for index, chunk in enumerate(chunks, start=1):
        logger.info("Retrieved chunk", rank=index, preview=chunk[:CHUNK_PREVIEW_CHARS])

    prompt = build_prompt(build_context(chunks), query)
    answer = await generator.generate(prompt, settings.generation_model)
    return ChatExchange(query=query, answer=answer, chunks_used=len(chunks))
