"""Chat endpoint."""

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from kb_proxy.config import Settings, get_settings
from kb_proxy.dependencies import get_generator, get_knowledge_client
from kb_proxy.models.schemas import ChatRequest, ChatResponse, ErrorResponse
from kb_proxy.modules.errors import ConfigurationError, UpstreamError, UpstreamFailure
from kb_proxy.modules.generation import GeminiGenerator
from kb_proxy.modules.knowledge import KnowledgeClient
from kb_proxy.modules.observability import (
    ChatOutcome,
    record_chat_outcome,
    record_upstream_failure,
    track_latency,
)
from kb_proxy.modules.orchestration import answer_query

router = APIRouter()
logger = structlog.get_logger()

MISCONFIGURATION_MESSAGE = "Server misconfiguration."
INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": message},
    )


@router.post(
    "",
    response_model=ChatResponse,
    responses={500: {"model": ErrorResponse}},
)
@track_latency("chat")
async def chat(
    request: ChatRequest,
    settings: Settings = Depends(get_settings),
    knowledge: KnowledgeClient = Depends(get_knowledge_client),
    generator: GeminiGenerator = Depends(get_generator),
) -> ChatResponse | JSONResponse:
    """
    Answer a question from the configured knowledge base.

    Process:
    1. Retrieve the top chunks for the query from the Context API
    2. Answer with a canned message when nothing relevant is found
    3. Otherwise ask Gemini with the chunks as context

    Missing credentials return "Server misconfiguration."; every other
    failure collapses to "Internal server error".
    """
    logger.info("Processing chat request", query_length=len(request.query))

    try:
        exchange = await answer_query(request.query, settings, knowledge, generator)
    except ConfigurationError:
        record_chat_outcome(ChatOutcome.MISCONFIGURED)
        return error_response(MISCONFIGURATION_MESSAGE)
    except UpstreamFailure as e:
        status_code = e.status_code if isinstance(e, UpstreamError) else None
        record_upstream_failure("retrieve", status_code)
        logger.error("Retrieval failed", error=str(e))
        record_chat_outcome(ChatOutcome.FAILED)
        return error_response(INTERNAL_ERROR_MESSAGE)
    except Exception as e:
        logger.exception("Chat request failed", error=str(e))
        record_chat_outcome(ChatOutcome.FAILED)
        return error_response(INTERNAL_ERROR_MESSAGE)

    record_chat_outcome(
        ChatOutcome.ANSWERED if exchange.generated else ChatOutcome.EMPTY_RETRIEVAL
    )
    logger.info(
        "Chat request completed",
        chunks_used=exchange.chunks_used,
        answer_length=len(exchange.answer),
    )
    return ChatResponse(answer=exchange.answer)
