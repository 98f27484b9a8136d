"""Knowledge-base relay endpoints."""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, File, Form, UploadFile

from kb_proxy.dependencies import get_knowledge_client
from kb_proxy.modules.knowledge import KnowledgeClient, UploadedDocument
from kb_proxy.modules.observability import track_latency
from kb_proxy.routes.relay import failure_response

router = APIRouter()
logger = structlog.get_logger()


async def read_uploads(files: list[UploadFile]) -> list[UploadedDocument]:
    """Read uploaded files into memory so they can be forwarded."""
    documents = []
    for upload in files:
        documents.append(
            UploadedDocument(
                filename=upload.filename or "upload",
                content=await upload.read(),
                content_type=upload.content_type or "application/octet-stream",
            )
        )
    return documents


@router.get("")
@track_latency("list_knowledge_bases")
async def list_knowledge_bases(
    knowledge: KnowledgeClient = Depends(get_knowledge_client),
) -> Any:
    """List knowledge bases from the Context API."""
    try:
        return await knowledge.list_knowledge_bases()
    except Exception as e:
        logger.error("Error listing knowledge bases", error=str(e))
        return failure_response(e, "list_knowledge_bases")


@router.post("")
@track_latency("create_knowledge_base")
async def create_knowledge_base(
    name: str | None = Form(None, description="Knowledge base name"),
    description: str | None = Form(None, description="Optional description"),
    files: list[UploadFile] = File(default=[], description="Documents to index"),
    knowledge: KnowledgeClient = Depends(get_knowledge_client),
) -> Any:
    """
    Create a knowledge base by forwarding uploaded files.

    Files are held in memory and forwarded as-is; the upstream service
    processes them asynchronously. Poll GET /api/knowledgebase/{request_id}
    with the returned request id for progress.
    """
    try:
        documents = await read_uploads(files)
        return await knowledge.create_knowledge_base(
            name=name,
            description=description,
            files=documents,
        )
    except Exception as e:
        logger.error("Error creating knowledge base", error=str(e))
        return failure_response(e, "create_knowledge_base")


@router.get("/{request_id}")
@track_latency("get_creation_status")
async def get_creation_status(
    request_id: str,
    knowledge: KnowledgeClient = Depends(get_knowledge_client),
) -> Any:
    """Check processing status of a knowledge base creation request."""
    try:
        return await knowledge.get_creation_status(request_id)
    except Exception as e:
        logger.error("Error checking creation status", request_id=request_id, error=str(e))
        return failure_response(e, "get_creation_status")
