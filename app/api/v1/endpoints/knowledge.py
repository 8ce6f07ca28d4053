"""Knowledge base API. ?all=1 includes pending items (admin or manager)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from app.api.v1.dependencies import CurrentIdentity, get_knowledge_service
from app.application.dtos.records import KnowledgeItemCreate, KnowledgeItemUpdate
from app.application.services import KnowledgeService
from app.core.limiter import limit_writes
from app.schemas.knowledge import (
    KnowledgeItemCreateRequest,
    KnowledgeItemResponse,
    KnowledgeItemUpdateRequest,
    KnowledgeListResponse,
)

router = APIRouter()


@router.get("", response_model=KnowledgeListResponse)
async def list_knowledge(
    identity: CurrentIdentity,
    knowledge: Annotated[KnowledgeService, Depends(get_knowledge_service)],
    include_all: Annotated[bool, Query(alias="all")] = False,
):
    items = await knowledge.list(identity, include_all=include_all)
    return KnowledgeListResponse(items=[KnowledgeItemResponse.model_validate(i) for i in items])


@router.post("", response_model=KnowledgeItemResponse, status_code=201)
@limit_writes
async def create_knowledge(
    request: Request,
    body: KnowledgeItemCreateRequest,
    identity: CurrentIdentity,
    knowledge: Annotated[KnowledgeService, Depends(get_knowledge_service)],
):
    """Admins publish immediately; managers' items wait for review."""
    item = await knowledge.create(
        identity,
        KnowledgeItemCreate(
            title=body.title,
            body=body.body,
            tags=body.tags,
            can_paraphrase=body.can_paraphrase,
        ),
    )
    return KnowledgeItemResponse.model_validate(item)


@router.patch("/{item_id}", response_model=KnowledgeItemResponse)
@limit_writes
async def update_knowledge(
    request: Request,
    item_id: str,
    body: KnowledgeItemUpdateRequest,
    identity: CurrentIdentity,
    knowledge: Annotated[KnowledgeService, Depends(get_knowledge_service)],
):
    item = await knowledge.update(
        identity,
        item_id,
        KnowledgeItemUpdate(
            title=body.title,
            body=body.body,
            tags=body.tags,
            can_paraphrase=body.can_paraphrase,
            status=body.status,
        ),
    )
    return KnowledgeItemResponse.model_validate(item)


@router.delete("/{item_id}", status_code=204)
@limit_writes
async def delete_knowledge(
    request: Request,
    item_id: str,
    identity: CurrentIdentity,
    knowledge: Annotated[KnowledgeService, Depends(get_knowledge_service)],
):
    await knowledge.delete(identity, item_id)
    return Response(status_code=204)
