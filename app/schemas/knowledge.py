"""Knowledge base API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import KnowledgeStatus


class KnowledgeItemCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    body: str = Field(default="")
    tags: list[str] = Field(default_factory=list)
    can_paraphrase: bool = False


class KnowledgeItemUpdateRequest(BaseModel):
    """Partial update. Only admins may set status to published."""

    title: str | None = Field(default=None, min_length=1, max_length=300)
    body: str | None = None
    tags: list[str] | None = None
    can_paraphrase: bool | None = None
    status: KnowledgeStatus | None = None


class KnowledgeItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    body: str
    tags: list[str]
    can_paraphrase: bool
    status: KnowledgeStatus
    version: int
    created_at: datetime | None = None


class KnowledgeListResponse(BaseModel):
    items: list[KnowledgeItemResponse]
