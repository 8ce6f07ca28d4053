"""Department API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class DepartmentCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)


class DepartmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    is_active: bool


class DepartmentMembersRequest(BaseModel):
    """Users to assign to a department."""

    user_ids: list[str] = Field(..., min_length=1)


class DepartmentAssignResponse(BaseModel):
    assigned_count: int


class UserDepartmentsUpdate(BaseModel):
    """The complete set of departments a user should belong to."""

    department_ids: list[str] = Field(default_factory=list)
