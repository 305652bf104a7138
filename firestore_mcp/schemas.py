from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

Operator = Literal["==", "!=", ">", "<", ">=", "<=", "array-contains", "array-contains-any", "in", "not-in"]
Direction = Literal["asc", "desc"]


class ProjectArgs(BaseModel):
    project: Optional[str] = Field(None, min_length=1)


class DocumentArgs(ProjectArgs):
    collection: str = Field(min_length=1)
    id: str = Field(min_length=1)


class CreateDocumentArgs(ProjectArgs):
    collection: str = Field(min_length=1)
    data: dict[str, Any]
    id: Optional[str] = Field(None, min_length=1)


class UpdateDocumentArgs(DocumentArgs):
    data: dict[str, Any]
    merge: bool = True


class QueryFilter(BaseModel):
    field: str = Field(min_length=1)
    operator: Operator
    value: Any


class OrderBy(BaseModel):
    field: str = Field(min_length=1)
    direction: Direction = "asc"


class QueryDocumentsArgs(ProjectArgs):
    model_config = ConfigDict(populate_by_name=True)

    collection: str = Field(min_length=1)
    filters: Optional[list[QueryFilter]] = None
    order_by: Optional[list[OrderBy]] = Field(None, alias="orderBy")
    limit: Optional[int] = Field(None, gt=0)


class ListPromptsArgs(ProjectArgs):
    collection: str = Field("prompts", min_length=1)
    limit: Optional[int] = Field(None, gt=0)


class EmptyArgs(BaseModel):
    pass


def format_errors(exc: ValidationError) -> str:
    """Flatten pydantic errors into "path.to.field: message, ..."."""
    return ", ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
