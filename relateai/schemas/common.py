"""
Common schemas used across multiple endpoints.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel

from relateai.core.validation import QueryInt

SortOrder = Literal["asc", "desc"]


class Pagination(BaseModel):
    """Pagination metadata attached to list responses."""
    total: int
    page: int
    limit: int
    pages: int
    has_next: bool
    has_prev: bool


class SuccessResponse(BaseModel):
    """Simple success envelope."""
    success: bool = True
    message: Optional[str] = None

    class Config:
        json_schema_extra = {"example": {"success": True, "message": "Operation successful"}}


class FieldError(BaseModel):
    path: str
    message: str


class ErrorResponse(BaseModel):
    """Error envelope."""
    success: bool = False
    message: str
    errors: Optional[List[FieldError]] = None
    error: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "message": "Validation error",
                "errors": [{"path": "name", "message": "Field required"}]
            }
        }


class PageQuery(BaseModel):
    """Paging and ordering shared by list queries."""
    page: Optional[QueryInt] = None
    limit: Optional[QueryInt] = None
    sort_order: Optional[SortOrder] = None
