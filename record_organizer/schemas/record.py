"""
Pydantic schemas for records and their headers.

Defines the incoming DTOs used to create and update records, the response
shapes for flat and tree reads, and the reposition payload.
"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict


# HTTP methods supported by the system
HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]

# Record categories; only folders may have children
RecordCategory = Literal["request", "folder"]


# Header schemas

class HeaderDto(BaseModel):
    """Incoming header entry. Empty keys and values are allowed."""
    id: str | None = None
    key: str = ""
    value: str = ""
    is_active: bool = True
    sort: int | None = None


class HeaderResponse(BaseModel):
    """Schema for header response."""
    id: str
    key: str
    value: str
    is_active: bool
    sort: int

    model_config = ConfigDict(from_attributes=True)


# Record schemas

class RecordDto(BaseModel):
    """
    Incoming record used for both create and update.

    ``name`` is optional here on purpose: a missing name is reported by the
    save path as a failed result rather than a request validation error.
    """
    id: str | None = None
    url: str = ""
    pid: str | None = None
    body: str | None = None
    headers: list[HeaderDto] | None = None
    test: str | None = None
    sort: int | None = None
    method: HttpMethod = "GET"
    collection_id: str
    name: str | None = None
    category: RecordCategory = "request"


class RecordResponse(BaseModel):
    """Schema for a record without headers."""
    id: str
    name: str | None
    url: str
    method: str
    body: str | None
    category: str
    test: str | None
    sort: int
    pid: str | None
    collection_id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RecordWithHeaders(RecordResponse):
    """
    Schema for a record including its headers.

    ``headers`` has no default, so a payload without it resolves to
    ``RecordResponse`` in the read endpoints.
    """
    headers: list[HeaderResponse]


class RecordTreeNode(RecordWithHeaders):
    """Recursive tree node. ``children`` is only present on folders."""
    children: Optional[list["RecordTreeNode"]] = None


RecordTreeNode.model_rebuild()


class RepositionRequest(BaseModel):
    """Schema for moving a record to an explicit position."""
    record_id: str
    folder_id: str | None
    collection_id: str
    new_sort: int


class ResObject(BaseModel):
    """Structured operation result."""
    success: bool
    message: str
    result: Any | None = None


class Message:
    """Fixed message identifiers returned in ``ResObject.message``."""
    RECORD_SAVE_SUCCESS = "recordSaveSuccess"
    RECORD_CREATE_FAILED_ON_NAME = "recordCreateFailedOnName"
    RECORD_SORT_SUCCESS = "recordSortSuccess"
    RECORD_DELETE_SUCCESS = "recordDeleteSuccess"
