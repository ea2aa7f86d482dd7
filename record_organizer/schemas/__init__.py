"""
Pydantic schemas package.

Exports all schemas for API request/response validation.
"""

from .record import (
    HttpMethod,
    RecordCategory,
    HeaderDto,
    HeaderResponse,
    RecordDto,
    RecordResponse,
    RecordWithHeaders,
    RecordTreeNode,
    RepositionRequest,
    ResObject,
    Message,
)

__all__ = [
    "HttpMethod",
    "RecordCategory",
    # Header schemas
    "HeaderDto",
    "HeaderResponse",
    # Record schemas
    "RecordDto",
    "RecordResponse",
    "RecordWithHeaders",
    "RecordTreeNode",
    "RepositionRequest",
    # Results
    "ResObject",
    "Message",
]
