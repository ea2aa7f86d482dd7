"""
Record model for stored HTTP requests and folders.

Records are stored flat. Hierarchy is expressed only through ``pid`` and
sibling order only through ``sort``; trees are rebuilt on every read.
"""

import uuid
from datetime import datetime
from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import String, Text, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base

if TYPE_CHECKING:
    from .header import Header


# Record categories
CATEGORY_REQUEST = "request"
CATEGORY_FOLDER = "folder"


def generate_uid() -> str:
    """Return a new unique identifier for records and headers."""
    return uuid.uuid4().hex


class Record(Base):
    """
    SQLAlchemy model for records (requests and folders).

    ``pid`` is not a foreign key: a record may reference a parent that no
    longer exists, and such records are left out of reconstructed trees.

    Attributes:
        id: Unique identifier, assigned once at creation
        name: Human-readable name
        url: Target URL
        method: HTTP method
        body: Request body content
        category: Either "request" or "folder"
        test: Test script attached to the request
        sort: Order among siblings sharing (collection_id, pid)
        pid: Id of the parent folder, None for collection roots
        collection_id: Id of the owning collection
        created_at: Timestamp when the record was created
        updated_at: Timestamp when the record was last updated
        headers: Owned headers, ordered by their sort
    """
    __tablename__ = "records"
    __table_args__ = (
        Index("ix_records_sibling_sort", "collection_id", "pid", "sort"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_uid)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    url: Mapped[str] = mapped_column(Text, default="")
    method: Mapped[str] = mapped_column(String(10), default="GET")
    body: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(20), default=CATEGORY_REQUEST)
    test: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sort: Mapped[int] = mapped_column(default=0)
    pid: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    collection_id: Mapped[str] = mapped_column(String(64), index=True)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    headers: Mapped[List["Header"]] = relationship(
        "Header",
        back_populates="record",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Header.sort",
    )
