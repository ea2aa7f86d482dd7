"""
Header model for key/value pairs attached to a record.
"""

from typing import TYPE_CHECKING

from sqlalchemy import String, Text, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base
from .record import generate_uid

if TYPE_CHECKING:
    from .record import Record


class Header(Base):
    """
    SQLAlchemy model for record headers.

    A header belongs to exactly one record and is deleted with it.
    Inactive headers are stored but left out when headers are formatted
    for sending.

    Attributes:
        id: Unique identifier for the header
        record_id: Reference to the owning record
        key: Header name
        value: Header value
        is_active: Whether the header is sent with the request
        sort: Display position within the record's header list
        record: Owning record relationship
    """
    __tablename__ = "headers"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_uid)
    record_id: Mapped[str] = mapped_column(
        ForeignKey("records.id", ondelete="CASCADE")
    )
    key: Mapped[str] = mapped_column(String(255), default="")
    value: Mapped[str] = mapped_column(Text, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    sort: Mapped[int] = mapped_column(default=0)

    record: Mapped["Record"] = relationship(
        "Record",
        back_populates="headers"
    )
