"""
Record assembly from DTOs and deep cloning of records.
"""

from datetime import datetime

from ..models.record import Record, generate_uid
from ..schemas.record import RecordDto
from .header_factory import clone_header, header_from_dto


def record_from_dto(dto: RecordDto) -> Record:
    """
    Build an unattached Record from an incoming DTO.

    No validation happens here. A missing id gets a fresh UID; ``sort`` is
    left as None when absent so the save path can decide on it. Headers
    are built in list order and linked back to the new record.
    """
    record = Record(
        id=dto.id or generate_uid(),
        url=dto.url,
        pid=dto.pid,
        body=dto.body,
        test=dto.test,
        sort=dto.sort,
        method=dto.method,
        collection_id=dto.collection_id,
        name=dto.name,
        category=dto.category,
    )
    if dto.headers is not None:
        record.headers = [
            header_from_dto(header_dto, position)
            for position, header_dto in enumerate(dto.headers)
        ]
    return record


def clone_record(record: Record) -> Record:
    """
    Return a copy of ``record`` that shares no mutable state with it.

    The copy gets a new id, a new creation time and freshly cloned headers.
    """
    now = datetime.utcnow()
    return Record(
        id=generate_uid(),
        name=record.name,
        url=record.url,
        method=record.method,
        body=record.body,
        category=record.category,
        test=record.test,
        sort=record.sort,
        pid=record.pid,
        collection_id=record.collection_id,
        created_at=now,
        updated_at=now,
        headers=[clone_header(header) for header in record.headers],
    )
