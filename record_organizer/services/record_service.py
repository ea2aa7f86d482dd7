"""
Record persistence service.

Wraps the record store with the rules applied at save time:
- A record without a name is rejected with a failed ``ResObject``.
- New records receive their sort from the ``SortAllocator``.
- Updating a record replaces its whole header set.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.exc import FlushError

from ..database import transaction
from ..exceptions import ResourceNotFoundError, TransactionError, ValidationError
from ..models.record import Record
from ..schemas.record import Message, ResObject
from .collection_grouper import group_by_collection
from .record_assembler import clone_record
from .sort_allocator import SortAllocator

logger = logging.getLogger(__name__)


def _check_name(record: Record) -> None:
    if not record.name:
        raise ValidationError(Message.RECORD_CREATE_FAILED_ON_NAME)


def _rejected(record: Record, exc: ValidationError) -> ResObject:
    logger.info("Rejected record %s: %s", record.id, exc.detail)
    return ResObject(success=False, message=exc.detail)


def _conflict(record_id: str) -> TransactionError:
    logger.info("Record %s conflicts with stored data", record_id)
    return TransactionError(f"Record {record_id} or one of its headers uses an id that is already stored")


def _copy_fields(target: Record, source: Record) -> None:
    """Copy scalar fields of ``source`` onto ``target``, keeping its sort if none given."""
    target.name = source.name
    target.url = source.url
    target.method = source.method
    target.body = source.body
    target.category = source.category
    target.test = source.test
    target.pid = source.pid
    target.collection_id = source.collection_id
    if source.sort is not None:
        target.sort = source.sort


def create_record(db: Session, record: Record, allocator: SortAllocator) -> ResObject:
    """
    Persist a new record at the end of the global sort order.

    Args:
        db: Database session
        record: Unattached record, typically from ``record_from_dto``
        allocator: Sort allocator supplying the record's sort

    Returns:
        A successful ResObject carrying the record id, or a failed one when
        the record has no name. Nothing is written on failure.

    Raises:
        TransactionError: If the record id or a header id is already stored.
    """
    try:
        _check_name(record)
    except ValidationError as exc:
        return _rejected(record, exc)

    record_id = record.id
    record.sort = allocator.next_sort(db)
    try:
        with transaction(db):
            db.add(record)
    except (IntegrityError, FlushError) as exc:
        raise _conflict(record_id) from exc
    logger.info("Created record %s with sort %d", record_id, record.sort)
    return ResObject(success=True, message=Message.RECORD_SAVE_SUCCESS, result=record_id)


def update_record(db: Session, record: Record, allocator: SortAllocator) -> ResObject:
    """
    Persist ``record`` over the stored record with the same id.

    Stored headers are removed before the new header set is written; the
    two sets are never merged. A record that is not stored yet is inserted,
    with a freshly allocated sort when it carries none.

    Returns:
        A successful ResObject carrying the record id, or a failed one when
        the record has no name. Nothing is written on failure.

    Raises:
        TransactionError: If a header id is already stored for another
            record. The stored record is left unchanged.
    """
    try:
        _check_name(record)
    except ValidationError as exc:
        return _rejected(record, exc)

    record_id = record.id
    new_headers = list(record.headers)

    try:
        with transaction(db):
            existing = db.get(Record, record_id)
            if existing is None:
                if record.sort is None:
                    record.sort = allocator.next_sort(db)
                db.add(record)
            else:
                if existing.headers:
                    logger.debug("Removing %d headers of record %s", len(existing.headers), existing.id)
                    existing.headers.clear()
                    db.flush()
                _copy_fields(existing, record)
                existing.headers.extend(new_headers)
    except (IntegrityError, FlushError) as exc:
        raise _conflict(record_id) from exc

    logger.info("Saved record %s", record_id)
    return ResObject(success=True, message=Message.RECORD_SAVE_SUCCESS, result=record_id)


def get_record_by_id(
    db: Session,
    record_id: str,
    include_headers: bool = False,
) -> Optional[Record]:
    """
    Look up a record by id.

    Returns None when no record matches. Headers are eagerly loaded only
    when ``include_headers`` is set.
    """
    query = db.query(Record).filter(Record.id == record_id)
    if include_headers:
        query = query.options(selectinload(Record.headers))
    return query.first()


def list_records(
    db: Session,
    collection_id: Optional[str] = None,
    include_headers: bool = False,
) -> list[Record]:
    """List records flat, ordered by sort, optionally for one collection."""
    query = db.query(Record)
    if collection_id is not None:
        query = query.filter(Record.collection_id == collection_id)
    if include_headers:
        query = query.options(selectinload(Record.headers))
    return query.order_by(Record.sort, Record.id).all()


def get_records_by_collection_ids(db: Session, collection_ids: list[str]) -> dict[str, list[dict]]:
    """
    Build the record tree of each requested collection.

    Returns:
        Mapping of collection id to root-level tree nodes. Collections with
        no stored records are absent from the mapping.
    """
    if not collection_ids:
        return {}

    records = (
        db.query(Record)
        .filter(Record.collection_id.in_(collection_ids))
        .options(selectinload(Record.headers))
        .order_by(Record.sort, Record.id)
        .all()
    )
    return group_by_collection(records)


def duplicate_record(db: Session, record_id: str, allocator: SortAllocator) -> ResObject:
    """
    Clone a stored record with its headers and persist the copy.

    Raises:
        ResourceNotFoundError: If the source record does not exist.
    """
    source = get_record_by_id(db, record_id, include_headers=True)
    if source is None:
        raise ResourceNotFoundError("Record", record_id)
    return create_record(db, clone_record(source), allocator)


def delete_record(db: Session, record_id: str) -> bool:
    """
    Delete a record with its headers and, for folders, every descendant.

    Returns:
        False when the record does not exist, True otherwise.
    """
    record = db.get(Record, record_id)
    if record is None:
        return False

    doomed: dict[str, Record] = {record.id: record}
    frontier = [record.id]
    while frontier:
        children = db.query(Record).filter(Record.pid.in_(frontier)).all()
        frontier = []
        for child in children:
            if child.id not in doomed:
                doomed[child.id] = child
                frontier.append(child.id)

    with transaction(db):
        for doomed_record in doomed.values():
            db.delete(doomed_record)
    logger.info("Deleted record %s and %d descendants", record_id, len(doomed) - 1)
    return True
