"""
Sort allocation for records.

New records receive a sort value that is strictly greater than every value
handed out before and every value already stored. Moving a record to an
explicit position shifts its new siblings up by one in the same
transaction.

The running counter lives in process memory and is not persisted, so the
guarantees hold for a single writer process only.
"""

import logging
import threading
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import transaction
from ..exceptions import BadRequestError, ResourceNotFoundError, TransactionError
from ..models.record import CATEGORY_FOLDER, Record
from ..schemas.record import Message, ResObject

logger = logging.getLogger(__name__)


def _sibling_scope(collection_id: str, folder_id: Optional[str]):
    """Filter clauses selecting records under ``folder_id`` in a collection."""
    parent_clause = Record.pid.is_(None) if folder_id is None else Record.pid == folder_id
    return (Record.collection_id == collection_id, parent_clause)


def _check_destination(db: Session, record_id: str, folder_id: str, collection_id: str) -> None:
    """
    Reject moves that would leave the record outside every tree.

    The destination must be an existing folder of ``collection_id`` that is
    neither the record itself nor one of its descendants.
    """
    if folder_id == record_id:
        raise BadRequestError("A record cannot be its own parent")

    folder = db.get(Record, folder_id)
    if folder is None or folder.category != CATEGORY_FOLDER or folder.collection_id != collection_id:
        raise ResourceNotFoundError("Folder", folder_id)

    seen = {folder_id}
    current_id = folder.pid
    while current_id and current_id not in seen:
        if current_id == record_id:
            raise BadRequestError("Moving this record would create a circular reference")
        seen.add(current_id)
        parent = db.get(Record, current_id)
        if parent is None:
            break
        current_id = parent.pid


class SortAllocator:
    """
    Hands out sort values and repositions records among siblings.

    One instance is shared by the whole process (see ``sort_allocator``).
    Tests may call ``reset`` between cases.
    """

    def __init__(self, start: int = 0):
        self._current = start
        self._lock = threading.Lock()
        self._reposition_lock = threading.Lock()

    @property
    def current(self) -> int:
        return self._current

    def reset(self, start: int = 0) -> None:
        with self._lock:
            self._current = start

    def next_sort(self, db: Session) -> int:
        """
        Return the next sort value.

        The result is the larger of the running counter plus one and the
        stored maximum plus one. The counter is advanced before returning,
        so repeated calls without persisting still yield distinct values.
        """
        with self._lock:
            candidate = self._current + 1
            stored_max = db.execute(select(func.max(Record.sort))).scalar()
            if stored_max is not None:
                candidate = max(candidate, stored_max + 1)
            self._current = candidate
        logger.debug("Allocated sort %d", candidate)
        return candidate

    def reposition(
        self,
        db: Session,
        record_id: str,
        folder_id: Optional[str],
        collection_id: str,
        new_sort: int,
    ) -> ResObject:
        """
        Move a record into ``folder_id`` of ``collection_id`` at ``new_sort``.

        Siblings at or after ``new_sort`` are shifted up by one, then the
        record is moved. Both statements commit together or not at all.

        Raises:
            ResourceNotFoundError: If the record does not exist, or
                ``folder_id`` is not a folder of ``collection_id``. Nothing
                is changed.
            BadRequestError: If ``folder_id`` is the record itself or lies
                inside it. Nothing is changed.
            TransactionError: If the store rejects the transaction. Nothing
                is changed.
        """
        scope = _sibling_scope(collection_id, folder_id)

        with self._reposition_lock:
            try:
                with transaction(db):
                    record = db.get(Record, record_id)
                    if record is None:
                        raise ResourceNotFoundError("Record", record_id)
                    if folder_id is not None:
                        _check_destination(db, record_id, folder_id, collection_id)

                    # Lock the destination siblings where the backend supports it
                    db.execute(
                        select(Record.id).where(*scope).with_for_update()
                    ).all()

                    db.execute(
                        update(Record)
                        .where(*scope, Record.sort >= new_sort, Record.id != record_id)
                        .values(sort=Record.sort + 1)
                        .execution_options(synchronize_session=False)
                    )
                    db.execute(
                        update(Record)
                        .where(Record.id == record_id)
                        .values(pid=folder_id, collection_id=collection_id, sort=new_sort)
                        .execution_options(synchronize_session=False)
                    )
            except SQLAlchemyError as exc:
                raise TransactionError(f"Reposition of record {record_id} failed") from exc

        db.expire_all()
        logger.info(
            "Moved record %s to collection %s, folder %s, sort %d",
            record_id, collection_id, folder_id, new_sort,
        )
        return ResObject(success=True, message=Message.RECORD_SORT_SUCCESS)


# Process-wide allocator
sort_allocator = SortAllocator()


def get_sort_allocator() -> SortAllocator:
    """Dependency function for FastAPI returning the shared allocator."""
    return sort_allocator
