"""
Record management API routes.

Provides CRUD, tree reads, cloning and repositioning of records.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.record import (
    RecordDto,
    RecordResponse,
    RecordWithHeaders,
    RecordTreeNode,
    RepositionRequest,
    ResObject,
    Message,
)
from ..services.header_factory import format_active_headers
from ..services.record_assembler import record_from_dto
from ..services.record_service import (
    create_record,
    delete_record,
    duplicate_record,
    get_record_by_id,
    get_records_by_collection_ids,
    list_records,
    update_record,
)
from ..services.sort_allocator import SortAllocator, get_sort_allocator


router = APIRouter(prefix="/api/records", tags=["records"])


def _serialize(record, include_headers: bool):
    if include_headers:
        return RecordWithHeaders.model_validate(record)
    return RecordResponse.model_validate(record)


@router.post("/reposition", response_model=ResObject)
def reposition_record(
    reposition_data: RepositionRequest,
    db: Session = Depends(get_db),
    allocator: SortAllocator = Depends(get_sort_allocator),
):
    """
    Move a record to a folder and position.

    Siblings at or after the target position are shifted up by one in the
    same transaction as the move.
    """
    return allocator.reposition(
        db,
        record_id=reposition_data.record_id,
        folder_id=reposition_data.folder_id,
        collection_id=reposition_data.collection_id,
        new_sort=reposition_data.new_sort,
    )


@router.get("/tree", response_model=dict[str, list[RecordTreeNode]])
def get_record_trees(
    collection_ids: list[str] = Query(default=[]),
    db: Session = Depends(get_db),
):
    """
    Get the record tree of each requested collection.

    Collections without records are left out of the response.
    """
    return get_records_by_collection_ids(db, collection_ids)


@router.post("", response_model=ResObject, status_code=status.HTTP_201_CREATED)
def create_record_endpoint(
    record_data: RecordDto,
    response: Response,
    db: Session = Depends(get_db),
    allocator: SortAllocator = Depends(get_sort_allocator),
):
    """
    Create a new record with its headers.

    Returns a failed result with status 422 when the record has no name.
    """
    result = create_record(db, record_from_dto(record_data), allocator)
    if not result.success:
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    return result


@router.get("", response_model=list[RecordWithHeaders | RecordResponse])
def list_records_endpoint(
    collection_id: str | None = None,
    include_headers: bool = False,
    db: Session = Depends(get_db),
):
    """List records flat, ordered by sort."""
    records = list_records(db, collection_id, include_headers)
    return [_serialize(record, include_headers) for record in records]


@router.get("/{record_id}", response_model=RecordWithHeaders | RecordResponse)
def get_record(
    record_id: str,
    include_headers: bool = False,
    db: Session = Depends(get_db),
):
    """
    Get a single record by ID.

    Raises:
        HTTPException: 404 if record not found
    """
    record = get_record_by_id(db, record_id, include_headers)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Record with id {record_id} not found"
        )
    return _serialize(record, include_headers)


@router.get("/{record_id}/active-headers", response_model=dict[str, str])
def get_active_headers(record_id: str, db: Session = Depends(get_db)):
    """Get the active headers of a record as a plain key/value mapping."""
    record = get_record_by_id(db, record_id, include_headers=True)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Record with id {record_id} not found"
        )
    return format_active_headers(record.headers)


@router.put("/{record_id}", response_model=ResObject)
def update_record_endpoint(
    record_id: str,
    record_data: RecordDto,
    response: Response,
    db: Session = Depends(get_db),
    allocator: SortAllocator = Depends(get_sort_allocator),
):
    """
    Save a record, replacing its whole header set.

    The id in the path wins over any id in the body.
    """
    record_data = record_data.model_copy(update={"id": record_id})
    result = update_record(db, record_from_dto(record_data), allocator)
    if not result.success:
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    return result


@router.post("/{record_id}/clone", response_model=ResObject, status_code=status.HTTP_201_CREATED)
def clone_record_endpoint(
    record_id: str,
    response: Response,
    db: Session = Depends(get_db),
    allocator: SortAllocator = Depends(get_sort_allocator),
):
    """Clone a record and its headers into a new record."""
    result = duplicate_record(db, record_id, allocator)
    if not result.success:
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    return result


@router.delete("/{record_id}", response_model=ResObject)
def delete_record_endpoint(record_id: str, db: Session = Depends(get_db)):
    """Delete a record by ID. Deleting a folder removes everything inside it."""
    if not delete_record(db, record_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Record with id {record_id} not found"
        )
    return ResObject(success=True, message=Message.RECORD_DELETE_SUCCESS)
