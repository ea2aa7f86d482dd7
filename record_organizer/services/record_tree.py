"""
Record tree service for rebuilding folder/request hierarchies.

Records are stored flat; each read rebuilds the tree from ``pid`` links.

Rules:
- Root folders (no ``pid``) come first, in input order.
- Requests without a ``pid`` follow all root folders, whatever their sort.
- Inside a folder, children keep the order of the input list. Callers are
  expected to pass records already ordered by ascending ``sort``.
- A record whose ``pid`` matches no placed folder is left out silently.
"""

from typing import Optional, Sequence

from ..models.record import CATEGORY_FOLDER, Record


def record_to_node(record: Record) -> dict:
    """
    Convert a record into a tree node dictionary.

    Folder nodes get an empty ``children`` list; request nodes have none.
    """
    node = {
        "id": record.id,
        "name": record.name,
        "url": record.url,
        "method": record.method,
        "body": record.body,
        "category": record.category,
        "test": record.test,
        "sort": record.sort,
        "pid": record.pid,
        "collection_id": record.collection_id,
        "created_at": record.created_at,
        "updated_at": record.updated_at,
        "headers": [
            {
                "id": header.id,
                "key": header.key,
                "value": header.value,
                "is_active": header.is_active,
                "sort": header.sort,
            }
            for header in (record.headers or [])
        ],
    }
    if record.category == CATEGORY_FOLDER:
        node["children"] = []
    return node


def build_record_tree(records: Sequence[Record]) -> list[dict]:
    """
    Build the tree of a single collection from its flat record list.

    Args:
        records: Flat list of records of one collection, ordered by sort.

    Returns:
        Root-level node dictionaries with nested ``children``.
    """
    return _build_level(records, None, set())


def _build_level(
    records: Sequence[Record],
    parent: Optional[Record],
    visited: set[str],
) -> list[dict]:
    """
    Collect the nodes directly under ``parent`` (the roots when None).

    ``visited`` holds the ids of folders already placed anywhere in the
    tree, so a folder is never attached twice.
    """
    level: list[dict] = []
    orphans: list[dict] = []

    for record in records:
        if record.category == CATEGORY_FOLDER:
            if record.id in visited:
                continue
            is_root = parent is None and not record.pid
            is_child = parent is not None and record.pid == parent.id
            if is_root or is_child:
                visited.add(record.id)
                node = record_to_node(record)
                node["children"] = _build_level(records, record, visited)
                level.append(node)
        elif parent is not None and record.pid == parent.id:
            level.append(record_to_node(record))
        elif parent is None and not record.pid:
            orphans.append(record_to_node(record))

    level.extend(orphans)
    return level
