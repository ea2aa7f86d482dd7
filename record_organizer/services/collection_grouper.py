"""
Partition records from several collections into per-collection trees.
"""

from collections import defaultdict
from typing import Iterable

from ..models.record import Record
from .record_tree import build_record_tree


def group_by_collection(records: Iterable[Record]) -> dict[str, list[dict]]:
    """
    Bucket records by collection id and build a tree for each bucket.

    Input order is kept inside each bucket, so callers that pass records
    ordered by sort get sorted trees. Collections without records do not
    appear in the result.
    """
    buckets: dict[str, list[Record]] = defaultdict(list)
    for record in records:
        buckets[record.collection_id].append(record)

    return {
        collection_id: build_record_tree(bucket)
        for collection_id, bucket in buckets.items()
    }
