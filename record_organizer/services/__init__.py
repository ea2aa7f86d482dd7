# Services package

from .header_factory import header_from_dto, clone_header, format_active_headers
from .record_tree import build_record_tree
from .sort_allocator import SortAllocator, sort_allocator, get_sort_allocator
from .record_assembler import record_from_dto, clone_record
from .collection_grouper import group_by_collection

__all__ = [
    "header_from_dto",
    "clone_header",
    "format_active_headers",
    "build_record_tree",
    "SortAllocator",
    "sort_allocator",
    "get_sort_allocator",
    "record_from_dto",
    "clone_record",
    "group_by_collection",
]
