"""
Models package for the Record Organizer.

Exports all SQLAlchemy models for database operations.
"""

from .record import Record, CATEGORY_FOLDER, CATEGORY_REQUEST, generate_uid
from .header import Header

__all__ = [
    "Record",
    "Header",
    "CATEGORY_FOLDER",
    "CATEGORY_REQUEST",
    "generate_uid",
]
