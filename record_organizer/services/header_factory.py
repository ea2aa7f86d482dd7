"""
Header construction helpers.

Builds header entities from incoming DTOs, copies them for record clones,
and folds the active ones into the plain mapping sent with a request.
"""

from typing import Iterable

from ..models.header import Header
from ..models.record import generate_uid
from ..schemas.record import HeaderDto


def header_from_dto(dto: HeaderDto, position: int = 0) -> Header:
    """
    Build a Header from an incoming DTO.

    Fields are copied as-is; blank keys and values are kept. A missing id
    gets a fresh UID and a missing sort falls back to ``position``.
    """
    return Header(
        id=dto.id or generate_uid(),
        key=dto.key,
        value=dto.value,
        is_active=dto.is_active,
        sort=dto.sort if dto.sort is not None else position,
    )


def clone_header(header: Header) -> Header:
    """Return an unattached copy of ``header`` with a new id."""
    return Header(
        id=generate_uid(),
        key=header.key,
        value=header.value,
        is_active=header.is_active,
        sort=header.sort,
    )


def format_active_headers(headers: Iterable[Header]) -> dict[str, str]:
    """
    Fold active headers into a key -> value mapping.

    Inactive headers are dropped. When a key repeats, the last active
    header wins.
    """
    formatted: dict[str, str] = {}
    for header in headers:
        if header.is_active:
            formatted[header.key] = header.value
    return formatted
