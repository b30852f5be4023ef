"""Translate component validation errors into HTTP errors."""

from collections.abc import Iterable
from typing import NoReturn, Protocol

from fastapi import HTTPException, status

CONFLICT_CODES = frozenset({"name_duplicate", "email_taken", "asset_in_use", "trending_duplicate"})


class ErrorLike(Protocol):
    code: str
    message: str
    field: str | None


def status_for(code: str) -> int:
    if code.endswith("_not_found") or code == "item_not_in_bag":
        return status.HTTP_404_NOT_FOUND
    if code == "forbidden":
        return status.HTTP_403_FORBIDDEN
    if code in CONFLICT_CODES:
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def raise_for_errors(errors: Iterable[ErrorLike]) -> NoReturn:
    """
    Raise an HTTPException for a failed operation.

    The first error decides the status code; every error is returned in
    the detail list.
    """
    errors = list(errors)
    status_code = status_for(errors[0].code) if errors else status.HTTP_400_BAD_REQUEST
    raise HTTPException(
        status_code=status_code,
        detail=[{"code": err.code, "message": err.message, "field": err.field} for err in errors],
    )
