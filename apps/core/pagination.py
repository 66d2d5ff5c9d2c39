"""Pagination argument checks shared by repositories and managers."""

from .exceptions import InvalidInputError


def validate_window(*, offset: int, limit: int) -> None:
    """
    Check an offset/limit window.

    Raises:
        InvalidInputError: If offset is negative or limit is not positive
    """
    if offset is None or offset < 0:
        raise InvalidInputError("offset must be >= 0", field='offset')
    if limit is None or limit < 1:
        raise InvalidInputError("limit must be >= 1", field='limit')


def page_to_offset(*, page: int, limit: int) -> int:
    """
    Convert a 1-based page number to an offset.

    Raises:
        InvalidInputError: If page or limit is below 1
    """
    if page is None or page < 1:
        raise InvalidInputError("page must be >= 1", field='page')
    if limit is None or limit < 1:
        raise InvalidInputError("limit must be >= 1", field='limit')
    return (page - 1) * limit
