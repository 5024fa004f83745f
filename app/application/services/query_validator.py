"""Query contract validator — turns raw listing query parameters into a ListQuery.

Raw parameters map a key to a string, or to a list of strings when the key
was repeated in the query string.
"""

import re
from typing import Any, Mapping, Optional, Sequence

from app.core.exceptions import InvalidInputException
from app.core.timeutils import parse_iso_timestamp
from app.domain.schemas.query import ListQuery

POSITIVE_INT = re.compile(r"^\d+$")
SORT_DIRECTIONS = ("asc", "desc")

TEXT_FILTERS = {
    # query key: (descriptor field, error message)
    "userID": ("user_id", "User ID query is invalid"),
    "user": ("user_name", "User name query is invalid"),
    "resourceID": ("resource_id", "Resource ID query is invalid"),
    "resource": ("resource_name", "Resource name query is invalid"),
    "description": ("description", "Description query is invalid"),
}

DATE_FILTERS = {
    "startsBefore": "starts_before",
    "startsAfter": "starts_after",
    "endsBefore": "ends_before",
    "endsAfter": "ends_after",
}


def _present(value: Any) -> bool:
    return value is not None and value != ""


def _positive_int(value: Any, message: str) -> int:
    if not isinstance(value, str) or not POSITIVE_INT.match(value) or int(value) <= 0:
        raise InvalidInputException(message)
    return int(value)


def _single_string(value: Any, message: str) -> Optional[str]:
    if not _present(value):
        return None
    if not isinstance(value, str):
        raise InvalidInputException(message)
    return value


def validate_query(params: Mapping[str, Any], allowed_columns: Sequence[str], tz) -> ListQuery:
    """Validate pagination, filter and sort parameters.

    ``allowed_columns`` lists the sortable columns; the first one is the
    default; date bounds without an offset are read in ``tz``. Raises
    InvalidInputException on the first invalid parameter.
    """
    page_size = None
    if "size" in params:
        page_size = _positive_int(params["size"], "Page size must be a positive non-zero integer")

    page = 1
    if "page" in params:
        page = _positive_int(params["page"], "Page number must be a positive non-zero integer")

    skip = page_size * (page - 1) if page_size else 0

    fields = {}
    for key, (field, message) in TEXT_FILTERS.items():
        fields[field] = _single_string(params.get(key), message)

    for key, field in DATE_FILTERS.items():
        value = params.get(key)
        if _present(value):
            parsed = parse_iso_timestamp(value, tz)
            if parsed is None:
                raise InvalidInputException("Query times are invalid")
            fields[field] = parsed

    sort_col = allowed_columns[0]
    col = params.get("col")
    if _present(col):
        if not isinstance(col, str) or col not in allowed_columns:
            raise InvalidInputException("Query column is invalid")
        sort_col = col

    sort_dir = "asc"
    direction = params.get("dir")
    if _present(direction):
        if not isinstance(direction, str) or direction not in SORT_DIRECTIONS:
            raise InvalidInputException("Query direction is invalid")
        sort_dir = direction

    return ListQuery(
        page_size=page_size,
        page=page,
        skip=skip,
        sort_col=sort_col,
        sort_dir=sort_dir,
        **fields,
    )
