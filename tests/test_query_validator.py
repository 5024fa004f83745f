from datetime import datetime, timezone

import pytest
import pytz

from app.application.services.query_validator import validate_query
from app.core.exceptions import ErrorKind, InvalidInputException
from app.domain.repositories.reservation_repository import RESERVATION_SORT_COLUMNS
from app.domain.repositories.resource_repository import RESOURCE_SORT_COLUMNS
from app.domain.repositories.user_repository import USER_SORT_COLUMNS

UTC = pytz.utc


def test_defaults():
    query = validate_query({}, USER_SORT_COLUMNS, UTC)

    assert query.page_size is None
    assert query.page == 1
    assert query.skip == 0
    assert query.sort_col == "userName"
    assert query.sort_dir == "asc"


def test_pagination_computes_skip():
    query = validate_query({"size": "10", "page": "3"}, RESOURCE_SORT_COLUMNS, UTC)

    assert query.page_size == 10
    assert query.page == 3
    assert query.skip == 20


def test_page_without_size_skips_nothing():
    query = validate_query({"page": "4"}, RESOURCE_SORT_COLUMNS, UTC)

    assert query.page == 4
    assert query.skip == 0


@pytest.mark.parametrize("value", ["0", "-1", "abc", "1.5", ""])
def test_rejects_bad_page_size(value):
    with pytest.raises(InvalidInputException) as exc:
        validate_query({"size": value}, RESOURCE_SORT_COLUMNS, UTC)

    assert exc.value.kind is ErrorKind.VALIDATION
    assert exc.value.message == "Page size must be a positive non-zero integer"


def test_rejects_bad_page_number():
    with pytest.raises(InvalidInputException, match="Page number"):
        validate_query({"page": "0"}, RESOURCE_SORT_COLUMNS, UTC)


def test_repeated_text_filter_is_rejected():
    with pytest.raises(InvalidInputException, match="User ID query is invalid"):
        validate_query({"userID": ["a", "b"]}, USER_SORT_COLUMNS, UTC)


def test_text_filters_are_copied():
    query = validate_query(
        {"userID": "u1", "user": "ali", "resourceID": "r1", "resource": "sau", "description": "floor"},
        RESOURCE_SORT_COLUMNS,
        UTC,
    )

    assert query.user_id == "u1"
    assert query.user_name == "ali"
    assert query.resource_id == "r1"
    assert query.resource_name == "sau"
    assert query.description == "floor"


def test_date_filters_are_parsed_to_utc():
    query = validate_query({"startsAfter": "2025-02-20T14:00:00+02:00"}, RESERVATION_SORT_COLUMNS, UTC)

    assert query.starts_after == datetime(2025, 2, 20, 12, 0, tzinfo=timezone.utc)


def test_date_filters_accept_z_suffix():
    query = validate_query({"endsAfter": "2025-02-20T14:00:00Z"}, RESERVATION_SORT_COLUMNS, UTC)

    assert query.ends_after == datetime(2025, 2, 20, 14, 0, tzinfo=timezone.utc)


def test_date_filters_without_offset_use_the_given_timezone():
    helsinki = pytz.timezone("Europe/Helsinki")

    query = validate_query({"startsBefore": "2025-02-20T14:00:00"}, RESERVATION_SORT_COLUMNS, helsinki)

    assert query.starts_before == datetime(2025, 2, 20, 12, 0, tzinfo=timezone.utc)


def test_invalid_date_filter():
    with pytest.raises(InvalidInputException, match="Query times are invalid"):
        validate_query({"endsBefore": "not a date"}, RESERVATION_SORT_COLUMNS, UTC)


def test_sort_column_must_be_allowed():
    assert validate_query({"col": "endTime"}, RESERVATION_SORT_COLUMNS, UTC).sort_col == "endTime"

    with pytest.raises(InvalidInputException, match="Query column is invalid"):
        validate_query({"col": "resourceCount"}, RESOURCE_SORT_COLUMNS, UTC)


def test_sort_direction():
    assert validate_query({"dir": "desc"}, USER_SORT_COLUMNS, UTC).sort_dir == "desc"

    with pytest.raises(InvalidInputException, match="Query direction is invalid"):
        validate_query({"dir": "up"}, USER_SORT_COLUMNS, UTC)
