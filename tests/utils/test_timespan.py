import pytest

from linkedart.utils.timespan import (
    DateParts,
    format_timespan,
    last_day_of_month,
    parse_date_string,
)


def test_parse_date_string_extracts_components() -> None:
    assert parse_date_string("1800-01-31T00:00:00Z") == DateParts(1800, 1, 31)
    assert parse_date_string("-0500-12-31T23:59:59Z") == DateParts(-500, 12, 31)


@pytest.mark.parametrize("value", [None, "", "1800", "1800-01-01", "circa 1800"])
def test_parse_date_string_rejects_non_instants(value) -> None:
    assert parse_date_string(value) is None


@pytest.mark.parametrize(
    "begin, end, expected",
    [
        ("1800-01-01T00:00:00Z", "1800-12-31T00:00:00Z", "1800"),
        ("1800-01-01T00:00:00Z", "1805-12-31T00:00:00Z", "1800 to 1805"),
        ("-0500-01-01T00:00:00Z", "-0500-12-31T00:00:00Z", "500 BC"),
        ("-0500-01-01T00:00:00Z", "0100-12-31T00:00:00Z", "500 BC to 100"),
        ("1990-03-01T00:00:00Z", "1990-03-31T00:00:00Z", "March 1990"),
        ("1990-03-01T00:00:00Z", "1990-06-30T00:00:00Z", "March to June 1990"),
        ("1990-11-01T00:00:00Z", "1991-02-28T00:00:00Z", "November 1990 to February 1991"),
        ("1990-03-05T00:00:00Z", "1990-03-12T00:00:00Z", "5 to 12 March 1990"),
        ("1990-03-05T00:00:00Z", "1990-04-12T00:00:00Z", "5 March 1990 to 12 April 1990"),
    ],
)
def test_format_timespan_scenarios(begin, end, expected) -> None:
    assert format_timespan(begin, end) == expected


def test_whole_month_respects_leap_years() -> None:
    assert format_timespan("2000-02-01T00:00:00Z", "2000-02-29T00:00:00Z") == "February 2000"
    # 1900 is not a leap year, so the 28th closes the month
    assert format_timespan("1900-02-01T00:00:00Z", "1900-02-28T00:00:00Z") == "February 1900"
    assert format_timespan("2000-02-01T00:00:00Z", "2000-02-28T00:00:00Z") == "1 to 28 February 2000"


def test_last_day_of_month_handles_bc_years() -> None:
    assert last_day_of_month(-500, 2) == 28
    assert last_day_of_month(-400, 2) == 29


def test_format_timespan_returns_none_when_nothing_parses() -> None:
    assert format_timespan(None, None) is None
    assert format_timespan("unknown", "") is None


def test_single_sided_timespan_stands_in_for_both_sides() -> None:
    assert format_timespan("1850-06-15T00:00:00Z", None) == "15 June 1850"
    assert format_timespan(None, "1850-12-31T00:00:00Z") == "31 December 1850"


def test_explicit_identical_days_keep_the_range_form() -> None:
    assert format_timespan("1990-03-05T00:00:00Z", "1990-03-05T00:00:00Z") == "5 to 5 March 1990"
    assert format_timespan("1990-03-05T00:00:00Z", None) == "5 March 1990"
