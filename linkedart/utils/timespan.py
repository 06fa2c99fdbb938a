import calendar
import re
from typing import NamedTuple, Optional

DATE_PATTERN = re.compile(r"^(-?\d+)-(\d{2})-(\d{2})T")

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


class DateParts(NamedTuple):
    year: int
    month: int
    day: int


def parse_date_string(value: Optional[str]) -> Optional[DateParts]:
    if not value or not isinstance(value, str):
        return None

    match = DATE_PATTERN.match(value)
    if not match:
        return None

    year, month, day = match.groups()
    return DateParts(int(year), int(month), int(day))


def last_day_of_month(year: int, month: int) -> int:
    # calendar.monthrange() refuses years outside 1..9999; isleap() does not.
    if month == 2 and calendar.isleap(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def format_year(year: int) -> str:
    return str(year) if year > 0 else f"{abs(year)} BC"


def _month(date: DateParts) -> str:
    return MONTH_NAMES[date.month - 1]


def _full_date(date: DateParts) -> str:
    return f"{date.day} {_month(date)} {format_year(date.year)}"


def format_timespan(begin_date: Optional[str], end_date: Optional[str]) -> Optional[str]:
    """
    Human readable range for an ISO begin/end pair.

    Checked in order: whole years, whole months, then specific days.
    When only one side parses it stands in for both.
    """
    begin = parse_date_string(begin_date)
    end = parse_date_string(end_date)

    if begin is None and end is None:
        return None

    # a single known instant is rendered as that one date
    single = begin is None or end is None
    begin = begin or end
    end = end or begin

    if not (1 <= begin.month <= 12 and 1 <= end.month <= 12):
        return None

    same_year = begin.year == end.year
    same_month = same_year and begin.month == end.month

    # whole year(s)
    if begin.month == 1 and begin.day == 1 and end.month == 12 and end.day == 31:
        if same_year:
            return format_year(begin.year)
        return f"{format_year(begin.year)} to {format_year(end.year)}"

    # whole month(s)
    if begin.day == 1 and end.day == last_day_of_month(end.year, end.month):
        if same_month:
            return f"{_month(begin)} {format_year(begin.year)}"
        if same_year:
            return f"{_month(begin)} to {_month(end)} {format_year(begin.year)}"
        return (
            f"{_month(begin)} {format_year(begin.year)} "
            f"to {_month(end)} {format_year(end.year)}"
        )

    # specific days
    if single:
        return _full_date(end)

    if same_month:
        return f"{begin.day} to {_full_date(end)}"

    return f"{_full_date(begin)} to {_full_date(end)}"
