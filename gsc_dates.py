"""
Date helpers for Search Console queries.

Dates are exchanged with the API as YYYY-MM-DD strings. Relative arguments
such as ``-1`` (yesterday) or ``-7`` (a week ago) are resolved against the
current UTC date; ``now`` can be passed in so results are deterministic.
"""
from datetime import datetime, timedelta, timezone
from dateutil.relativedelta import relativedelta

from gsc_errors import InvalidDateError

# --- Configuration ---
DATE_FORMAT = '%Y-%m-%d'


def today(now=None):
    """Returns the UTC calendar date of ``now`` (defaults to the current time)."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.date()


def days_ago(days, now=None):
    return (today(now) - timedelta(days=days)).strftime(DATE_FORMAT)


def years_ago(years, now=None):
    return (today(now) - relativedelta(years=years)).strftime(DATE_FORMAT)


def parse_date(value):
    """Parses a zero-padded YYYY-MM-DD string; anything else raises ValueError."""
    day = datetime.strptime(value, DATE_FORMAT)
    if day.strftime(DATE_FORMAT) != value:
        raise ValueError(f"date is not zero-padded YYYY-MM-DD: {value}")
    return day


def resolve_date(token, now=None):
    """
    Resolves a date argument into a YYYY-MM-DD string.

    A token starting with '-' is a shortcut for "N days ago"; anything else
    must already be a YYYY-MM-DD date and is returned unchanged.
    """
    if token.startswith('-'):
        try:
            offset = int(token)
        except ValueError:
            raise InvalidDateError(f"invalid date shortcut: {token}")
        return (today(now) + timedelta(days=offset)).strftime(DATE_FORMAT)

    try:
        parse_date(token)
    except ValueError:
        raise InvalidDateError(f"invalid date: {token}")
    return token


def check_range(start_date, end_date):
    """Returns the range unchanged, or raises if it ends before it starts."""
    if datetime.strptime(start_date, DATE_FORMAT) > datetime.strptime(end_date, DATE_FORMAT):
        raise InvalidDateError(f"start date {start_date} is after end date {end_date}")
    return start_date, end_date
