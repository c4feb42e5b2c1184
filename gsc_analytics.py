"""
Aggregation of Search Console analytics rows.

The API returns each row's dimension values as a positional ``keys`` list that
lines up with the requested dimensions. ``rows_to_frame`` turns that into a
pandas DataFrame with one named column per dimension, so nothing downstream
depends on key positions.

Totals are always computed from summed clicks and impressions. Averaging the
per-row ``ctr`` values gives figures that disagree with the Search Console web
UI, which reports clicks / impressions over the whole set.
"""

import pandas as pd

from gsc_dates import DATE_FORMAT, parse_date
from gsc_errors import DateParseError, EmptyKeysError

METRIC_COLUMNS = ['clicks', 'impressions', 'ctr', 'position']
METRIC_TYPES = {'clicks': 'int64', 'impressions': 'int64', 'ctr': 'float64', 'position': 'float64'}


def rows_to_frame(rows, dimensions):
    """Converts API response rows into a DataFrame keyed by dimension name."""
    dimensions = [d.lower() for d in dimensions]
    records = []
    for row in rows or []:
        keys = row.get('keys') or []
        record = {name: keys[i] if i < len(keys) else None for i, name in enumerate(dimensions)}
        record['clicks'] = int(row.get('clicks', 0))
        record['impressions'] = int(row.get('impressions', 0))
        record['ctr'] = float(row.get('ctr', 0.0))
        record['position'] = float(row.get('position', 0.0))
        records.append(record)

    df = pd.DataFrame(records, columns=dimensions + METRIC_COLUMNS)
    return df.astype(METRIC_TYPES)


def rows_for_day(df, day):
    """Returns the rows whose date dimension equals ``day``."""
    if 'date' not in df.columns:
        raise EmptyKeysError("rows were not queried with the date dimension")
    return df[df['date'] == day]


def aggregate(df, day=None):
    """
    Sums clicks and impressions, optionally only for one day, and derives the
    CTR from the sums. The CTR is NaN when there are no impressions.
    """
    if day:
        df = rows_for_day(df, day)
    clicks = int(df['clicks'].sum())
    impressions = int(df['impressions'].sum())
    ctr = clicks / impressions if impressions else float('nan')
    return {'clicks': clicks, 'impressions': impressions, 'ctr': ctr}


def last_active_day(df):
    """
    Returns the most recent YYYY-MM-DD date with at least one click, or None
    if no row has clicks.
    """
    active = df[df['clicks'] > 0]
    if active.empty:
        return None
    if 'date' not in df.columns:
        raise EmptyKeysError("rows were not queried with the date dimension")

    latest = None
    for value in active['date']:
        if pd.isna(value) or value == '':
            raise EmptyKeysError("row with clicks has no date key")
        try:
            day = parse_date(value)
        except (TypeError, ValueError):
            raise DateParseError(value)
        if latest is None or day > latest:
            latest = day
    return latest.strftime(DATE_FORMAT)
