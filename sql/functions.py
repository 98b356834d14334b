"""
==============================
Database function SQL tokens.
==============================

Helpers returning SQL expression fragments meant to be passed to
add_where(), add_query(), add_insert(..., func=True) and friends. Nothing
here talks to a database.

Functions:
- now_sql: Token for the current server time
- now_with_tz: Current instant formatted in the fixed server time zone
- date_diff_sql: DATEDIFF expression
- date_add_sql: DATE_ADD expression

Usage:
    from sql.functions import date_add_sql, date_diff_sql

    q.add_where(f"{date_diff_sql('due_date')} > 0")
    q.add_query(date_add_sql('created', 7) + ' AS expires')
"""

from datetime import datetime, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = 'Europe/London'
DATETIME_FORMAT = '%Y-%m-%d %H:%M:%S'


def now_sql() -> str:
    """Return the token representing the server's current datetime."""
    return 'NOW()'


def now_with_tz(moment: Optional[datetime] = None) -> str:
    """
    Format an instant in the fixed server time zone.

    The zone is always DEFAULT_TIMEZONE, whatever the caller's local zone.

    Args:
        moment: Instant to format; defaults to now. Naive values are taken as UTC.

    Returns:
        Datetime string formatted as 'YYYY-MM-DD HH:MM:SS'
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    return moment.astimezone(ZoneInfo(DEFAULT_TIMEZONE)).strftime(DATETIME_FORMAT)


def date_diff_sql(date1: str = '', date2: str = '') -> str:
    """
    Build a DATEDIFF expression.

    Args:
        date1: Starting date expression; blank means NOW()
        date2: Ending date expression; blank means NOW()

    Returns:
        SQL expression such as 'DATEDIFF(due_date, NOW())'
    """
    date1 = date1 or now_sql()
    date2 = date2 or now_sql()

    return f"DATEDIFF({date1}, {date2})"


def date_add_sql(date: str, interval: Union[int, str] = 0, unit: str = 'DAY') -> str:
    """
    Build a DATE_ADD expression adding ``interval`` units to ``date``.

    Args:
        date: Date expression; blank means NOW()
        interval: Number of units to add
        unit: Interval unit keyword (DAY, MONTH, HOUR, ...)

    Returns:
        SQL expression such as 'DATE_ADD(NOW(), INTERVAL 7 DAY)'
    """
    date = date or now_sql()

    return f"DATE_ADD({date}, INTERVAL {interval} {unit})"
