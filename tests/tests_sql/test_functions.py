"""
Test suite for sql.functions database function tokens.
"""

from datetime import datetime, timedelta, timezone

import pytest

from sql.functions import (
    DEFAULT_TIMEZONE,
    date_add_sql,
    date_diff_sql,
    now_sql,
    now_with_tz,
)


@pytest.mark.unit
def test_now_sql():
    assert now_sql() == 'NOW()'


@pytest.mark.unit
def test_date_diff_defaults_to_now():
    assert date_diff_sql() == 'DATEDIFF(NOW(), NOW())'
    assert date_diff_sql('d1', '') == 'DATEDIFF(d1, NOW())'
    assert date_diff_sql('', 'd2') == 'DATEDIFF(NOW(), d2)'
    assert date_diff_sql('task_end_date', 'task_start_date') == (
        'DATEDIFF(task_end_date, task_start_date)'
    )


@pytest.mark.unit
def test_date_add():
    assert date_add_sql('') == 'DATE_ADD(NOW(), INTERVAL 0 DAY)'
    assert date_add_sql('task_start_date', 5) == 'DATE_ADD(task_start_date, INTERVAL 5 DAY)'
    assert date_add_sql('NOW()', 2, 'HOUR') == 'DATE_ADD(NOW(), INTERVAL 2 HOUR)'


@pytest.mark.unit
def test_now_with_tz_uses_fixed_zone_in_summer():
    """British Summer Time is UTC+1."""
    moment = datetime(2024, 7, 1, 12, 0, 0, tzinfo=timezone.utc)

    assert now_with_tz(moment) == '2024-07-01 13:00:00'


@pytest.mark.unit
def test_now_with_tz_uses_fixed_zone_in_winter():
    moment = datetime(2024, 1, 15, 23, 30, 5, tzinfo=timezone.utc)

    assert now_with_tz(moment) == '2024-01-15 23:30:05'


@pytest.mark.edge_case
def test_now_with_tz_ignores_caller_zone():
    """An instant given in another zone is converted, not reinterpreted."""
    new_york = timezone(timedelta(hours=-5))
    moment = datetime(2024, 1, 15, 18, 0, 0, tzinfo=new_york)

    assert now_with_tz(moment) == '2024-01-15 23:00:00'


@pytest.mark.edge_case
def test_now_with_tz_naive_is_utc():
    assert now_with_tz(datetime(2024, 7, 1, 0, 0, 0)) == '2024-07-01 01:00:00'


@pytest.mark.smoke
def test_now_with_tz_current_time_format():
    value = now_with_tz()

    assert datetime.strptime(value, '%Y-%m-%d %H:%M:%S')
    assert DEFAULT_TIMEZONE == 'Europe/London'
