# reader_sync/utils/dates.py
from datetime import date, datetime
from typing import Union

DAY_FORMAT = '%Y-%m-%d'


def start_of_day(value: Union[date, datetime]) -> date:
    """Calendar date of a date or datetime, dropping any time component"""
    if isinstance(value, datetime):
        return value.date()
    return value


def today() -> date:
    """Today in local time, the key of the daily collection"""
    return date.today()


def format_day(value: date) -> str:
    return value.strftime(DAY_FORMAT)


def parse_day(value: str) -> date:
    """Parse a YYYY-MM-DD string"""
    return datetime.strptime(value, DAY_FORMAT).date()
