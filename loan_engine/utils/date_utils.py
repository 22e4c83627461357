from datetime import date, datetime
from typing import Optional, Union

from dateutil.relativedelta import relativedelta


def add_months(d: date, months: int) -> date:
    """Add N calendar months, clamping to the end of shorter months"""
    return d + relativedelta(months=months)


def parse_date(d: Union[date, datetime, str, None]) -> Optional[date]:
    """Parse a date given as a date object or an ISO string"""
    if d is None:
        return None
    if isinstance(d, datetime):
        return d.date()
    if isinstance(d, date):
        return d
    if isinstance(d, str):
        d = d.strip()
        if not d:
            return None
        return date.fromisoformat(d[:10])
    return None
