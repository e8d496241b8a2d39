"""
Helpers de data/hora.

Todas as datas são tratadas em UTC com timezone. Valores sem tzinfo
(ex.: vindos de fixtures ou de drivers que descartam o fuso) são
interpretados como UTC.
"""

import math
from datetime import datetime, timedelta, timezone

SECONDS_PER_DAY = 24 * 60 * 60


def utcnow() -> datetime:
    """Instante atual em UTC (aware)."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Garante datetime aware em UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def whole_days_between(start: datetime, end: datetime) -> int:
    """Dias inteiros (truncados) de `start` até `end`; negativo se end < start."""
    return int((as_utc(end) - as_utc(start)) / timedelta(days=1))


def days_until(moment: datetime, now: datetime) -> int:
    """Dias restantes até `moment`, arredondando para cima."""
    seconds = (as_utc(moment) - as_utc(now)).total_seconds()
    return math.ceil(seconds / SECONDS_PER_DAY)
