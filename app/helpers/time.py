# app/helpers/time.py
from datetime import date, datetime, time, timezone
from typing import Tuple
from zoneinfo import ZoneInfo

from config.appconfig import settings


def utcnow() -> datetime:
    """Timezone-aware current UTC time, used for created_at/updated_at."""
    return datetime.now(timezone.utc)


def clinic_today() -> date:
    """Current calendar date at the clinic. Queue dates are clinic-local."""
    return datetime.now(ZoneInfo(settings.CLINIC_TIMEZONE)).date()


def clinic_day_start(day: date) -> datetime:
    """UTC instant at which the clinic-local calendar day begins."""
    return datetime.combine(day, time.min, ZoneInfo(settings.CLINIC_TIMEZONE)).astimezone(timezone.utc)


def clinic_date(moment: datetime) -> date:
    """Clinic-local calendar date of a stored timestamp. Naive values are UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(ZoneInfo(settings.CLINIC_TIMEZONE)).date()


def month_bounds(month: int, year: int) -> Tuple[date, date]:
    """First day of the month and first day of the following month."""
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end
