"""Temporal rules applied to check-ins before anything is written.

Every check returns None when the value passes, or a RuleViolation carrying
the exact client-facing message. "now" always comes from the injected clock.

- check_in_time must fall on the same UTC calendar day as the attendance date
- business hours are a half-open UTC window: start <= hour < end
- new records: the date may be at most RETROACTIVE_LIMIT_DAYS old
- corrections: the record's date may be at most EDIT_LIMIT_DAYS old
- day ages are ceil(elapsed / 24h) from the date's UTC midnight
"""
import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from app.core.clock import Clock, as_utc, utcnow
from app.core.errors import RuleViolation

SECONDS_PER_DAY = 24 * 60 * 60


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


class AttendanceRules:

    def __init__(
        self,
        business_hours_start: int = 6,
        business_hours_end: int = 22,
        retroactive_limit_days: int = 7,
        edit_limit_days: int = 30,
        max_date_range_days: int = 90,
        clock: Clock = utcnow,
    ):
        self.business_hours_start = business_hours_start
        self.business_hours_end = business_hours_end
        self.retroactive_limit_days = retroactive_limit_days
        self.edit_limit_days = edit_limit_days
        self.max_date_range_days = max_date_range_days
        self.clock = clock

    @classmethod
    def from_settings(cls, settings, clock: Clock = utcnow) -> "AttendanceRules":
        return cls(
            business_hours_start=settings.BUSINESS_HOURS_START,
            business_hours_end=settings.BUSINESS_HOURS_END,
            retroactive_limit_days=settings.RETROACTIVE_LIMIT_DAYS,
            edit_limit_days=settings.EDIT_LIMIT_DAYS,
            max_date_range_days=settings.MAX_DATE_RANGE_DAYS,
            clock=clock,
        )

    def now(self) -> datetime:
        return as_utc(self.clock())

    def days_since(self, day: date) -> int:
        elapsed = (self.now() - start_of_day(day)).total_seconds()
        return math.ceil(elapsed / SECONDS_PER_DAY)

    # ── Single checks ────────────────────────────────────────────────

    def check_date_not_future(self, day: date) -> Optional[RuleViolation]:
        if start_of_day(day) > self.now():
            return RuleViolation("Date cannot be in the future")
        return None

    def check_time_not_future(self, check_in_time: datetime) -> Optional[RuleViolation]:
        if as_utc(check_in_time) > self.now():
            return RuleViolation("Check-in time cannot be in the future")
        return None

    def check_same_date(self, day: date, check_in_time: datetime) -> Optional[RuleViolation]:
        if as_utc(check_in_time).date() != day:
            return RuleViolation("Check-in time must be on the same date as the attendance date")
        return None

    def check_business_hours(self, check_in_time: datetime) -> Optional[RuleViolation]:
        hour = as_utc(check_in_time).hour
        if hour < self.business_hours_start or hour >= self.business_hours_end:
            return RuleViolation(
                f"Check-in time must be within business hours "
                f"({self.business_hours_start}:00 - {self.business_hours_end}:00 UTC)"
            )
        return None

    def check_retroactive_limit(self, day: date) -> Optional[RuleViolation]:
        if self.days_since(day) > self.retroactive_limit_days:
            return RuleViolation(
                f"Cannot create attendance more than {self.retroactive_limit_days} days in the past"
            )
        return None

    def check_edit_limit(self, day: date) -> Optional[RuleViolation]:
        if self.days_since(day) > self.edit_limit_days:
            return RuleViolation(f"Cannot update attendance older than {self.edit_limit_days} days")
        return None

    def check_representable(self, check_in_time: datetime) -> Optional[RuleViolation]:
        """Reject offsets that push the timestamp outside the datetime range once shifted to UTC."""
        try:
            as_utc(check_in_time)
        except OverflowError:
            if check_in_time.utcoffset() < timedelta(0):
                return RuleViolation("Check-in time cannot be in the future")
            return RuleViolation("Check-in time must be on the same date as the attendance date")
        return None

    # ── Rule sets ────────────────────────────────────────────────────

    def check_new_check_in(self, day: date, check_in_time: datetime) -> Optional[RuleViolation]:
        """Create/upsert path, checked in order; the first failure wins."""
        return (
            self.check_date_not_future(day)
            or self.check_representable(check_in_time)
            or self.check_time_not_future(check_in_time)
            or self.check_same_date(day, check_in_time)
            or self.check_business_hours(check_in_time)
            or self.check_retroactive_limit(day)
        )

    def check_correction(self, day: date, check_in_time: datetime) -> Optional[RuleViolation]:
        """Correction of an existing record whose stored date is `day`."""
        return (
            self.check_representable(check_in_time)
            or self.check_time_not_future(check_in_time)
            or self.check_same_date(day, check_in_time)
            or self.check_business_hours(check_in_time)
            or self.check_edit_limit(day)
        )

    def check_list_filters(
        self,
        day: Optional[date],
        start_date: Optional[date],
        end_date: Optional[date],
    ) -> Optional[RuleViolation]:
        if day and (start_date or end_date):
            return RuleViolation("Cannot use date filter together with start_date/end_date range filter")
        if start_date and not end_date:
            return RuleViolation("end_date is required when start_date is provided")
        if end_date and not start_date:
            return RuleViolation("start_date is required when end_date is provided")
        if start_date and end_date:
            if abs((end_date - start_date).days) > self.max_date_range_days:
                return RuleViolation(f"Date range cannot exceed {self.max_date_range_days} days")
            if start_date > end_date:
                return RuleViolation("start_date must be before or equal to end_date")
        return None
