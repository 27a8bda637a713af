"""
business_hours.py
Opening-hours reasoning: open now, next opening, closing soon and holidays
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable, List, Optional, Set

from models import Restaurant, TimeSlot
from config import config
from rating_engine import round_half_up

logger = logging.getLogger(__name__)

NEXT_OPEN_SEARCH_DAYS = 14
DAYS_OF_WEEK = range(7)


def _to_date(value) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


class BusinessHoursEngine:
    """Evaluates restaurant schedules against a holiday calendar"""

    def __init__(self, holidays: Optional[Iterable] = None,
                 clock: Callable[[], datetime] = datetime.now):
        if holidays is None:
            self._holidays: Set[date] = config.get_holidays()
        else:
            self._holidays = {_to_date(h) for h in holidays if h is not None}
        self.clock = clock
        logger.debug(f"Business hours engine initialized with {len(self._holidays)} holidays")

    # Holiday calendar

    def is_holiday(self, day) -> bool:
        day = _to_date(day)
        return day is not None and day in self._holidays

    def add_holiday(self, day) -> None:
        day = _to_date(day)
        if day is not None:
            self._holidays.add(day)

    def remove_holiday(self, day) -> None:
        day = _to_date(day)
        if day is not None:
            self._holidays.discard(day)

    @property
    def holidays(self) -> Set[date]:
        return set(self._holidays)

    # Open / closed

    def is_open_at(self, restaurant: Optional[Restaurant], moment: Optional[datetime]) -> bool:
        """Active, scheduled for that weekday, inside the slot and not a closed holiday"""
        if restaurant is None or moment is None or not restaurant.active:
            return False

        hours = restaurant.business_hours
        if hours is None:
            return False

        if hours.closed_on_holidays and self.is_holiday(moment.date()):
            return False

        slot = hours.get_hours(moment.weekday())
        if slot is None:
            return False
        return slot.contains(moment.time())

    def is_open_now(self, restaurant: Optional[Restaurant]) -> bool:
        return self.is_open_at(restaurant, self.clock())

    def find_open_restaurants(self, restaurants: List[Restaurant],
                              moment: Optional[datetime] = None) -> List[Restaurant]:
        if moment is None:
            moment = self.clock()
        return [r for r in restaurants or [] if r is not None and self.is_open_at(r, moment)]

    def find_open_now(self, restaurants: List[Restaurant]) -> List[Restaurant]:
        return self.find_open_restaurants(restaurants, self.clock())

    def next_open_time(self, restaurant: Optional[Restaurant],
                       from_time: Optional[datetime] = None) -> Optional[datetime]:
        """
        Earliest moment at or after from_time when the restaurant is open.

        Returns from_time itself when already open. Otherwise scans today
        and the following NEXT_OPEN_SEARCH_DAYS days, skipping holiday
        closures and days without a slot. Today only counts if its opening
        time is still ahead.
        """
        if from_time is None:
            from_time = self.clock()
        if restaurant is None or not restaurant.active:
            return None

        hours = restaurant.business_hours
        if hours is None:
            return None

        if self.is_open_at(restaurant, from_time):
            return from_time

        for offset in range(NEXT_OPEN_SEARCH_DAYS + 1):
            day = from_time.date() + timedelta(days=offset)
            if hours.closed_on_holidays and self.is_holiday(day):
                continue

            slot = hours.get_hours(day.weekday())
            if slot is None:
                continue

            opening = datetime.combine(day, slot.open_time)
            if offset > 0 or opening > from_time:
                return opening

        return None

    # Closing

    def closing_time_today(self, restaurant: Optional[Restaurant]) -> Optional[time]:
        if restaurant is None or restaurant.business_hours is None:
            return None
        slot = restaurant.business_hours.get_hours(self.clock().weekday())
        return slot.close_time if slot is not None else None

    def is_closing_soon(self, restaurant: Optional[Restaurant], within_minutes: int) -> bool:
        """
        Whether today's closing time falls within the next within_minutes.

        A closing time earlier than now (an overnight slot closing after
        midnight) reports False. When now + within_minutes crosses midnight
        the answer is True for any closing time still ahead today.
        """
        if restaurant is None or within_minutes <= 0:
            return False

        now = self.clock()
        if not self.is_open_at(restaurant, now):
            return False

        closing = self.closing_time_today(restaurant)
        if closing is None:
            return False

        current = now.time()
        threshold = (datetime.combine(now.date(), current) + timedelta(minutes=within_minutes)).time()

        if closing < current:
            return False
        if threshold < current:
            return True
        return closing <= threshold

    def find_closing_soon(self, restaurants: List[Restaurant], within_minutes: int) -> List[Restaurant]:
        return [r for r in restaurants or [] if r is not None and self.is_closing_soon(r, within_minutes)]

    # Schedule summaries

    def operating_days_count(self, restaurant: Optional[Restaurant]) -> int:
        if restaurant is None or restaurant.business_hours is None:
            return 0
        return sum(1 for day in DAYS_OF_WEEK if restaurant.business_hours.get_hours(day) is not None)

    def business_hours_summary(self, restaurant: Optional[Restaurant]) -> str:
        if restaurant is None:
            return "無資料"
        if restaurant.business_hours is None:
            return "無營業時間資料"

        days = self.operating_days_count(restaurant)
        if days == 0:
            return "目前休業中"
        if days == 7:
            return "每日營業"
        if days >= 5:
            return "週一至週五營業"
        return "部分時段營業"

    def is_24_hours(self, restaurant: Optional[Restaurant], day: int) -> bool:
        if restaurant is None or restaurant.business_hours is None:
            return False
        slot = restaurant.business_hours.get_hours(day)
        if slot is None:
            return False
        return slot.open_time == time(0, 0) and slot.close_time == time(23, 59)

    def weekly_operating_hours(self, restaurant: Optional[Restaurant]) -> float:
        """
        Sum of daily open hours, rounded to one decimal.

        Overnight slots count whole hours only ((24 - open.hour) + close.hour);
        same-day slots include minutes.
        """
        if restaurant is None or restaurant.business_hours is None:
            return 0.0

        total = 0.0
        for day in DAYS_OF_WEEK:
            slot = restaurant.business_hours.get_hours(day)
            if slot is None:
                continue
            total += self._slot_hours(slot)
        return round_half_up(total, 1)

    @staticmethod
    def _slot_hours(slot: TimeSlot) -> float:
        open_time, close_time = slot.open_time, slot.close_time
        if slot.is_overnight():
            return (24 - open_time.hour) + close_time.hour
        return (close_time.hour - open_time.hour) + (close_time.minute - open_time.minute) / 60.0
