"""Wall-clock reading for the scheduler."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from .schedule import _to_int

log = logging.getLogger(__name__)

MIN_VALID_YEAR = 2000


def format_datetime(dt: datetime) -> str:
    """Format as ``MM/DD/YYYY hh:mm:ss``."""
    text = (
        f"{dt.month:02d}/{dt.day:02d}/{dt.year:04d} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"
    )
    return text[:19]


class TimeReader:
    """Keeps the current hour and minute read from a clock."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock
        self.current_hour = 0
        self.current_minute = 0
        self.current_day = ""
        self.now: Optional[datetime] = None

    def initialize(self) -> None:
        """Check the clock and take a first reading."""
        if self._clock().year < MIN_VALID_YEAR:
            log.warning("RTC lost confidence in the DateTime!")
        self.update_time()

    def update_time(self) -> datetime:
        """Read the clock and store its hour and minute."""
        self.now = self._clock()
        self.current_hour = self.now.hour
        self.current_minute = self.now.minute
        return self.now

    def parse_date(self, date_index: int, incoming_data: str) -> None:
        """Take ``<day> HHMM`` starting at ``date_index`` of a message."""
        space = incoming_data.find(" ", date_index)
        if space == -1:
            self.current_day = incoming_data[date_index:]
            time_text = incoming_data[0:4]
        else:
            self.current_day = incoming_data[date_index:space]
            time_text = incoming_data[space + 1 : space + 5]
        self.current_hour = _to_int(time_text[0:2])
        self.current_minute = _to_int(time_text[2:4])

    def show_time(self) -> str:
        """Read the clock and return a printable line with the date and time."""
        self.now = self._clock()
        line = "DS1302 RTC DateTime: " + format_datetime(self.now)
        log.info(line)
        return line