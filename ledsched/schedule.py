"""Daily PWM schedules for LED colour channels, ramped linearly between points."""

from __future__ import annotations

import logging
import math
import re
import struct
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

log = logging.getLogger(__name__)

COLORS = ("b", "r", "wCold", "wWarm")
COLOR_PINS = {"b": 6, "r": 9, "wCold": 5, "wWarm": 3}
PWM_MAX = 255
PERCENT_TO_PWM = 2.55
TAIL_MINUTES = 60

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def _to_int(text: str) -> int:
    """Parse a leading integer the lenient way: 0 when there is none."""
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _f32(value: float) -> float:
    """Round a value to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


def _round_half_away(value: float) -> int:
    return math.floor(value + 0.5) if value >= 0 else math.ceil(value - 0.5)


def _clamp(value: int, low: int = 0, high: int = PWM_MAX) -> int:
    return max(low, min(high, value))


@dataclass
class ScheduleNode:
    """One schedule point: at hour:minute the channel reaches ``pwm``."""

    hour: int
    minute: int
    pwm: int
    pin_number: int
    delta_pwm_per_minute: float = 0.0
    updated_pwm: int = 0
    correction_factor: float = 0.0

    @property
    def minutes(self) -> int:
        """Minutes since midnight."""
        return self.hour * 60 + self.minute


def parse_schedule(incoming_data: str, color: str) -> List[ScheduleNode]:
    """Parse ``color=HH:MM,percent;...&`` from a request into schedule nodes.

    Returns an empty list for an unknown colour or when the field is absent
    or not terminated by ``&``. Parsing stops at the first malformed entry.
    """
    pin = COLOR_PINS.get(color)
    if pin is None:
        return []
    start = incoming_data.find(color + "=")
    if start == -1:
        return []
    end = incoming_data.find("&", start)
    if end == -1:
        return []
    values = incoming_data[start + len(color) + 1 : end]

    nodes: List[ScheduleNode] = []
    for entry in values.split(";"):
        if not entry:
            break
        time_text, comma, pwm_text = entry.partition(",")
        if not comma:
            break
        pwm = _clamp(_round_half_away(_to_int(pwm_text) * PERCENT_TO_PWM))
        hour_text, colon, minute_text = time_text.partition(":")
        if not colon:
            break
        hour, minute = _to_int(hour_text), _to_int(minute_text)

        delta = 0.0
        if nodes:
            tail = nodes[-1]
            span = (hour * 60 + minute) - tail.minutes
            if span:
                delta = _f32(_f32(pwm - tail.pwm) / span)
        nodes.append(ScheduleNode(hour, minute, pwm, pin, delta_pwm_per_minute=delta))
    return nodes


Write = Tuple[int, int]
Active = Tuple[str, ScheduleNode, ScheduleNode]


class Schedule:
    """Drives PWM outputs from per-colour schedules."""

    def __init__(self, analog_write: Optional[Callable[[int, int], None]] = None):
        self._analog_write = analog_write

    def update_pwm(
        self,
        current_hour: int,
        current_minute: int,
        heads: Sequence[Optional[Sequence[ScheduleNode]]],
    ) -> List[Write]:
        """Recompute each channel for the given time; return the (pin, value) writes made."""
        now = current_hour * 60 + current_minute
        writes: List[Write] = []
        for color, nodes in zip(COLORS, heads):
            if not nodes:
                continue
            for node, following in zip(nodes, nodes[1:]):
                if node.minutes <= now < following.minutes:
                    self._apply(color, node, following.delta_pwm_per_minute, now - node.minutes, writes)
            last = nodes[-1]
            if last.minutes < now <= last.minutes + TAIL_MINUTES:
                self._apply(color, last, last.delta_pwm_per_minute, now - last.minutes, writes)
        return writes

    def _apply(
        self,
        color: str,
        node: ScheduleNode,
        delta: float,
        elapsed: int,
        writes: List[Write],
    ) -> None:
        computed = _clamp(int(_f32(node.pwm + _f32(delta * elapsed))))
        if computed == node.updated_pwm:
            return
        node.updated_pwm = computed
        log.info(
            "PWM update: %d for colour %s on pin %d (from %d:%02d)",
            computed, color, node.pin_number, node.hour, node.minute,
        )
        if self._analog_write is not None:
            self._analog_write(node.pin_number, computed)
        writes.append((node.pin_number, computed))

    def check_for_schedule(
        self,
        current_hour: int,
        current_minute: int,
        heads: Sequence[Optional[Sequence[ScheduleNode]]],
    ) -> List[Active]:
        """Return, per colour, the schedule segment active at the given time."""
        now = current_hour * 60 + current_minute
        active: List[Active] = []
        for color, nodes in zip(COLORS, heads):
            if not nodes:
                continue
            for node, following in zip(nodes, nodes[1:]):
                if node.minutes <= now < following.minutes:
                    log.info(
                        "Active schedule %d:%02d to %d:%02d, PWM written %d, base PWM %d",
                        node.hour, node.minute, following.hour, following.minute,
                        node.updated_pwm, node.pwm,
                    )
                    active.append((color, node, following))
                    break
        return active