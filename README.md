# ledsched

Daily brightness schedules for a four-channel LED light.

A schedule is a list of time points, each with a brightness in percent.
Between two points the brightness changes linearly, minute by minute, so
the light fades smoothly from one level to the next. The package parses
schedules out of plain-text messages, works out the output level for any
time of day, reads the wall clock, and talks to an ESP8266 Wi-Fi module
through AT commands.

## Channels

| Colour key | Output pin |
|------------|-----------:|
| `b`        | 6          |
| `r`        | 9          |
| `wCold`    | 5          |
| `wWarm`    | 3          |

These are `ledsched.schedule.COLORS` and `ledsched.schedule.COLOR_PINS`.

## Schedule messages

Each channel is given as `<key>=` followed by `HH:MM,percent` entries
separated by `;`, and closed by the next `&`:

```
SCHED&b=08:00,0;10:00,80&r=09:00,0;12:00,50&OK
```

`parse_schedule(message, key)` returns a list of `ScheduleNode` objects.
Percentages are scaled to the 0–255 PWM range (×2.55, rounded, then
clamped). Each node after the first carries the rate of change per minute
from the node before it. The result is an empty list for an unknown key,
or when the field is missing or not closed by `&`; parsing stops at the
first malformed entry.

## Driving outputs

```python
from ledsched.schedule import Schedule, parse_schedule

message = "SCHED&b=08:00,0;10:00,80&r=09:00,0;12:00,50&OK"
blue = parse_schedule(message, "b")
red = parse_schedule(message, "r")

writes = []
schedule = Schedule(analog_write=lambda pin, value: writes.append((pin, value)))
schedule.update_pwm(9, 0, [blue, red, [], []])
print(writes)  # [(6, 102)]
```

`Schedule.update_pwm(hour, minute, heads)` takes the schedules in the
order `b`, `r`, `wCold`, `wWarm`, computes each channel's interpolated
level, and for every level that changed since the last call calls the
optional `analog_write(pin, value)` callback. It returns the list of
`(pin, value)` writes it made. Past the last point of a channel the fade
continues at the same rate for up to an hour.

`Schedule.check_for_schedule(hour, minute, heads)` returns, for each
channel, a `(colour, node, next_node)` tuple for the interval active at
that time.

## Clock

`ledsched.timereader.TimeReader` keeps `current_hour` and
`current_minute`, read from a clock callable (`datetime.now` by default):

- `initialize()` logs a warning if the clock reports a year before 2000,
  then takes a first reading;
- `update_time()` reads the clock and returns the `datetime`;
- `parse_date(index, text)` takes `<day> HHMM` starting at `index`;
- `show_time()` returns a line with the date and time, formatted by
  `format_datetime` as `MM/DD/YYYY hh:mm:ss`.

## ESP8266 link

`ledsched.esp.EspCommunication(port)` sends AT commands over any object
with `write`, `read` and `in_waiting` — for example a `serial.Serial`
from pyserial, which is not installed with this package.

- `initialize(ssid, password)` joins a network and starts a server on
  port 80;
- `send_command(command, timeout)` sends one line and returns what
  arrived within `timeout` milliseconds;
- `send_http_response()` answers `OK` to the client named by the
  `+IPD,<id>,` notice in `incoming_data` and closes the connection;
- `close_connection()` closes the current client and clears
  `incoming_data`.

`parse_client_id(text)` returns the client id and raises `ValueError`
when there is no `+IPD,` notice.

## What this package does not do

There is no command-line program and no main loop: nothing here reads
incoming messages from the module, tells message kinds apart, or runs
the schedule on a timer. Nor does it set pins itself; output goes only
through the `analog_write` callback you pass to `Schedule`.

## Installation

```
pip install .
```

## Tests

```
pip install .[test]
pytest
```