"""Daily PWM schedules for LED channels, a clock reader and an ESP8266 AT-command link."""

__version__ = "0.1.0"