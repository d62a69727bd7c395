"""AT-command link to an ESP Wi-Fi module acting as a tiny HTTP server."""

from __future__ import annotations

import logging
import time
from typing import Callable

from .schedule import _to_int

log = logging.getLogger(__name__)

RESPONSE_BODY = "OK"


def parse_client_id(data: str) -> int:
    """Return the connection id from a ``+IPD,<id>,...`` notice."""
    index = data.find("+IPD,")
    if index == -1:
        raise ValueError("no +IPD notice in incoming data")
    index += len("+IPD,")
    comma = data.find(",", index)
    return _to_int(data[index:] if comma == -1 else data[index:comma])


class EspCommunication:
    """Talks to the module over a serial port (an object with write, read, in_waiting)."""

    def __init__(
        self,
        port,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        poll_interval: float = 0.005,
    ):
        self.port = port
        self._clock = clock
        self._sleep = sleep
        self._poll_interval = poll_interval
        self.client_id = 0
        self.incoming_data = ""

    def initialize(self, ssid: str, password: str) -> None:
        """Join the network and start a server on port 80."""
        self.send_command("AT", 1000)
        self.send_command("AT+CWMODE=1", 2000)
        self.send_command(f'AT+CWJAP="{ssid}","{password}"', 5000)
        self.send_command("AT+CIPMUX=1", 1000)
        self.send_command("AT+CIPSERVER=1,80", 1000)
        self.send_command("AT+CIFSR", 1000)

    def send_command(self, command: str, timeout: int) -> str:
        """Send one line and collect what arrives within ``timeout`` milliseconds."""
        self.port.write((command + "\r\n").encode("utf-8"))
        received = bytearray()
        start = self._clock()
        while (self._clock() - start) * 1000 < timeout:
            waiting = self.port.in_waiting
            if waiting:
                received += self.port.read(waiting)
            else:
                self._sleep(self._poll_interval)
        text = received.decode("latin-1")
        log.debug("%s -> %r", command, text)
        return text

    def send_http_response(self) -> None:
        """Reply ``OK`` to the client named in the incoming data and close it."""
        self.client_id = parse_client_id(self.incoming_data)
        self.send_command(f"AT+CIPSEND={self.client_id},{len(RESPONSE_BODY)}", 2000)
        self.send_command(RESPONSE_BODY, 2000)
        self.send_command(f"AT+CIPCLOSE={self.client_id}", 1000)

    def close_connection(self) -> None:
        """Close the current client connection and drop buffered data."""
        self.send_command(f"AT+CIPCLOSE={self.client_id}", 1000)
        self.incoming_data = ""