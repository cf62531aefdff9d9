"""Serial line source for the decoder.

Opens the port in raw 8N1 mode with no flow control and frames the
incoming byte stream into text lines. Either ``\\n`` or ``\\r`` ends a
line; empty lines produced by ``\\r\\n`` pairs are skipped.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import serial

logger = logging.getLogger(__name__)

DEFAULT_PORT = "/dev/ttyUSB0"
DEFAULT_BAUDRATE = 9600
READ_TIMEOUT_S = 1.0
SETTLE_DELAY_S = 0.1
MAX_LINE_LENGTH = 99
LINE_TERMINATORS = (b"\n", b"\r")


@dataclass
class PortInfo:
    """Settings the port was opened with."""

    port: str = DEFAULT_PORT
    baudrate: int = DEFAULT_BAUDRATE


class SerialConnection:
    """Blocking line reader over a serial port.

    Usage::

        conn = SerialConnection("/dev/ttyUSB0")
        conn.open()
        line = conn.next_line()
        conn.close()
    """

    def __init__(
        self,
        port: str = DEFAULT_PORT,
        baudrate: int = DEFAULT_BAUDRATE,
    ) -> None:
        self._port_info = PortInfo(port=port, baudrate=baudrate)
        self._serial: serial.Serial | None = None

    @property
    def connected(self) -> bool:
        return self._serial is not None and self._serial.is_open

    @property
    def port_info(self) -> PortInfo:
        return self._port_info

    def open(self) -> PortInfo:
        """Open and configure the port. Does nothing if already open.

        Raises:
            ConnectionError: If the port cannot be opened.
        """
        if self.connected:
            return self._port_info

        try:
            self._serial = serial.Serial(
                port=self._port_info.port,
                baudrate=self._port_info.baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=READ_TIMEOUT_S,
                xonxoff=False,
                rtscts=False,
            )
        except (serial.SerialException, ValueError) as e:
            raise ConnectionError(
                f"Could not open serial port {self._port_info.port} "
                f"at {self._port_info.baudrate} baud: {e}"
            ) from e

        time.sleep(SETTLE_DELAY_S)
        logger.info(
            "Connected to %s @ %d baud",
            self._port_info.port,
            self._port_info.baudrate,
        )
        return self._port_info

    def close(self) -> None:
        """Close the port. Safe to call when already closed."""
        if self._serial is None:
            return

        try:
            self._serial.close()
        except serial.SerialException as e:
            logger.warning("Error closing port: %s", e)
        finally:
            self._serial = None
            logger.info("Disconnected")

    def next_line(self) -> str:
        """Block until the next non-empty line arrives and return it.

        A line that reaches ``MAX_LINE_LENGTH`` characters without a
        terminator is returned as it stands.

        Raises:
            ConnectionError: If not connected.
        """
        if not self.connected:
            raise ConnectionError("Not connected to serial port")

        buffer = bytearray()
        while len(buffer) < MAX_LINE_LENGTH:
            byte = self._read_byte()
            if not byte:
                continue
            if byte in LINE_TERMINATORS:
                if buffer:
                    break
                continue
            buffer += byte

        return buffer.decode("ascii", errors="replace")

    def _read_byte(self) -> bytes:
        try:
            return self._serial.read(1)
        except serial.SerialException as e:
            raise ConnectionError(f"Serial read failed: {e}") from e

    def __enter__(self) -> SerialConnection:
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
