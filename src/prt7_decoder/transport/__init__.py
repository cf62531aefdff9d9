"""Transport layer: the serial line source."""

from .serial_connection import SerialConnection
