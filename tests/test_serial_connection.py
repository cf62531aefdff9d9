"""Tests for the serial line source."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import serial

from prt7_decoder.transport.serial_connection import (
    MAX_LINE_LENGTH,
    SerialConnection,
)


def _byte_stream(data: bytes, idle_reads: int = 0) -> list[bytes]:
    """Split ``data`` into the one-byte reads pyserial would return."""
    return [b""] * idle_reads + [data[i : i + 1] for i in range(len(data))]


def _open_connection(reads: list[bytes]) -> tuple[SerialConnection, MagicMock]:
    port = MagicMock()
    port.is_open = True
    port.read.side_effect = reads
    with patch("prt7_decoder.transport.serial_connection.serial.Serial",
               return_value=port), \
         patch("prt7_decoder.transport.serial_connection.time.sleep"):
        conn = SerialConnection("/dev/ttyTEST", 9600)
        conn.open()
    return conn, port


def test_open_configures_8n1_without_flow_control():
    with patch("prt7_decoder.transport.serial_connection.serial.Serial") as serial_cls, \
         patch("prt7_decoder.transport.serial_connection.time.sleep"):
        info = SerialConnection("/dev/ttyTEST", 19200).open()

    kwargs = serial_cls.call_args.kwargs
    assert kwargs["port"] == "/dev/ttyTEST"
    assert kwargs["baudrate"] == 19200
    assert kwargs["bytesize"] == serial.EIGHTBITS
    assert kwargs["parity"] == serial.PARITY_NONE
    assert kwargs["stopbits"] == serial.STOPBITS_ONE
    assert kwargs["rtscts"] is False
    assert kwargs["xonxoff"] is False
    assert info.port == "/dev/ttyTEST"


def test_open_failure_raises_connection_error():
    """A port that cannot be opened is a fatal startup error."""
    with patch("prt7_decoder.transport.serial_connection.serial.Serial",
               side_effect=serial.SerialException("no such device")):
        conn = SerialConnection("/dev/missing")
        with pytest.raises(ConnectionError):
            conn.open()
    assert not conn.connected


def test_next_line_splits_on_newline_and_carriage_return():
    conn, _ = _open_connection(_byte_stream(b"L,A\r\nM,-3\rFIN\n"))
    assert conn.next_line() == "L,A"
    assert conn.next_line() == "M,-3"
    assert conn.next_line() == "FIN"


def test_next_line_skips_empty_lines_and_idle_reads():
    """Timeouts and blank lines do not produce lines."""
    conn, _ = _open_connection(_byte_stream(b"\n\r\n\nI\n", idle_reads=3))
    assert conn.next_line() == "I"


def test_next_line_returns_full_buffer_without_terminator():
    conn, _ = _open_connection(_byte_stream(b"X" * (MAX_LINE_LENGTH + 5)))
    line = conn.next_line()
    assert line == "X" * MAX_LINE_LENGTH


def test_next_line_replaces_undecodable_bytes():
    conn, _ = _open_connection(_byte_stream(b"L,\xff\n"))
    assert conn.next_line() == "L,\ufffd"


def test_next_line_requires_connection():
    with pytest.raises(ConnectionError):
        SerialConnection().next_line()


def test_read_failure_raises_connection_error():
    port_reads = [b"L", serial.SerialException("device unplugged")]
    conn, _ = _open_connection(port_reads)
    with pytest.raises(ConnectionError):
        conn.next_line()


def test_open_twice_keeps_the_existing_port():
    """Reopening an open connection does not create a second port handle."""
    port = MagicMock()
    port.is_open = True
    with patch("prt7_decoder.transport.serial_connection.serial.Serial",
               return_value=port) as serial_cls, \
         patch("prt7_decoder.transport.serial_connection.time.sleep"):
        conn = SerialConnection("/dev/ttyTEST", 9600)
        conn.open()
        info = conn.open()

    serial_cls.assert_called_once()
    port.close.assert_not_called()
    assert info.port == "/dev/ttyTEST"
    assert conn.connected


def test_close_is_idempotent():
    conn, port = _open_connection([])
    conn.close()
    conn.close()
    port.close.assert_called_once()
    assert not conn.connected
