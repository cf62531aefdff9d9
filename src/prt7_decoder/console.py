"""Interactive decoding console.

Usage::

    prt7-decode /dev/ttyUSB0 -b 9600

When no port is given on the command line, it is read from stdin.
"""

from __future__ import annotations

import argparse
import logging
import sys

from .protocol.frames import ControlSignal, Rejection, Trace
from .session import SessionController, SessionEvent
from .transport.serial_connection import (
    DEFAULT_BAUDRATE,
    DEFAULT_PORT,
    SerialConnection,
)

logger = logging.getLogger(__name__)

BANNER = "  PRT-7 DECODER"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="Decode PRT-7 rotor frames arriving on a serial port")
    ap.add_argument("port", nargs="?", default=None,
                    help=f"Serial port, e.g. {DEFAULT_PORT} (prompted if omitted)")
    ap.add_argument("-b", "--baud", type=int, default=DEFAULT_BAUDRATE,
                    help=f"Baud rate (default {DEFAULT_BAUDRATE})")
    ap.add_argument("-v", "--verbose", action="store_true",
                    help="Enable debug logging")
    return ap.parse_args(argv)


def format_event(event: SessionEvent) -> str:
    """Render a session event as a console line."""
    if isinstance(event, ControlSignal):
        if event is ControlSignal.START:
            return f"{event}\n"
        return f"\n{event}"
    if isinstance(event, Rejection):
        return f"Frame: [{event.line}] -> {event}"
    if isinstance(event, Trace):
        return f"Frame: [{event.line}] -> {event}\n"
    return str(event)


def print_event(event: SessionEvent) -> None:
    print(format_event(event))


def print_message(message: str) -> None:
    print("  --- Decoded message ---:")
    print(message)


def prompt_port() -> str:
    print("Enter the serial port of the sender:")
    print(f"(Port: {DEFAULT_PORT})")
    return input().strip() or DEFAULT_PORT


def main(argv: list[str] | None = None) -> int:
    """Run one decoding session; returns the process exit status."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    print(BANNER)
    port = args.port or prompt_port()

    print(f"\nConnecting to port {port}...")
    conn = SerialConnection(port, args.baud)
    try:
        conn.open()
    except ConnectionError as e:
        logger.debug("Startup failed", exc_info=True)
        print(f"\nERROR: {e}", file=sys.stderr)
        return 1

    print("Connection established!")

    session = SessionController(trace_sink=print_event, end_sink=print_message)
    try:
        session.run(conn.next_line)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        print_message(session.message)
    except ConnectionError as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        return 1
    finally:
        conn.close()

    print("\nSystem shut down correctly.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
