"""MCP server entry point for the PRT-7 decoder.

Exposes tools, resources, and prompts via the Model Context Protocol
using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import anyio.to_thread
from mcp.server.fastmcp import FastMCP

from .models.rotor import RotorMapping
from .protocol.frames import ParseErrorKind
from .session import SessionController, SessionEvent
from .transport.serial_connection import (
    DEFAULT_BAUDRATE,
    DEFAULT_PORT,
    SerialConnection,
)

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "prt7-decoder",
    instructions="Decode PRT-7 rotor-cipher frame streams from a serial port",
)

# Global connection state
_connection: SerialConnection | None = None
_last_result: dict[str, Any] | None = None


def _get_connection() -> SerialConnection:
    """Get the open serial connection, raising if not connected."""
    if _connection is None or not _connection.connected:
        raise RuntimeError(
            "Not connected to a serial port. Use the 'connect' tool first."
        )
    return _connection


def _session_result(
    session: SessionController, events: list[SessionEvent]
) -> dict[str, Any]:
    global _last_result
    _last_result = {
        "message": session.message,
        "terminated": session.terminated,
        "events": [event.to_dict() for event in events],
    }
    return _last_result


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(port: str = DEFAULT_PORT, baudrate: int = DEFAULT_BAUDRATE) -> dict[str, Any]:
    """Open the serial port the sender transmits on.

    Args:
        port: Serial device, e.g. /dev/ttyUSB0 or COM3.
        baudrate: Line speed (default 9600, 8N1).
    """
    global _connection
    if _connection is not None and _connection.connected:
        return {
            "connected": True,
            "message": "Already connected",
            "port": _connection.port_info.port,
        }

    _connection = SerialConnection(port, baudrate)
    info = _connection.open()
    return {"connected": True, "port": info.port, "baudrate": info.baudrate}


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the serial port."""
    global _connection
    if _connection is None:
        return {"disconnected": True}
    _connection.close()
    _connection = None
    return {"disconnected": True}


# ─── DECODING TOOLS ──────────────────────────────────────────────────

@mcp.tool()
async def receive_message() -> dict[str, Any]:
    """Run one decoding session on the open port.

    Waits until the sender transmits FIN, then returns every frame
    trace and the decoded message. The blocking serial reads run in a
    worker thread so the server keeps answering other requests.
    """
    conn = _get_connection()
    events: list[SessionEvent] = []
    session = SessionController(trace_sink=events.append)
    await anyio.to_thread.run_sync(session.run, conn.next_line)
    return _session_result(session, events)


@mcp.tool()
def decode_transcript(lines: list[str]) -> dict[str, Any]:
    """Decode a captured transmission offline.

    Lines after FIN are ignored. ``terminated`` is false when the
    transcript never reached FIN.

    Args:
        lines: Raw protocol lines, e.g. ["I", "L,A", "M,1", "L,A", "FIN"].
    """
    events: list[SessionEvent] = []
    session = SessionController(trace_sink=events.append)
    for line in lines:
        if not session.feed(line.rstrip("\r\n")):
            break
    return _session_result(session, events)


@mcp.tool()
def decode_symbol(symbol: str, rotation: int = 0) -> dict[str, Any]:
    """Look up one symbol on a rotor turned ``rotation`` steps from 'A'.

    Args:
        symbol: A single character.
        rotation: Net rotation applied to a fresh rotor (may be negative).
    """
    if len(symbol) != 1:
        return {"error": "Symbol must be a single character"}
    rotor = RotorMapping()
    rotor.rotate(rotation)
    return {
        "symbol": symbol,
        "decoded": rotor.decode(symbol),
        "head": rotor.head_letter,
    }


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("prt7://connection/status")
def resource_connection_status() -> str:
    """Serial connection state."""
    if _connection is None or not _connection.connected:
        return json.dumps({"connected": False})

    info = _connection.port_info
    return json.dumps({
        "connected": True,
        "port": info.port,
        "baudrate": info.baudrate,
    })


@mcp.resource("prt7://session/last")
def resource_last_session() -> str:
    """Result of the most recent decoding session."""
    return json.dumps({"session": _last_result})


@mcp.resource("prt7://protocol/frames")
def resource_protocol_frames() -> str:
    """The line protocol the decoder understands."""
    return json.dumps({
        "lines": [
            {"form": "I...", "meaning": "start of transmission"},
            {"form": "FIN...", "meaning": "end of transmission"},
            {"form": "L,<char>", "meaning": "decode <char> and append it"},
            {"form": "M,<int>", "meaning": "rotate the rotor forward"},
            {"form": "M,-<int>", "meaning": "rotate the rotor backward"},
        ],
        "errors": [kind.value for kind in ParseErrorKind],
    })


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def explain_transcript(lines: str) -> str:
    """Walk through a captured transmission frame by frame.

    Args:
        lines: Raw protocol lines, one per line.
    """
    return f"""Decode this PRT-7 transmission with the decode_transcript tool:

{lines}

Then explain:
- How each M frame moves the rotor head
- What each L frame decodes to and why
- Which lines were rejected and what is wrong with them
- The final decoded message"""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
