"""Frame-protocol session: consume raw lines until end of transmission.

The controller owns one rotor and one payload for the life of a session.
Each line is fully handled before the next is requested::

    AWAITING_LINE --line--> ACTIVE --(not FIN)--> AWAITING_LINE
                                   --FIN-------> TERMINATED

Results are pushed to two sinks: ``trace_sink`` receives every
:class:`~prt7_decoder.protocol.frames.Trace`,
:class:`~prt7_decoder.protocol.frames.Rejection` and start/end
:class:`~prt7_decoder.protocol.frames.ControlSignal`; ``end_sink`` receives
the decoded message once, after termination.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Callable, Union

from .models.payload import PayloadSequence
from .models.rotor import RotorMapping
from .protocol.frames import ControlSignal, Rejection, Trace, classify_control
from .protocol.parser import FrameParseError, parse_line
from .protocol.processor import apply_frame

logger = logging.getLogger(__name__)

SessionEvent = Union[Trace, Rejection, ControlSignal]
LineSource = Callable[[], str]
TraceSink = Callable[[SessionEvent], None]
EndSink = Callable[[str], None]


class SessionState(Enum):
    AWAITING_LINE = "awaiting_line"
    ACTIVE = "active"
    TERMINATED = "terminated"


def _discard(_value: object) -> None:
    pass


class SessionController:
    """Drives one decoding session.

    Usage::

        session = SessionController(trace_sink=print, end_sink=print)
        message = session.run(connection.next_line)

    or, for lines that are already in hand::

        for line in lines:
            if not session.feed(line):
                break
    """

    def __init__(
        self,
        trace_sink: TraceSink = _discard,
        end_sink: EndSink = _discard,
    ) -> None:
        self._trace_sink = trace_sink
        self._end_sink = end_sink
        self._rotor = RotorMapping()
        self._payload = PayloadSequence()
        self._state = SessionState.AWAITING_LINE

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def terminated(self) -> bool:
        return self._state is SessionState.TERMINATED

    @property
    def rotor(self) -> RotorMapping:
        return self._rotor

    @property
    def message(self) -> str:
        """The message decoded so far."""
        return self._payload.render()

    def feed(self, line: str) -> bool:
        """Handle one raw line.

        Returns:
            ``True`` while the session expects more lines, ``False`` once
            the end-of-transmission signal has been handled.

        Raises:
            RuntimeError: If the session has already terminated.
        """
        if self.terminated:
            raise RuntimeError("Session already terminated")

        if not line:
            return True

        self._state = SessionState.ACTIVE
        logger.debug("Line received: %r", line)

        signal = classify_control(line)
        if signal is ControlSignal.START:
            logger.info("Start of transmission")
            self._trace_sink(signal)
        elif signal is ControlSignal.END:
            logger.info("End of transmission, %d symbols decoded", len(self._payload))
            self._state = SessionState.TERMINATED
            self._trace_sink(signal)
            self._end_sink(self._payload.render())
            return False
        else:
            self._handle_frame_line(line)

        self._state = SessionState.AWAITING_LINE
        return True

    def run(self, next_line: LineSource) -> str:
        """Pull lines from ``next_line`` until end of transmission.

        Returns:
            The decoded message, which has also been passed to ``end_sink``.
        """
        while self.feed(next_line()):
            pass
        return self._payload.render()

    def _handle_frame_line(self, line: str) -> None:
        try:
            frame = parse_line(line)
        except FrameParseError as e:
            logger.info("Rejected frame %r: %s", line, e.kind.value)
            self._trace_sink(Rejection(line=line, kind=e.kind))
            return

        trace = apply_frame(frame, self._rotor, self._payload)
        self._trace_sink(replace(trace, line=line))
