"""Protocol layer: frame variants, line parsing, and frame application."""

from .frames import ControlSignal, Frame, Load, Rotate, Trace, Rejection
from .parser import FrameParseError, parse_line
from .processor import apply_frame
