"""Decoder state models: the rotor and the decoded payload."""

from .rotor import RotorMapping
from .payload import PayloadSequence
