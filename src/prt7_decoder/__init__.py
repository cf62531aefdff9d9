"""PRT-7 rotor decoder: turns serial frame streams into plaintext messages."""

__version__ = "0.1.0"
