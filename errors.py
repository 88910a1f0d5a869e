# errors.py
from __future__ import annotations


class EnigmaError(Exception):
    """Base class for everything the machine raises on purpose."""


class ConfigurationError(EnigmaError, ValueError):
    """A wheel, plugboard or setting that no real machine could be set up with."""


class OperationalError(EnigmaError, ValueError):
    """A key press the machine cannot perform (symbol not on the keyboard)."""
