"""Mappers from canonical notes to instrument positions."""

from .fingerboard import FingerboardMapper, build_string
from .keyboard import KeyboardMapper
from .tunings import DOUBLE_BASS, GUITAR, INSTRUMENTS

__all__ = [
    "FingerboardMapper",
    "KeyboardMapper",
    "build_string",
    "DOUBLE_BASS",
    "GUITAR",
    "INSTRUMENTS",
]
