"""Defines the core interfaces for the Note Sight application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, Optional

import numpy as np

from ..note_types import CanonicalNote, PitchEstimate

# Receives one magnitude frame and the sample rate it was computed at
FrameCallback = Callable[[np.ndarray, int], None]


class ICaptureDevice(ABC):
    """Interface for capture devices that deliver magnitude frames."""

    @abstractmethod
    def open(self, on_frame: FrameCallback) -> None:
        """Acquire the device and start delivering frames to ``on_frame``.

        Raises:
            CapturePermissionError: If access to the device is denied
            UnsupportedEnvironmentError: If capture is not possible here
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the device. Safe to call more than once."""
        pass

    @abstractmethod
    def is_open(self) -> bool:
        """Check if the device is held."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the captured audio."""
        pass


class IPitchAnalyzer(ABC):
    """Interface for per-frame pitch analysis."""

    @abstractmethod
    def analyze(self, magnitudes: np.ndarray, sample_rate: int) -> PitchEstimate:
        """Estimate the pitch of one magnitude frame."""
        pass


class IDetectionSession(ABC):
    """Interface for the capture/analysis session."""

    @abstractmethod
    def start(self) -> None:
        """Start listening."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop listening and clear the current note."""
        pass

    @abstractmethod
    def is_listening(self) -> bool:
        """Check if the session is listening."""
        pass

    @property
    @abstractmethod
    def current_note(self) -> Optional[CanonicalNote]:
        """The most recently detected note, or None."""
        pass
