"""Detection session that ties a capture device to pitch analysis."""

from __future__ import annotations

import threading
import time
from enum import Enum
from typing import Optional

import numpy as np

from ..core.interfaces import ICaptureDevice, IDetectionSession, IPitchAnalyzer
from ..detection.frame_analyzer import FrameAnalyzer
from ..display import NoteDisplay
from ..logger import get_logger
from ..note_types import CanonicalNote, DisplaySnapshot, PitchEstimate
from .frequency import FrequencyService

logger = get_logger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    LISTENING = "listening"


class DetectionSession(IDetectionSession):
    """Runs pitch analysis on every frame of a capture device.

    The capture device's callback is the only producer. Each frame is
    analysed and quantised, and the result replaces the current note; there is
    no queue or history, readers always see the latest value. The lock only
    guards the hand-off so that nothing is published once ``stop()`` has
    cleared the note, even if a frame was being analysed at that moment.
    """

    def __init__(
        self,
        capture_device: ICaptureDevice,
        analyzer: Optional[IPitchAnalyzer] = None,
        frequency_service: Optional[FrequencyService] = None,
        display: Optional[NoteDisplay] = None,
    ) -> None:
        """Initialize the session.

        Args:
            capture_device: Source of magnitude frames
            analyzer: Frame analyzer, or None for the default 80-2000 Hz one
            frequency_service: Hz to note conversion, or None for A4 = 440 Hz
            display: Snapshot builder used by ``snapshot()``
        """
        self._device = capture_device
        self._analyzer = analyzer or FrameAnalyzer()
        self._frequency = frequency_service or FrequencyService()
        self._display = display or NoteDisplay()

        self._lock = threading.Lock()
        self._state = SessionState.IDLE
        self._current_note: Optional[CanonicalNote] = None
        self._current_estimate: Optional[PitchEstimate] = None
        self._frame_count = 0
        self._start_time = 0.0

    @property
    def state(self) -> SessionState:
        return self._state

    def is_listening(self) -> bool:
        return self._state is SessionState.LISTENING

    @property
    def current_note(self) -> Optional[CanonicalNote]:
        return self._current_note

    @property
    def current_estimate(self) -> Optional[PitchEstimate]:
        return self._current_estimate

    @property
    def frame_count(self) -> int:
        """Frames analysed since the last ``start()``."""
        return self._frame_count

    @property
    def capture_device(self) -> ICaptureDevice:
        return self._device

    def snapshot(self) -> DisplaySnapshot:
        """Display snapshot of the current note."""
        return self._display.snapshot(self._current_note)

    def start(self) -> None:
        """Acquire the capture device and start analysing frames.

        Raises:
            CapturePermissionError: If access to the device is denied
            UnsupportedEnvironmentError: If capture is not possible here
        """
        if self.is_listening():
            logger.warning("Detection session already listening")
            return

        with self._lock:
            self._current_note = None
            self._current_estimate = None
            self._frame_count = 0
            self._state = SessionState.LISTENING

        try:
            self._device.open(self._on_frame)
        except Exception:
            with self._lock:
                self._state = SessionState.IDLE
            self._device.close()
            raise

        self._start_time = time.time()
        logger.info("Detection session listening")

    def stop(self) -> None:
        """Release the capture device and clear the current note."""
        with self._lock:
            was_listening = self._state is SessionState.LISTENING
            self._state = SessionState.IDLE
            self._current_note = None
            self._current_estimate = None

        self._device.close()
        if was_listening:
            logger.info(
                f"Detection session stopped after {self._frame_count} frames "
                f"({time.time() - self._start_time:.1f}s)"
            )

    def _on_frame(self, magnitudes: np.ndarray, sample_rate: int) -> None:
        """Analyse one frame and publish the result."""
        if not self.is_listening():
            return

        try:
            estimate = self._analyzer.analyze(magnitudes, sample_rate)
            note = (
                None
                if estimate.is_absent
                else self._frequency.frequency_to_note(estimate.frequency_hz)
            )
        except Exception as e:
            logger.error(f"Error analysing frame: {e}", exc_info=True)
            estimate, note = None, None

        with self._lock:
            if self._state is not SessionState.LISTENING:
                return
            self._current_estimate = estimate
            self._current_note = note
            self._frame_count += 1

        if note is not None:
            logger.debug(
                f"[frame {self._frame_count}] {note} ({estimate.frequency_hz:.1f} Hz)"
            )

    def __enter__(self) -> DetectionSession:
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.stop()
