"""A mock capture device for unit tests. Frames are pushed by hand."""

from typing import Optional

import numpy as np

from .core.interfaces import FrameCallback, ICaptureDevice


class MockCaptureDevice(ICaptureDevice):
    """Capture device that delivers frames only when ``push`` is called."""

    def __init__(self, sample_rate: int = 44100, error: Optional[Exception] = None):
        self._sample_rate = sample_rate
        self.error = error  # Raised from open() when set
        self.callback: Optional[FrameCallback] = None
        self.open_count = 0
        self.close_count = 0

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    def is_open(self) -> bool:
        return self.callback is not None

    def open(self, on_frame: FrameCallback) -> None:
        if self.error is not None:
            raise self.error
        self.callback = on_frame
        self.open_count += 1

    def close(self) -> None:
        if self.callback is not None:
            self.close_count += 1
        self.callback = None

    def push(self, magnitudes) -> bool:
        """Deliver one frame; returns False if the device is closed."""
        callback = self.callback
        if callback is None:
            return False
        callback(np.asarray(magnitudes), self._sample_rate)
        return True
