"""Byte-scaled magnitude spectra from blocks of audio samples."""

from typing import ClassVar, Optional

import numpy as np

from ..logger import get_logger

logger = get_logger(__name__)


class SpectrumAnalyser:
    """
    Turns time-domain sample blocks into 0-255 magnitude frames.

    Works like a browser analyser node: the latest ``fft_size`` samples are
    Blackman-windowed and transformed, magnitudes are smoothed over time, and
    their decibel values are mapped linearly from ``[min_db, max_db]`` onto
    ``[0, 255]``. Each frame has ``fft_size // 2`` bins spanning 0 Hz to
    Nyquist.
    """

    DEFAULT_FFT_SIZE: ClassVar[int] = 4096
    DEFAULT_SMOOTHING: ClassVar[float] = 0.8
    DEFAULT_MIN_DB: ClassVar[float] = -100.0
    DEFAULT_MAX_DB: ClassVar[float] = -30.0

    def __init__(
        self,
        fft_size: int = DEFAULT_FFT_SIZE,
        smoothing: float = DEFAULT_SMOOTHING,
        min_db: float = DEFAULT_MIN_DB,
        max_db: float = DEFAULT_MAX_DB,
    ) -> None:
        """Initialize the analyser.

        Args:
            fft_size: FFT length in samples, a power of two
            smoothing: Time constant between 0 (none) and 1 (frozen)
            min_db: Level mapped to 0
            max_db: Level mapped to 255

        Raises:
            ValueError: If a parameter is out of range
        """
        if fft_size < 32 or fft_size & (fft_size - 1):
            raise ValueError(f"fft_size must be a power of two >= 32, got {fft_size}")
        if not 0.0 <= smoothing <= 1.0:
            raise ValueError(f"smoothing must be between 0 and 1, got {smoothing}")
        if max_db <= min_db:
            raise ValueError(f"max_db ({max_db}) must exceed min_db ({min_db})")

        self._fft_size = fft_size
        self._smoothing = smoothing
        self._min_db = min_db
        self._max_db = max_db

        self._window = np.blackman(fft_size)
        self._samples = np.zeros(fft_size, dtype=np.float64)
        self._previous: Optional[np.ndarray] = None

    @property
    def fft_size(self) -> int:
        return self._fft_size

    @property
    def frequency_bin_count(self) -> int:
        return self._fft_size // 2

    def reset(self) -> None:
        """Forget buffered samples and smoothing history."""
        self._samples[:] = 0.0
        self._previous = None

    def push(self, samples: np.ndarray) -> None:
        """Append a block of mono samples to the rolling buffer."""
        block = np.asarray(samples, dtype=np.float64).ravel()
        if block.size >= self._fft_size:
            self._samples[:] = block[-self._fft_size :]
        elif block.size:
            self._samples = np.roll(self._samples, -block.size)
            self._samples[-block.size :] = block

    def magnitudes(self) -> np.ndarray:
        """Smoothed linear magnitudes of the buffered samples."""
        spectrum = np.fft.rfft(self._samples * self._window)
        current = np.abs(spectrum[: self.frequency_bin_count]) / self._fft_size
        if self._previous is None or self._smoothing == 0.0:
            smoothed = current
        else:
            smoothed = self._smoothing * self._previous + (1.0 - self._smoothing) * current
        self._previous = smoothed
        return smoothed

    def to_bytes(self, magnitudes: np.ndarray) -> np.ndarray:
        """Map linear magnitudes onto the 0-255 decibel scale."""
        with np.errstate(divide="ignore"):
            db = 20.0 * np.log10(magnitudes)
        scaled = (db - self._min_db) * (255.0 / (self._max_db - self._min_db))
        return np.clip(np.floor(np.nan_to_num(scaled, neginf=0.0)), 0, 255).astype(
            np.uint8
        )

    def process(self, samples: np.ndarray) -> np.ndarray:
        """Push one block and return the current 0-255 frame."""
        self.push(samples)
        return self.to_bytes(self.magnitudes())
