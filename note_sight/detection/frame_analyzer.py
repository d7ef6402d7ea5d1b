"""Dominant-frequency search over one frequency-domain frame."""

import math
from typing import ClassVar, Sequence, Tuple, Union

import numpy as np

from ..core.interfaces import IPitchAnalyzer
from ..logger import get_logger
from ..note_types import EstimateStatus, PitchEstimate

logger = get_logger(__name__)


class FrameAnalyzer(IPitchAnalyzer):
    """
    Finds the loudest bin of a magnitude frame inside a frequency band.

    The frame is expected to hold ``fft_size / 2`` magnitudes covering 0 Hz up
    to the Nyquist frequency, as produced by ``SpectrumAnalyser``. The scan is
    a single pass with no smoothing of its own, so a short noise spike inside
    the band can win a frame.
    """

    DEFAULT_MIN_FREQUENCY: ClassVar[float] = 80.0  # Hz
    DEFAULT_MAX_FREQUENCY: ClassVar[float] = 2000.0  # Hz
    DEFAULT_THRESHOLD: ClassVar[float] = 80.0  # On the 0-255 byte scale

    def __init__(
        self,
        min_frequency: float = DEFAULT_MIN_FREQUENCY,
        max_frequency: float = DEFAULT_MAX_FREQUENCY,
        threshold: float = DEFAULT_THRESHOLD,
    ) -> None:
        """Initialize the analyzer.

        Args:
            min_frequency: Lower edge of the analysis band in Hz
            max_frequency: Upper edge of the analysis band in Hz
            threshold: The peak must exceed this magnitude to count as a pitch

        Raises:
            ValueError: If the band is empty or negative
        """
        if min_frequency < 0 or max_frequency <= min_frequency:
            raise ValueError(
                f"Invalid analysis band: {min_frequency}-{max_frequency} Hz"
            )
        self._min_frequency = float(min_frequency)
        self._max_frequency = float(max_frequency)
        self._threshold = float(threshold)

    @property
    def band(self) -> Tuple[float, float]:
        return self._min_frequency, self._max_frequency

    @property
    def threshold(self) -> float:
        return self._threshold

    @staticmethod
    def frequency_to_bin(
        frequency: float, buffer_length: int, sample_rate: int
    ) -> int:
        """Index of the bin containing ``frequency``."""
        return int(math.floor(frequency * buffer_length / (sample_rate / 2)))

    @staticmethod
    def bin_to_frequency(bin_index: int, buffer_length: int, sample_rate: int) -> float:
        """Lower edge frequency of bin ``bin_index``."""
        return bin_index * sample_rate / (2 * buffer_length)

    def band_bins(self, buffer_length: int, sample_rate: int) -> Tuple[int, int]:
        """Half-open bin range ``[start, stop)`` covered by the band."""
        start = self.frequency_to_bin(self._min_frequency, buffer_length, sample_rate)
        stop = self.frequency_to_bin(self._max_frequency, buffer_length, sample_rate)
        return max(start, 0), min(stop, buffer_length)

    def analyze(
        self, magnitudes: Union[np.ndarray, Sequence[float]], sample_rate: int
    ) -> PitchEstimate:
        """Find the dominant frequency of one frame.

        Args:
            magnitudes: Non-negative magnitudes indexed by frequency bin
            sample_rate: Sample rate of the audio the frame was computed from

        Returns:
            PitchEstimate: Detected frequency and peak amplitude, or an absent
            estimate when nothing in the band exceeds the threshold
        """
        frame = np.asarray(magnitudes, dtype=np.float64).ravel()
        buffer_length = len(frame)

        if buffer_length == 0 or not sample_rate or sample_rate <= 0:
            logger.debug(
                f"Unusable frame: {buffer_length} bins at {sample_rate} Hz"
            )
            return PitchEstimate.absent(EstimateStatus.OUT_OF_BAND)

        start, stop = self.band_bins(buffer_length, sample_rate)
        if stop <= start:
            logger.debug(
                f"Band {self._min_frequency}-{self._max_frequency} Hz has no bins "
                f"for {buffer_length} bins at {sample_rate} Hz"
            )
            return PitchEstimate.absent(EstimateStatus.OUT_OF_BAND)

        band = np.nan_to_num(frame[start:stop], nan=0.0)
        # argmax returns the first maximum, i.e. the lowest frequency on ties
        peak_offset = int(np.argmax(band))
        peak_amplitude = float(band[peak_offset])

        if peak_amplitude <= self._threshold:
            return PitchEstimate.absent(
                EstimateStatus.BELOW_THRESHOLD, amplitude=peak_amplitude
            )

        bin_index = start + peak_offset
        frequency = self.bin_to_frequency(bin_index, buffer_length, sample_rate)
        logger.debug(
            f"Peak at bin {bin_index} ({frequency:.1f} Hz), amplitude {peak_amplitude:.1f}"
        )
        return PitchEstimate(
            frequency_hz=frequency,
            amplitude=peak_amplitude,
            status=EstimateStatus.DETECTED,
            bin_index=bin_index,
        )
