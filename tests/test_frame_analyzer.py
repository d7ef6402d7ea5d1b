import unittest

import numpy as np
import pytest

from note_sight.audio.spectrum import SpectrumAnalyser
from note_sight.detection.frame_analyzer import FrameAnalyzer
from note_sight.note_types import EstimateStatus
from note_sight.services.frequency import frequency_to_note

SAMPLE_RATE = 44100
BUFFER_LENGTH = 4096  # Bins in one frame
BIN_WIDTH = SAMPLE_RATE / (2 * BUFFER_LENGTH)


def spike_frame(
    frequency, amplitude=200.0, length=BUFFER_LENGTH, sample_rate=SAMPLE_RATE
):
    frame = np.zeros(length)
    frame[FrameAnalyzer.frequency_to_bin(frequency, length, sample_rate)] = amplitude
    return frame


class TestFrameAnalyzer(unittest.TestCase):
    def setUp(self):
        self.analyzer = FrameAnalyzer()

    def test_silence_is_absent(self):
        for sample_rate in (8000, 22050, 44100, 48000, 96000):
            estimate = self.analyzer.analyze(np.zeros(BUFFER_LENGTH), sample_rate)
            self.assertTrue(estimate.is_absent)
            self.assertEqual(estimate.status, EstimateStatus.BELOW_THRESHOLD)

    def test_spike_at_440(self):
        estimate = self.analyzer.analyze(spike_frame(440.0, 255), SAMPLE_RATE)
        self.assertFalse(estimate.is_absent)
        self.assertLessEqual(abs(estimate.frequency_hz - 440.0), BIN_WIDTH)
        self.assertEqual(estimate.amplitude, 255)
        self.assertEqual(estimate.bin_index, 81)

    def test_threshold_must_be_exceeded(self):
        estimate = self.analyzer.analyze(spike_frame(440.0, 80), SAMPLE_RATE)
        self.assertTrue(estimate.is_absent)
        self.assertEqual(estimate.amplitude, 80)
        self.assertFalse(self.analyzer.analyze(spike_frame(440.0, 81), SAMPLE_RATE).is_absent)

    def test_ties_keep_lowest_bin(self):
        frame = spike_frame(300.0) + spike_frame(600.0)
        estimate = self.analyzer.analyze(frame, SAMPLE_RATE)
        expected_bin = FrameAnalyzer.frequency_to_bin(300.0, BUFFER_LENGTH, SAMPLE_RATE)
        self.assertEqual(estimate.bin_index, expected_bin)

    def test_loudest_bin_wins(self):
        frame = spike_frame(300.0, 150) + spike_frame(600.0, 220)
        estimate = self.analyzer.analyze(frame, SAMPLE_RATE)
        self.assertEqual(str(frequency_to_note(estimate.frequency_hz)), "D5")

    def test_peaks_outside_band_are_ignored(self):
        frame = spike_frame(50.0, 255) + spike_frame(3000.0, 255)
        self.assertTrue(self.analyzer.analyze(frame, SAMPLE_RATE).is_absent)

    def test_band_upper_edge_is_exclusive(self):
        frame = spike_frame(2000.0, 255)
        self.assertTrue(self.analyzer.analyze(frame, SAMPLE_RATE).is_absent)

    def test_custom_band_and_threshold(self):
        analyzer = FrameAnalyzer(min_frequency=30.0, max_frequency=500.0, threshold=10)
        estimate = analyzer.analyze(spike_frame(55.0, 20), SAMPLE_RATE)
        self.assertFalse(estimate.is_absent)
        self.assertEqual(str(frequency_to_note(estimate.frequency_hz)), "A1")

    def test_unusable_frames_are_absent(self):
        self.assertEqual(
            self.analyzer.analyze([], SAMPLE_RATE).status, EstimateStatus.OUT_OF_BAND
        )
        self.assertEqual(
            self.analyzer.analyze(np.ones(16) * 255, 0).status, EstimateStatus.OUT_OF_BAND
        )
        # Four bins at 44.1 kHz are each 5.5 kHz wide, so the band has no bins
        self.assertEqual(
            self.analyzer.analyze(np.ones(4) * 255, SAMPLE_RATE).status,
            EstimateStatus.OUT_OF_BAND,
        )

    def test_accepts_plain_sequences(self):
        frame = [0] * BUFFER_LENGTH
        frame[100] = 200
        estimate = self.analyzer.analyze(frame, SAMPLE_RATE)
        self.assertEqual(estimate.bin_index, 100)

    def test_invalid_band(self):
        with self.assertRaises(ValueError):
            FrameAnalyzer(min_frequency=500, max_frequency=100)


def sine(frequency, amplitude=0.05, length=4096, sample_rate=SAMPLE_RATE):
    t = np.arange(length) / sample_rate
    return amplitude * np.sin(2 * np.pi * frequency * t)


class TestSpectrumAnalyser(unittest.TestCase):
    def test_frame_shape_and_scale(self):
        frame = SpectrumAnalyser().process(sine(440.0))
        self.assertEqual(frame.shape, (2048,))
        self.assertEqual(frame.dtype, np.uint8)

    def test_silence_maps_to_zero(self):
        frame = SpectrumAnalyser().process(np.zeros(4096))
        self.assertEqual(int(frame.max()), 0)

    def test_sine_peaks_at_its_frequency(self):
        frame = SpectrumAnalyser().process(sine(440.0))
        estimate = FrameAnalyzer().analyze(frame, SAMPLE_RATE)
        self.assertFalse(estimate.is_absent)
        self.assertEqual(str(frequency_to_note(estimate.frequency_hz)), "A4")

    def test_quiet_input_stays_below_threshold(self):
        frame = SpectrumAnalyser().process(sine(440.0, amplitude=1e-5))
        self.assertTrue(FrameAnalyzer().analyze(frame, SAMPLE_RATE).is_absent)

    def test_short_blocks_accumulate(self):
        analyser = SpectrumAnalyser(smoothing=0.0)
        signal = sine(440.0, length=8192)
        for start in range(0, 8192, 1024):
            frame = analyser.process(signal[start : start + 1024])
        full = SpectrumAnalyser(smoothing=0.0).process(signal[-4096:])
        np.testing.assert_array_equal(frame, full)

    def test_smoothing_decays_after_silence(self):
        analyser = SpectrumAnalyser()
        loud = analyser.process(sine(440.0))
        quiet = analyser.process(np.zeros(4096))
        self.assertGreater(int(quiet.max()), 0)
        self.assertLess(int(quiet.max()), int(loud.max()))

    def test_reset_clears_history(self):
        analyser = SpectrumAnalyser()
        analyser.process(sine(440.0))
        analyser.reset()
        self.assertEqual(int(analyser.process(np.zeros(1024)).max()), 0)


@pytest.mark.parametrize(
    "fft_size, smoothing", [(1000, 0.5), (16, 0.5), (4096, 1.5)]
)
def test_invalid_spectrum_parameters(fft_size, smoothing):
    with pytest.raises(ValueError):
        SpectrumAnalyser(fft_size=fft_size, smoothing=smoothing)


if __name__ == "__main__":
    unittest.main()
