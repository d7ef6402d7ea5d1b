"""Capture device that plays a sound file through the analysis pipeline."""

import threading
import time
from typing import Optional

import numpy as np
import soundfile as sf

from ..core.interfaces import FrameCallback, ICaptureDevice
from ..errors import UnsupportedEnvironmentError
from ..logger import get_logger
from .spectrum import SpectrumAnalyser

logger = get_logger(__name__)


class WavFileCapture(ICaptureDevice):
    """Reads audio from a WAV file and delivers magnitude frames from a thread."""

    def __init__(
        self,
        file_path: str,
        chunk_size: int = 1024,
        loop: bool = False,
        gain: float = 1.0,
        realtime: bool = True,
        spectrum: Optional[SpectrumAnalyser] = None,
    ):
        """Initialize the file capture.

        Args:
            file_path: Path of a file libsndfile can read
            chunk_size: Samples per delivered frame
            loop: Restart from the beginning at the end of the file
            gain: Linear gain applied to the samples
            realtime: Sleep between chunks to simulate live input

        Raises:
            UnsupportedEnvironmentError: If the file cannot be read
        """
        self._file_path = file_path
        self._chunk_size = chunk_size
        self._loop = loop
        self._gain = gain
        self._realtime = realtime
        self._spectrum = spectrum or SpectrumAnalyser()
        self._on_frame: Optional[FrameCallback] = None
        self._is_running = False
        self._thread: Optional[threading.Thread] = None
        self._finished = threading.Event()

        try:
            info = sf.info(self._file_path)
        except (sf.LibsndfileError, RuntimeError, OSError) as e:
            raise UnsupportedEnvironmentError(
                f"Cannot read audio file {self._file_path}: {e}"
            ) from e
        self._sample_rate = info.samplerate
        self._channels = info.channels

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def finished(self) -> bool:
        """True once a non-looping file has been read to the end."""
        return self._finished.is_set()

    def wait_finished(self, timeout: Optional[float] = None) -> bool:
        return self._finished.wait(timeout)

    def is_open(self) -> bool:
        return self._is_running

    def open(self, on_frame: FrameCallback) -> None:
        if self._is_running:
            return

        # A reader that reached the end of the file may still be exiting
        previous = self._thread
        if previous and previous is not threading.current_thread():
            previous.join()

        self._on_frame = on_frame
        self._spectrum.reset()
        self._finished.clear()
        self._is_running = True
        self._thread = threading.Thread(
            target=self._stream_data, name="wav-capture", daemon=True
        )
        self._thread.start()
        logger.info(f"Streaming {self._file_path} at {self._sample_rate} Hz")

    def close(self) -> None:
        self._is_running = False
        thread, self._thread = self._thread, None
        if thread and thread is not threading.current_thread():
            thread.join()
        self._on_frame = None

    def _stream_data(self) -> None:
        try:
            with sf.SoundFile(self._file_path) as f:
                while self._is_running:
                    data = f.read(self._chunk_size, dtype="float32", always_2d=True)
                    if len(data) == 0:
                        if self._loop:
                            f.seek(0)
                            continue
                        break

                    # Mix down to mono
                    mono = data.mean(axis=1) if data.shape[1] > 1 else data[:, 0]
                    if self._gain != 1.0:
                        mono = mono * self._gain

                    frame = self._spectrum.process(np.asarray(mono))
                    on_frame = self._on_frame
                    if not self._is_running or on_frame is None:
                        break
                    on_frame(frame, self._sample_rate)

                    # Simulate real-time playback speed
                    if self._realtime:
                        time.sleep(self._chunk_size / self._sample_rate)
        except (sf.LibsndfileError, RuntimeError) as e:
            logger.error(f"Error streaming audio file {self._file_path}: {e}")
        finally:
            self._is_running = False
            self._finished.set()
