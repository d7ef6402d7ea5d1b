"""Live microphone capture using the sounddevice library."""

from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Optional

import numpy as np

from ..core.interfaces import FrameCallback, ICaptureDevice
from ..errors import CapturePermissionError, UnsupportedEnvironmentError
from ..logger import get_logger
from .spectrum import SpectrumAnalyser

logger = get_logger(__name__)

# Fragments PortAudio backends use when the OS refuses microphone access
_PERMISSION_MARKERS = ("permission", "denied", "not authorized", "not permitted")


def _load_sounddevice():
    """Import sounddevice, which fails at import time without PortAudio."""
    try:
        import sounddevice as sd
    except OSError as e:
        raise UnsupportedEnvironmentError(f"PortAudio is not available: {e}") from e
    return sd


def _translate_error(error: Exception) -> Exception:
    """Map a PortAudio failure onto the package's capture errors."""
    message = str(error)
    if isinstance(error, PermissionError) or any(
        marker in message.lower() for marker in _PERMISSION_MARKERS
    ):
        return CapturePermissionError(f"Microphone access denied: {message}")
    return UnsupportedEnvironmentError(f"Cannot open audio input: {message}")


def list_input_devices() -> List[Dict[str, Any]]:
    """List the devices that can record audio.

    Returns:
        One dict per input device with its ``id``, ``name``, channel count and
        default sample rate

    Raises:
        UnsupportedEnvironmentError: If PortAudio is missing
    """
    sd = _load_sounddevice()
    devices = []
    for device_id, device in enumerate(sd.query_devices()):
        if device["max_input_channels"] > 0:
            devices.append(
                {
                    "id": device_id,
                    "name": device["name"],
                    "channels": device["max_input_channels"],
                    "sample_rate": device["default_samplerate"],
                }
            )
    return devices


class SoundDeviceCapture(ICaptureDevice):
    """Capture device that turns microphone blocks into magnitude frames."""

    # Audio configuration
    SAMPLE_RATE: ClassVar[int] = 44100  # Hz
    BLOCK_SIZE: ClassVar[int] = 1024  # Frames per callback, one analysis frame each
    CHANNELS: ClassVar[int] = 1  # Mono audio

    def __init__(
        self,
        device_id: Optional[int] = None,
        sample_rate: Optional[int] = None,
        block_size: Optional[int] = None,
        channels: Optional[int] = None,
        spectrum: Optional[SpectrumAnalyser] = None,
    ) -> None:
        """Initialize the capture device.

        Args:
            device_id: Audio input device ID, or None for the default input
            sample_rate: Sample rate in Hz, or None for default (44100)
            block_size: Samples per callback, or None for default (1024)
            channels: Number of audio channels, or None for default (1)
            spectrum: Spectrum analyser, or None for a default 4096-point one
        """
        self._device_id = device_id
        self._sample_rate = sample_rate or self.SAMPLE_RATE
        self._block_size = block_size or self.BLOCK_SIZE
        self._channels = channels or self.CHANNELS
        self._spectrum = spectrum or SpectrumAnalyser()

        self._stream = None
        self._on_frame: Optional[FrameCallback] = None

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    def is_open(self) -> bool:
        return self._stream is not None

    def _audio_callback(
        self,
        indata: np.ndarray,
        _frames: int,
        _time_info,
        status,
    ) -> None:
        """Callback for processing audio data from the input stream.

        Note:
            This is called from a separate audio thread, so it should be fast
            and avoid any blocking operations to prevent audio glitches.
        """
        if status:
            logger.warning(f"Audio callback status: {status}")

        on_frame = self._on_frame
        if on_frame is None:
            return

        # Extract mono audio data (take first channel if multi-channel)
        audio_data = indata[:, 0] if indata.ndim > 1 else indata
        on_frame(self._spectrum.process(audio_data), self._sample_rate)

    def open(self, on_frame: FrameCallback) -> None:
        """Open the input stream and start delivering frames.

        Raises:
            CapturePermissionError: If the OS denies microphone access
            UnsupportedEnvironmentError: If there is no usable input device
        """
        if self._stream is not None:
            logger.warning("Audio input already open")
            return

        sd = _load_sounddevice()
        stream = None
        try:
            sd.check_input_settings(
                device=self._device_id,
                channels=self._channels,
                samplerate=self._sample_rate,
            )
            self._spectrum.reset()
            self._on_frame = on_frame
            stream = sd.InputStream(
                device=self._device_id,
                samplerate=self._sample_rate,
                blocksize=self._block_size,
                channels=self._channels,
                dtype="float32",
                callback=self._audio_callback,
            )
            stream.start()
        except (sd.PortAudioError, ValueError, OSError) as e:
            self._on_frame = None
            if stream is not None:
                stream.close()
            error = _translate_error(e)
            logger.error(f"Failed to open audio input: {error}")
            raise error from e

        self._stream = stream
        logger.info(
            f"Audio input opened: device={self._device_id}, rate={self._sample_rate} Hz, "
            f"block={self._block_size}"
        )

    def close(self) -> None:
        """Stop and release the input stream."""
        stream, self._stream = self._stream, None
        self._on_frame = None
        if stream is None:
            return

        try:
            stream.stop()
        except Exception as e:
            logger.error(f"Error stopping audio input: {e}")
        finally:
            stream.close()
        logger.info("Audio input closed")
