"""Factory for creating Note Sight components."""

from typing import Dict, Optional, Type

from ..audio.audio_input import SoundDeviceCapture
from ..audio.file_input import WavFileCapture
from ..audio.spectrum import SpectrumAnalyser
from ..detection.frame_analyzer import FrameAnalyzer
from ..display import NoteDisplay
from ..instruments.fingerboard import FingerboardMapper
from ..instruments.keyboard import KeyboardMapper
from ..instruments.tunings import INSTRUMENTS, strings_from_config
from ..logger import get_logger
from ..mock_capture import MockCaptureDevice
from ..services.detection_session import DetectionSession
from ..services.frequency import FrequencyService
from .config import ConfigManager, DetectionConfig
from .interfaces import ICaptureDevice

logger = get_logger(__name__)


class ComponentFactory:
    """Factory for creating Note Sight components."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

        # Register capture device implementations
        self.capture_device_classes: Dict[str, Type[ICaptureDevice]] = {
            "live": SoundDeviceCapture,
            "file": WavFileCapture,
            "mock": MockCaptureDevice,
        }

    @property
    def detection_config(self) -> DetectionConfig:
        return self.config_manager.detection_config()

    def create_spectrum_analyser(self) -> SpectrumAnalyser:
        config = self.detection_config
        return SpectrumAnalyser(fft_size=config.fft_size, smoothing=config.smoothing)

    def create_frame_analyzer(self) -> FrameAnalyzer:
        config = self.detection_config
        return FrameAnalyzer(
            min_frequency=config.band[0],
            max_frequency=config.band[1],
            threshold=config.threshold,
        )

    def create_frequency_service(self) -> FrequencyService:
        config = self.detection_config
        return FrequencyService(
            reference_note=config.reference_note,
            reference_frequency=config.reference_frequency,
            octave_range=config.octave_range,
        )

    def create_keyboard(self) -> KeyboardMapper:
        return KeyboardMapper(self.detection_config.keyboard_octaves)

    def create_fingerboard(self) -> FingerboardMapper:
        """Fingerboard from the configured strings, or a built-in tuning by name.

        Raises:
            ValueError: If no strings are configured and the name is unknown
        """
        records = self.config_manager.string_records()
        if records:
            return FingerboardMapper(strings_from_config(records))

        name = self.config_manager.get_config("instrument").get("name", "double_bass")
        if name not in INSTRUMENTS:
            raise ValueError(f"Unknown instrument: {name}")
        return FingerboardMapper(INSTRUMENTS[name])

    def create_display(self) -> NoteDisplay:
        return NoteDisplay(
            keyboard=self.create_keyboard(),
            fingerboard=self.create_fingerboard(),
            staff_shift=self.detection_config.staff_shift,
        )

    def create_capture_device(
        self, implementation: str = "live", **kwargs
    ) -> ICaptureDevice:
        """Create a capture device.

        Args:
            implementation: Name of the implementation to use
            **kwargs: Additional parameters to pass to the constructor

        Returns:
            Capture device instance

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.capture_device_classes:
            raise ValueError(f"Unknown capture device implementation: {implementation}")

        config = self.detection_config
        if implementation == "live":
            kwargs.setdefault("sample_rate", config.sample_rate)
            kwargs.setdefault("block_size", config.block_size)
        if implementation in ("live", "file"):
            kwargs.setdefault("spectrum", self.create_spectrum_analyser())
        if implementation == "file":
            kwargs.setdefault("chunk_size", config.block_size)

        cls = self.capture_device_classes[implementation]
        instance = cls(**kwargs)

        logger.info(f"Created capture device: {implementation}")
        return instance

    def create_session(
        self, capture_device: Optional[ICaptureDevice] = None
    ) -> DetectionSession:
        """Create a detection session wired from the current configuration.

        Args:
            capture_device: Capture device, or None to create a live one
        """
        session = DetectionSession(
            capture_device=capture_device or self.create_capture_device(),
            analyzer=self.create_frame_analyzer(),
            frequency_service=self.create_frequency_service(),
            display=self.create_display(),
        )
        logger.info("Created detection session")
        return session
