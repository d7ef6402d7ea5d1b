import json

import numpy as np
import pytest
import soundfile as sf

from note_sight.audio.file_input import WavFileCapture
from note_sight.core.config import DEFAULT_CONFIGS, ConfigManager, DetectionConfig
from note_sight.core.factory import ComponentFactory
from note_sight.mock_capture import MockCaptureDevice
from note_sight.services.detection_session import DetectionSession


@pytest.fixture
def config_manager(tmp_path):
    return ConfigManager(str(tmp_path))


def test_defaults_are_written(tmp_path, config_manager):
    for name in DEFAULT_CONFIGS:
        assert (tmp_path / f"{name}.json").exists()
    assert config_manager.get_config("detection") == DEFAULT_CONFIGS["detection"]


def test_get_config_returns_copy(config_manager):
    config = config_manager.get_config("detection")
    config["band"][0] = 1.0
    assert config_manager.get_config("detection")["band"][0] == 80.0


def test_update_persists(tmp_path, config_manager):
    assert config_manager.update_config("detection", {"threshold": 50.0})
    reloaded = ConfigManager(str(tmp_path))
    assert reloaded.detection_config().threshold == 50.0


def test_update_unknown_config(config_manager):
    assert not config_manager.update_config("nope", {"a": 1})


def test_reset(tmp_path, config_manager):
    config_manager.update_config("detection", {"threshold": 50.0})
    assert config_manager.reset_config("detection")
    assert ConfigManager(str(tmp_path)).detection_config().threshold == 80.0


def test_missing_keys_are_filled(tmp_path):
    (tmp_path / "detection.json").write_text(json.dumps({"threshold": 10}))
    config = ConfigManager(str(tmp_path)).detection_config()
    assert config.threshold == 10.0
    assert config.band == (80.0, 2000.0)


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_bad_file_falls_back_to_defaults(tmp_path, content):
    (tmp_path / "detection.json").write_text(content)
    config = ConfigManager(str(tmp_path)).detection_config()
    assert config == DetectionConfig()


def test_detection_config_round_trip():
    config = DetectionConfig(band=(40.0, 1000.0), threshold=60.0)
    assert DetectionConfig.from_dict(config.to_dict()) == config


def test_detection_config_partial_reference():
    config = DetectionConfig.from_dict({"reference_pitch": {"freq": 442.0}})
    assert config.reference_note == "A4"
    assert config.reference_frequency == 442.0


def test_detection_config_bad_band():
    with pytest.raises(ValueError):
        DetectionConfig.from_dict({"band": [80.0]})


def test_detection_config_bad_octave_range():
    with pytest.raises(ValueError):
        DetectionConfig.from_dict({"octave_range": [0]})


def test_default_instrument_is_double_bass(config_manager):
    records = config_manager.string_records()
    assert [r["open_note"] for r in records] == ["E1", "A1", "D2", "G2"]


class TestComponentFactory:
    def test_session_from_config(self, config_manager):
        config_manager.update_config("detection", {"threshold": 10.0})
        factory = ComponentFactory(config_manager)
        device = factory.create_capture_device("mock")
        session = factory.create_session(device)

        assert isinstance(device, MockCaptureDevice)
        assert isinstance(session, DetectionSession)
        assert session.capture_device is device
        assert factory.create_frame_analyzer().threshold == 10.0

    def test_unknown_device(self, config_manager):
        with pytest.raises(ValueError):
            ComponentFactory(config_manager).create_capture_device("bluetooth")

    def test_configured_strings(self, config_manager):
        config_manager.update_config(
            "instrument",
            {"name": "bass5", "strings": [{"name": "B", "open_note": "B0"}]},
        )
        fingerboard = ComponentFactory(config_manager).create_fingerboard()
        assert [s.name for s in fingerboard.strings] == ["B"]

    def test_reference_pitch(self, config_manager):
        config_manager.update_config(
            "detection", {"reference_pitch": {"note": "A4", "freq": 432.0}}
        )
        service = ComponentFactory(config_manager).create_frequency_service()
        assert str(service.frequency_to_note(432.0)) == "A4"

    def test_file_device(self, config_manager, tmp_path):
        path = tmp_path / "silence.wav"
        sf.write(str(path), np.zeros(2048, dtype="float32"), 22050)

        device = ComponentFactory(config_manager).create_capture_device(
            "file", file_path=str(path)
        )
        assert isinstance(device, WavFileCapture)
        assert device.sample_rate == 22050

    def test_builtin_instrument_by_name(self, config_manager):
        config_manager.update_config("instrument", {"name": "guitar", "strings": []})
        fingerboard = ComponentFactory(config_manager).create_fingerboard()
        assert [str(s.open_note) for s in fingerboard.strings] == [
            "E2",
            "A2",
            "D3",
            "G3",
            "B3",
            "E4",
        ]

    def test_unknown_instrument(self, config_manager):
        config_manager.update_config("instrument", {"name": "lute", "strings": []})
        with pytest.raises(ValueError):
            ComponentFactory(config_manager).create_fingerboard()

    def test_octave_range(self, config_manager):
        config_manager.update_config("detection", {"octave_range": [2, 6]})
        service = ComponentFactory(config_manager).create_frequency_service()
        assert service.octave_range == (2, 6)
        assert service.frequency_to_note(55.0) is None
        assert str(service.frequency_to_note(65.41)) == "C2"
