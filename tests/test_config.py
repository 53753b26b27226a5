from pathlib import Path

from stlconvert.config import STLConvertSettings, get_settings, reset_settings
from stlconvert.models import Encoding


class TestSettings:

    def test_defaults(self):
        settings = STLConvertSettings(_env_file=None)
        assert settings.get_log_level() == "INFO"
        assert settings.output_path(Path("models/cube.stl"), Encoding.BINARY) == Path("models/output-binary/binary-cube.stl")
        assert settings.output_path(Path("models/cube.stl"), Encoding.ASCII) == Path("models/output-ascii/ascii-cube.stl")

    def test_output_dir_overrides_input_folder(self):
        settings = STLConvertSettings(_env_file=None)
        path = settings.output_path(Path("models/cube.stl"), Encoding.ASCII, Path("out"))
        assert path == Path("out/output-ascii/ascii-cube.stl")

    def test_verbose_forces_debug(self):
        assert STLConvertSettings(_env_file=None, verbose=True).get_log_level() == "DEBUG"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("STLCONVERT_BINARY_PREFIX", "bin_")
        monkeypatch.setenv("STLCONVERT_LOG_LEVEL", "warning")
        reset_settings()
        settings = get_settings()
        assert settings.binary_prefix == "bin_"
        assert settings.get_log_level() == "WARNING"

    def test_settings_are_shared(self):
        assert get_settings() is get_settings()
