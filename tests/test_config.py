"""Tests for configuration loading."""

import pytest
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from midilink.config import MidiConfig, load_config
from midilink.errors import ConfigurationError


@pytest.fixture
def config_file(tmp_path):
    """Return path to a complete config file."""
    path = tmp_path / "midilink.ini"
    path.write_text(
        "[midi]\n"
        "backend = virtual\n"
        "workers = 4\n"
        "input = keystation\n"
        "output = fluid\n"
        "channel = 9\n"
        "velocity = 80\n"
    )
    return path


class TestLoadConfig:
    """Test cases for load_config()."""

    def test_defaults(self):
        """Test that no file and no environment gives defaults."""
        config = load_config(environ={})

        assert config == MidiConfig()
        assert config.workers == 10
        assert config.backend == "mido"

    def test_file(self, config_file):
        """Test reading every setting from a file."""
        config = load_config(config_file, environ={})

        assert config.backend == "virtual"
        assert config.workers == 4
        assert config.input == "keystation"
        assert config.output == "fluid"
        assert config.channel == 9
        assert config.velocity == 80

    def test_path_from_environment(self, config_file):
        """Test MIDILINK_CONFIG."""
        config = load_config(environ={"MIDILINK_CONFIG": str(config_file)})
        assert config.output == "fluid"

    def test_environment_overrides_file(self, config_file):
        """Test that MIDILINK_* variables win over the file."""
        config = load_config(
            config_file, environ={"MIDILINK_OUTPUT": "qy70", "MIDILINK_WORKERS": "2"}
        )

        assert config.output == "qy70"
        assert config.workers == 2
        assert config.input == "keystation"

    def test_unrelated_variables_ignored(self):
        """Test that unknown MIDILINK_* names are ignored."""
        config = load_config(environ={"MIDILINK_COLOUR": "blue", "HOME": "/root"})
        assert config == MidiConfig()

    def test_missing_file(self, tmp_path, caplog):
        """Test that a missing file means defaults and a warning."""
        config = load_config(tmp_path / "nope.ini", environ={})

        assert config == MidiConfig()
        assert "not found" in caplog.text

    def test_file_without_section(self, tmp_path):
        """Test a file lacking the [midi] section."""
        path = tmp_path / "other.ini"
        path.write_text("[other]\nworkers = 3\n")

        assert load_config(path, environ={}).workers == 10

    def test_unparsable_file(self, tmp_path):
        """Test that a broken file raises ConfigurationError."""
        path = tmp_path / "broken.ini"
        path.write_text("workers = 3\n")

        with pytest.raises(ConfigurationError):
            load_config(path, environ={})

    @pytest.mark.parametrize(
        "name,value",
        [
            ("MIDILINK_WORKERS", "0"),
            ("MIDILINK_WORKERS", "many"),
            ("MIDILINK_CHANNEL", "16"),
            ("MIDILINK_VELOCITY", "128"),
        ],
    )
    def test_invalid_values(self, name, value):
        """Test values that fail validation."""
        with pytest.raises(ConfigurationError):
            load_config(environ={name: value})
