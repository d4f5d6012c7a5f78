"""Tests for the midilink command line."""

import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cli.app import app
from midilink import __version__
from midilink.devices import get_backend


runner = CliRunner()


@pytest.fixture
def loopback():
    """Return the shared virtual loopback device, history cleared."""
    device = get_backend("virtual").list_devices()[0]
    device.history.clear()
    return device


class TestCli:
    """Test cases for CLI commands on the virtual backend."""

    def test_version(self):
        """Test the version command."""
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_ports(self):
        """Test listing the virtual loopback."""
        result = runner.invoke(app, ["--backend", "virtual", "ports"])

        assert result.exit_code == 0
        assert "loopback" in result.output

    def test_unknown_backend(self):
        """Test that an unknown backend is reported."""
        result = runner.invoke(app, ["--backend", "jack", "ports"])

        assert result.exit_code == 1

    def test_note(self, loopback):
        """Test playing one note."""
        result = runner.invoke(
            app, ["--backend", "virtual", "note", "60", "--port", "loopback", "-d", "10"]
        )

        assert result.exit_code == 0, result.output
        assert loopback.sent_messages() == [bytes([0x90, 0x3C, 0x64]), bytes([0x80, 0x3C, 0x00])]

    def test_play(self, loopback):
        """Test playing a sequence."""
        result = runner.invoke(
            app,
            ["--backend", "virtual", "play", "60,64", "-p", "loopback", "-d", "10,10", "-c", "1"],
        )

        assert result.exit_code == 0, result.output
        sent = loopback.sent_messages()
        assert len(sent) == 4
        assert sent[0] == bytes([0x91, 0x3C, 0x64])

    def test_play_length_mismatch(self, loopback):
        """Test that the CLI refuses mismatched lists."""
        result = runner.invoke(
            app, ["--backend", "virtual", "play", "60,64", "-p", "loopback", "-d", "10"]
        )

        assert result.exit_code == 1
        assert loopback.sent_messages() == []

    def test_sysex(self, loopback):
        """Test sending hex data."""
        result = runner.invoke(
            app, ["--backend", "virtual", "sysex", "f0 7e 7f 09 01 f7", "-p", "loopback"]
        )

        assert result.exit_code == 0, result.output
        assert loopback.sent_messages() == [bytes([0xF0, 0x7E, 0x7F, 0x09, 0x01, 0xF7])]

    def test_sysex_file(self, loopback, tmp_path):
        """Test sending every message in a .syx file."""
        path = tmp_path / "bulk.syx"
        path.write_bytes(bytes([0xF0, 0x43, 0xF7, 0xF0, 0x7E, 0xF7]))

        result = runner.invoke(
            app, ["--backend", "virtual", "sysex", "--file", str(path), "-p", "loopback"]
        )

        assert result.exit_code == 0, result.output
        assert loopback.sent_messages() == [bytes([0xF0, 0x43, 0xF7]), bytes([0xF0, 0x7E, 0xF7])]

    def test_sysex_dry_run(self, loopback):
        """Test showing data without sending it."""
        result = runner.invoke(app, ["--backend", "virtual", "sysex", "F0 43 F7", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "F0" in result.output
        assert loopback.sent_messages() == []

    def test_sysex_bad_hex(self, loopback):
        """Test that malformed hex is reported."""
        result = runner.invoke(app, ["--backend", "virtual", "sysex", "F0 4", "-p", "loopback"])

        assert result.exit_code == 1
        assert loopback.sent_messages() == []

    def test_missing_port(self):
        """Test that an unmatched output pattern is reported."""
        result = runner.invoke(app, ["--backend", "virtual", "note", "60", "-p", "nonexistent"])

        assert result.exit_code == 1

    def test_monitor(self):
        """Test that monitor stops after its timeout."""
        result = runner.invoke(
            app, ["--backend", "virtual", "monitor", "loopback", "--timeout", "0.1"]
        )

        assert result.exit_code == 0, result.output
        assert "Total messages received: 0" in result.output

    def test_route_stops_after_duration(self, loopback):
        """Test that route installs and removes its forwarding."""
        result = runner.invoke(
            app,
            ["--backend", "virtual", "route", "loopback", "loopback", "--duration", "0.1"],
        )

        assert result.exit_code == 0, result.output
        assert "Routing" in result.output
        assert loopback.history == []
        assert loopback._receiver is None


class FakeOutputPort:
    """Stand-in for a mido output port."""

    def __init__(self, name):
        self.name = name
        self.sent = []

    def send(self, message):
        self.sent.append(message)

    def close(self):
        pass


@pytest.fixture
def mido_ports(monkeypatch):
    """Patch mido so one output port exists; returns the opened ports."""
    import mido

    opened = []

    def open_output(name, **kwargs):
        port = FakeOutputPort(name)
        opened.append(port)
        return port

    monkeypatch.setattr(mido, "get_input_names", lambda: [])
    monkeypatch.setattr(mido, "get_output_names", lambda: ["FLUID Synth"])
    monkeypatch.setattr(mido, "open_output", open_output)
    return opened


class TestCliMido:
    """Test cases for CLI commands on the mido backend."""

    def test_ports(self, mido_ports):
        """Test listing mido ports."""
        result = runner.invoke(app, ["--backend", "mido", "ports"])

        assert result.exit_code == 0, result.output
        assert "FLUID Synth" in result.output

    def test_sysex(self, mido_ports):
        """Test sending framed sysex to a mido port."""
        result = runner.invoke(
            app, ["--backend", "mido", "sysex", "F0 7E 7F 09 01 F7", "-p", "fluid"]
        )

        assert result.exit_code == 0, result.output
        assert mido_ports[0].sent[0].bytes() == [0xF0, 0x7E, 0x7F, 0x09, 0x01, 0xF7]

    def test_unframed_sysex_reported(self, mido_ports):
        """Test that bytes mido rejects give an error, not a traceback."""
        result = runner.invoke(app, ["--backend", "mido", "sysex", "43 10", "-p", "fluid"])

        assert result.exit_code == 1
        assert not isinstance(result.exception, ValueError)
        assert mido_ports[0].sent == []
