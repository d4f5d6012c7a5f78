"""Test configuration and fixtures."""

import sys
import threading
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from midilink.devices.base import MidiInput, MidiOutput
from midilink.devices.virtual import VirtualBackend, VirtualDevice
from midilink.scheduler.pool import SchedulerPool


class RecordingSink:
    """Stand-in output endpoint that records what it is sent."""

    name = "recording sink"

    def __init__(self):
        self.messages = []
        self._lock = threading.Lock()

    def send(self, message, timestamp=-1):
        with self._lock:
            self.messages.append((bytes(message), timestamp))

    def sent(self):
        with self._lock:
            return [message for message, _ in self.messages]


class RecordingScheduler:
    """Scheduler that records submissions instead of running them."""

    def __init__(self):
        self.calls = []
        self.references = []

    def after(self, delay_ms, callback, reference=None):
        self.calls.append((delay_ms, callback))
        self.references.append(reference)
        return callback

    def run_all(self):
        """Run every recorded callback, including ones they submit."""
        i = 0
        while i < len(self.calls):
            self.calls[i][1]()
            i += 1


@pytest.fixture
def keyboard_device():
    """Return a virtual device named like a hardware keyboard."""
    return VirtualDevice("Keystation 49 MIDI 1", "USB keyboard controller")


@pytest.fixture
def synth_device():
    """Return a virtual device named like a synthesizer."""
    return VirtualDevice("FLUID Synth (1234)", "Software synthesizer port")


@pytest.fixture
def backend(keyboard_device, synth_device):
    """Return a virtual backend holding the keyboard and the synth."""
    return VirtualBackend([keyboard_device, synth_device])


@pytest.fixture
def keyboard(keyboard_device):
    """Return the keyboard opened as an input endpoint."""
    keyboard_device.open()
    yield MidiInput(keyboard_device)
    keyboard_device.close()


@pytest.fixture
def synth(synth_device):
    """Return the synth opened as an output endpoint."""
    synth_device.open()
    yield MidiOutput(synth_device)
    synth_device.close()


@pytest.fixture
def sink():
    """Return a recording sink."""
    return RecordingSink()


@pytest.fixture
def recording_scheduler():
    """Return a scheduler that only records submissions."""
    return RecordingScheduler()


@pytest.fixture
def pool():
    """Return a private scheduler pool, shut down after the test."""
    p = SchedulerPool(num_workers=4, name="test-pool")
    yield p
    p.shutdown()
