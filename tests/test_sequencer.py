"""Tests for note playback."""

import pytest
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from midilink import sequencer as sequencer_module
from midilink.errors import MalformedInputError
from midilink.models.sysex import Binary, HexString, SysexPayload
from midilink.sequencer import Sequencer


NOTE_ON_C4 = bytes([0x90, 0x3C, 0x64])
NOTE_OFF_C4 = bytes([0x80, 0x3C, 0x00])


class TestImmediateMessages:
    """Test cases for messages sent right away."""

    def test_note_on(self, sink, recording_scheduler):
        """Test note-on bytes."""
        Sequencer(recording_scheduler).note_on(sink, 60, 100, channel=2)
        assert sink.sent() == [bytes([0x92, 0x3C, 0x64])]

    def test_note_off_uses_zero_velocity(self, sink, recording_scheduler):
        """Test note-off bytes."""
        Sequencer(recording_scheduler).note_off(sink, 60)
        assert sink.sent() == [NOTE_OFF_C4]

    def test_control(self, sink, recording_scheduler):
        """Test control change bytes."""
        Sequencer(recording_scheduler).control(sink, 7, 90, channel=15)
        assert sink.sent() == [bytes([0xBF, 0x07, 0x5A])]

    def test_sent_asap(self, sink, recording_scheduler):
        """Test that immediate messages carry the ASAP timestamp."""
        Sequencer(recording_scheduler).note_on(sink, 60, 100)
        assert sink.messages[0][1] == -1

    def test_out_of_range_rejected(self, sink, recording_scheduler):
        """Test that invalid values are not sent."""
        seq = Sequencer(recording_scheduler)
        with pytest.raises(MalformedInputError):
            seq.note_on(sink, 128, 100)
        with pytest.raises(MalformedInputError):
            seq.control(sink, 7, 90, channel=16)
        assert sink.sent() == []


class TestSysex:
    """Test cases for sysex output."""

    def test_hex_string(self, sink, recording_scheduler):
        """Test sending a HexString."""
        payload = Sequencer(recording_scheduler).sysex(sink, HexString("f0 7e 7f 09 01 f7"))

        assert sink.sent() == [bytes([0xF0, 0x7E, 0x7F, 0x09, 0x01, 0xF7])]
        assert payload.is_framed

    def test_binary(self, sink, recording_scheduler):
        """Test sending a Binary with signed bytes."""
        Sequencer(recording_scheduler).sysex(sink, Binary([-16, 0x43, -9]))
        assert sink.sent() == [bytes([0xF0, 0x43, 0xF7])]

    def test_unframed_sent_verbatim(self, sink, recording_scheduler, caplog):
        """Test that unframed data is sent as given, with a warning."""
        Sequencer(recording_scheduler).sysex(sink, SysexPayload(b"\x43\x10"))

        assert sink.sent() == [b"\x43\x10"]
        assert "not framed" in caplog.text

    def test_malformed_not_sent(self, sink, recording_scheduler):
        """Test that parse errors stop the send."""
        with pytest.raises(MalformedInputError):
            Sequencer(recording_scheduler).sysex(sink, HexString("F0 7"))
        assert sink.sent() == []


class TestNote:
    """Test cases for single notes."""

    def test_note_schedules_off(self, sink, recording_scheduler):
        """Test that note() sends note-on and schedules note-off."""
        Sequencer(recording_scheduler).note(sink, 60, 100, 500)

        assert sink.sent() == [NOTE_ON_C4]
        assert [delay for delay, _ in recording_scheduler.calls] == [500]

        recording_scheduler.run_all()
        assert sink.sent() == [NOTE_ON_C4, NOTE_OFF_C4]

    def test_note_on_real_pool(self, sink, pool):
        """Test a note played through a real pool."""
        task = Sequencer(pool).note(sink, 60, 100, 20)

        assert task.wait(timeout=2)
        assert sink.sent() == [NOTE_ON_C4, NOTE_OFF_C4]


class TestPlay:
    """Test cases for note sequences."""

    def test_start_delays_are_cumulative(self, sink, recording_scheduler):
        """Test that notes start at the running sum of durations."""
        Sequencer(recording_scheduler).play(sink, [60, 64, 67], [100, 100, 100], [200, 300, 250])

        assert [delay for delay, _ in recording_scheduler.calls] == [0, 200, 500]
        assert sink.sent() == []

    def test_each_note_schedules_its_off(self, sink, recording_scheduler):
        """Test the messages produced once every task has run."""
        Sequencer(recording_scheduler).play(sink, [60, 64], [100, 80], [200, 300], channel=1)
        recording_scheduler.run_all()

        assert [delay for delay, _ in recording_scheduler.calls] == [0, 200, 200, 300]
        assert sink.sent() == [
            bytes([0x91, 0x3C, 0x64]),
            bytes([0x91, 0x40, 0x50]),
            bytes([0x81, 0x3C, 0x00]),
            bytes([0x81, 0x40, 0x00]),
        ]

    def test_single_reference_instant(self, sink, recording_scheduler):
        """Test that every start is measured from the same instant."""
        Sequencer(recording_scheduler).play(sink, [60, 64, 67], [100, 100, 100], [200, 300, 250])

        references = recording_scheduler.references
        assert len(references) == 3
        assert references[0] is not None
        assert len(set(references)) == 1

    def test_real_pool_offsets_share_reference(self, sink, pool):
        """Test fire times on a real pool are exact offsets from one instant."""
        tasks = Sequencer(pool).play(sink, [60, 64, 67], [100, 100, 100], [20, 30, 25])

        assert len({task.submitted_at for task in tasks}) == 1
        base = tasks[0].fire_at
        assert [task.fire_at - base for task in tasks] == pytest.approx([0.0, 0.02, 0.05])
        assert pool.wait_idle(timeout=2)

    def test_truncates_to_shortest(self, sink, recording_scheduler):
        """Test that mismatched lengths play the common prefix."""
        tasks = Sequencer(recording_scheduler).play(
            sink, [60, 64, 67, 72], [100, 100], [200, 300, 250]
        )

        assert len(tasks) == 2
        assert [delay for delay, _ in recording_scheduler.calls] == [0, 200]

    def test_strict_rejects_mismatch(self, sink, recording_scheduler):
        """Test strict mode."""
        with pytest.raises(MalformedInputError, match="lengths differ"):
            Sequencer(recording_scheduler).play(
                sink, [60, 64, 67], [100, 100], [200, 300, 250], strict=True
            )
        assert recording_scheduler.calls == []

    def test_invalid_note_rejected_before_scheduling(self, sink, recording_scheduler):
        """Test that nothing is scheduled when a value is out of range."""
        with pytest.raises(MalformedInputError):
            Sequencer(recording_scheduler).play(sink, [60, 200], [100, 100], [100, 100])
        assert recording_scheduler.calls == []

    def test_empty_sequence(self, sink, recording_scheduler):
        """Test that empty input schedules nothing."""
        assert Sequencer(recording_scheduler).play(sink, [], [], []) == []

    def test_play_real_pool(self, sink, pool):
        """Test a short arpeggio through a real pool."""
        Sequencer(pool).play(sink, [60, 64, 67], [100, 100, 100], [20, 20, 20])

        assert pool.wait_idle(timeout=2)
        sent = sink.sent()
        assert len(sent) == 6
        assert sent[0] == NOTE_ON_C4
        assert sorted(m for m in sent if m[0] == 0x80) == [
            bytes([0x80, 0x3C, 0x00]),
            bytes([0x80, 0x40, 0x00]),
            bytes([0x80, 0x43, 0x00]),
        ]


class TestModuleFunctions:
    """Test cases for the module-level shortcuts."""

    def test_shortcuts_use_default_sequencer(self, sink, recording_scheduler, monkeypatch):
        """Test that module functions delegate to the default sequencer."""
        monkeypatch.setattr(sequencer_module, "_default_sequencer", Sequencer(recording_scheduler))

        sequencer_module.note_on(sink, 60, 100)
        sequencer_module.control(sink, 7, 90)
        sequencer_module.note(sink, 60, 100, 250)
        sequencer_module.play(sink, [60], [100], [100])

        assert sink.sent()[:2] == [NOTE_ON_C4, bytes([0xB0, 0x07, 0x5A])]
        assert [delay for delay, _ in recording_scheduler.calls] == [250, 0]
