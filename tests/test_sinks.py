import pytest

from cuboard.controller.segmenter import Commit, LineFinished, Reset, Retract, UnmappedKeyPair
from cuboard.controller.sinks import EventRecorder, TextBuffer, deliver
from cuboard.model.errors import RetractUnderflowError
from cuboard.model.keymap import SlotClass


def test_text_buffer_commit_and_retract():
    buffer = TextBuffer()
    deliver(buffer, [Commit("h"), Commit("i"), Retract(), Commit("o")])
    assert buffer.text == "ho"


def test_retract_on_empty_buffer_is_fatal():
    buffer = TextBuffer()
    with pytest.raises(RetractUnderflowError):
        buffer.retract()


def test_finished_line_cannot_be_retracted():
    buffer = TextBuffer()
    deliver(buffer, [Commit("a"), Commit("\n"), LineFinished("a\n")])
    assert buffer.lines == ["a\n"]
    with pytest.raises(RetractUnderflowError):
        buffer.retract()


def test_reset_clears_everything():
    buffer = TextBuffer()
    deliver(buffer, [Commit("a"), LineFinished("a"), Commit("b"), Reset()])
    assert buffer.text == ""
    assert buffer.lines == []


def test_unmapped_reports_are_collected():
    report = UnmappedKeyPair(SlotClass.parse("R"), SlotClass.parse("L"), 3)
    buffer = TextBuffer()
    deliver(buffer, [report])
    assert buffer.unmapped == [report]
    assert buffer.text == ""


def test_recorder_trace():
    recorder = EventRecorder()
    report = UnmappedKeyPair(SlotClass.parse("R"), SlotClass.parse("L"), 0)
    deliver(recorder, [Commit("a"), Retract(), report, LineFinished("x"), Reset()])
    assert recorder.trace() == [
        "commit 'a'",
        "retract",
        "unmapped key #0: R L",
        "line 'x'",
        "reset",
    ]


def test_deliver_rejects_unknown_events():
    with pytest.raises(TypeError):
        deliver(EventRecorder(), ["commit"])
