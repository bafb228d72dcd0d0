import pytest

from cuboard.controller.segmenter import Commit, LineFinished, Reset, Retract, UnmappedKeyPair
from cuboard.controller.session import TypingSession
from cuboard.controller.sinks import EventRecorder, TextBuffer
from cuboard.model.errors import InvalidTurnError
from cuboard.model.keymap import Keymap


def test_reset_emits_a_single_event(session, recorder):
    session.feed_notation("U F")
    session.feed_notation("R'")
    session.feed_notation("U'")
    assert session.committed_text == "a"
    recorder.clear()

    session.reset()
    assert recorder.events == [Reset()]
    assert not session.path
    assert session.emitted_count == 0
    assert session.pending == ""


def test_reset_after_a_word_is_still_a_single_event(default_keymap):
    recorder = EventRecorder()
    session = TypingSession(default_keymap, sink=recorder)
    session.feed_notation("L U B U R U F U")
    assert session.committed_text == "duck"
    recorder.clear()

    session.reset()
    assert recorder.events == [Reset()]
    assert Retract() not in recorder.events
    assert session.committed_text == ""


def test_session_is_usable_after_reset(session, recorder):
    session.feed_notation("U F")
    session.reset()
    session.feed_notation("U R'")
    assert recorder.events == [Commit("a"), Reset(), Commit("b")]


def test_feed_move_validates_at_the_boundary(session):
    with pytest.raises(InvalidTurnError):
        session.feed_move("U", 0)
    with pytest.raises(InvalidTurnError):
        session.feed_move("X", 1)
    assert not session.path
    assert session.turn_count == 0


def test_feed_notation_is_all_or_nothing(session):
    with pytest.raises(InvalidTurnError):
        session.feed_notation("U F Z")
    assert not session.path


def test_default_sink_is_a_text_buffer(illustrative_keymap):
    session = TypingSession(illustrative_keymap)
    session.feed_notation("U F")
    assert isinstance(session.sink, TextBuffer)
    assert session.sink.text == "a"


def test_typing_a_word_with_the_default_keymap(default_keymap):
    buffer = TextBuffer()
    session = TypingSession(default_keymap, sink=buffer)
    session.feed_notation("L U B U R U F U")
    assert buffer.text == "duck"

    # Undo the last key by turning back
    session.feed_notation("U'")
    assert buffer.text == "duc"
    assert session.pending == "F"
    session.feed_notation("F' B U")
    assert buffer.text == "duc" + "u"


def test_newline_finishes_the_line(default_keymap):
    recorder = EventRecorder()
    session = TypingSession(default_keymap, sink=recorder)
    events = session.feed_notation("U F R F D F L F D2 R'")

    assert events[-2:] == [Commit("\n"), LineFinished("flow\n")]
    assert not session.path
    assert session.emitted_count == 0

    # The finished line cannot be undone any more
    events = session.feed_notation("R D2'")
    assert Retract() not in events
    assert [type(event) for event in events] == [UnmappedKeyPair]
    assert recorder.events[-1] == events[0]


def test_finished_text_lands_in_the_buffer(default_keymap):
    buffer = TextBuffer()
    session = TypingSession(default_keymap, sink=buffer)
    session.feed_notation("U F R F D F L F D2 R' L U")
    assert buffer.lines == ["flow\n"]
    assert buffer.current == "d"
    assert buffer.text == "flow\nd"


def test_newline_without_finishing(default_keymap):
    buffer = TextBuffer()
    session = TypingSession(default_keymap, sink=buffer, finish_on_newline=False)
    session.feed_notation("U F D2 R'")
    session.feed_notation("R D2'")
    assert buffer.text == "f"
    assert buffer.lines == []


def test_finish_keeps_the_pending_slot(recorder):
    keymap = Keymap.from_entries([("F", "U", "c")])
    session = TypingSession(keymap, sink=recorder, finish_on_newline=False)
    session.feed_notation("F U D")
    assert session.pending == "D"

    assert session.finish() == LineFinished("c")
    assert session.path.notation() == "D"
    assert session.pending == "D"
    assert session.emitted_count == 0

    # The dropped pole is gone; U' now pairs with the pending D
    events = session.feed_notation("U'")
    assert len(events) == 1
    assert session.path.notation() == "D U'"


def test_independent_sessions_do_not_interact(illustrative_keymap):
    first = TypingSession(illustrative_keymap)
    second = TypingSession(illustrative_keymap)
    first.feed_notation("U F")
    second.feed_notation("U")
    assert first.committed_text == "a"
    assert second.committed_text == ""
    assert second.pending == "U"
