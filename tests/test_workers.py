from cuboard.controller.segmenter import UnmappedKeyPair
from cuboard.controller.workers import SessionController, TurnFeedWorker
from cuboard.model.turns import Turn


def test_controller_re_emits_sink_events(qapp, illustrative_keymap):
    controller = SessionController(illustrative_keymap, finish_on_newline=False)
    committed, retracted, cleared, unmapped = [], [], [], []
    controller.committed.connect(committed.append)
    controller.retracted.connect(lambda: retracted.append(True))
    controller.cleared.connect(lambda: cleared.append(True))
    controller.unmapped.connect(unmapped.append)

    for token in ("U", "R'", "R", "U'", "R", "L"):
        controller.feed_turn(Turn.parse(token))
    assert committed == ["b"]
    assert retracted == [True]
    assert len(unmapped) == 1
    assert isinstance(unmapped[0], UnmappedKeyPair)

    controller.reset_session()
    assert cleared == [True]
    assert controller.text == ""


def test_controller_forwards_finished_lines(qapp, default_keymap):
    controller = SessionController(default_keymap)
    lines = []
    controller.line_finished.connect(lines.append)
    for token in "U F D2 R'".split():
        controller.feed_turn(Turn.parse(token))
    assert lines == ["f\n"]
    assert controller.text == "f\n"


def test_worker_emits_turns_in_order_and_rejects_bad_ones(qapp, illustrative_keymap):
    controller = SessionController(illustrative_keymap, finish_on_newline=False)
    worker = TurnFeedWorker([(1, "U"), (1, "nope"), (2, "F")])
    turns = []
    worker.turn_ready.connect(turns.append)
    worker.turn_ready.connect(controller.feed_turn)
    worker.turn_rejected.connect(controller.reject_turn)

    # Run synchronously; the threaded path is covered by the CLI test
    worker.run()

    assert turns == [Turn.parse("U"), Turn.parse("F")]
    assert worker.emitted == 2
    assert len(controller.rejected) == 1
    assert "nope" in controller.rejected[0]
    assert controller.text == "a"


def test_stopped_worker_emits_nothing(qapp):
    worker = TurnFeedWorker([(1, "U"), (1, "F")])
    turns = []
    worker.turn_ready.connect(turns.append)
    worker.stop()
    worker.run()
    assert turns == []
