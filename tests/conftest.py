import logging

import pytest
from PySide6.QtCore import QCoreApplication

from cuboard.controller.session import TypingSession
from cuboard.controller.sinks import EventRecorder
from cuboard.model.keymap import Keymap, load_default_keymap


@pytest.fixture
def illustrative_keymap():
    """Two entries: U then F types 'a', U then R' types 'b'."""
    return Keymap.from_entries([("U", "F", "a"), ("U", "R'", "b")], name="illustrative")


@pytest.fixture(scope="session")
def default_keymap():
    return load_default_keymap()


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def session(illustrative_keymap, recorder):
    return TypingSession(illustrative_keymap, sink=recorder, finish_on_newline=False)


@pytest.fixture(scope="session")
def qapp():
    return QCoreApplication.instance() or QCoreApplication([])


@pytest.fixture(autouse=True)
def _detach_cuboard_log_handlers():
    """setup_logging binds handlers to the current stderr; drop them between tests."""
    yield
    logger = logging.getLogger("cuboard")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
