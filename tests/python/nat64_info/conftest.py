import logging
import logging.handlers

import pytest


@pytest.fixture
def restore_logging():
    """Remove the handlers installed by 'start_logging()' and reset the root level after the test."""

    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        # pytest's own capture handlers are subclasses, leave them alone
        if type(handler) in (logging.StreamHandler, logging.handlers.SysLogHandler):
            root.removeHandler(handler)
    root.setLevel(level)
