# type: ignore
import logging
import os

import pytest


def init_testsuite_env():
    """Initialize testsuite environment."""
    # Must be set before armtarget.config is used
    os.environ["ARMTARGET_CONFIG"] = "/dev/null"
    os.environ["TZ"] = "UTC"

    import armtarget.log

    # Activate full debug logs
    armtarget.log.activate(level=logging.DEBUG, armtarget_debug=True)


init_testsuite_env()


def added_log_handlers(previous):
    """Return the root handlers added by armtarget.log since previous."""
    from armtarget.log import ColorHandler

    # Exact types, pytest installs its own subclasses
    return [
        handler
        for handler in logging.getLogger().handlers
        if handler not in previous
        and type(handler) in (logging.StreamHandler, logging.FileHandler, ColorHandler)
    ]


@pytest.fixture(autouse=True)
def env_protect(tmp_path, monkeypatch):
    """Run each test in its own directory with a fresh catalogue."""
    from armtarget.catalogue import get_catalogue

    monkeypatch.chdir(tmp_path)
    get_catalogue.cache_clear()
    previous = list(logging.getLogger().handlers)
    yield
    get_catalogue.cache_clear()
    for handler in added_log_handlers(previous):
        logging.getLogger().removeHandler(handler)
        handler.close()


@pytest.fixture
def log_handlers():
    """Return a function listing the handlers added during the test."""
    previous = list(logging.getLogger().handlers)
    return lambda: added_log_handlers(previous)
