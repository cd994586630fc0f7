import logging

import pytest

from pipehub.core.logger import (
    _ConfigSourceFilter,
    configure_root_logger,
    push_config_source,
    reset_config_source,
)


@pytest.fixture(autouse=True)
def restore_root_handlers():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _record():
    return logging.LogRecord("pipehub.test", logging.INFO, __file__, 1, "msg", None, None)


def test_configure_root_logger_is_idempotent():
    configure_root_logger("INFO")
    configure_root_logger("DEBUG")

    ours = [
        h for h in logging.getLogger().handlers
        if any(isinstance(f, _ConfigSourceFilter) for f in h.filters)
    ]
    assert len(ours) == 1
    assert logging.getLogger("pipehub").level == logging.DEBUG


def test_config_source_is_injected_and_reset():
    token = push_config_source("pipehub.yaml")
    record = _record()
    _ConfigSourceFilter().filter(record)
    assert record.config_source == "pipehub.yaml"

    reset_config_source(token)
    record = _record()
    _ConfigSourceFilter().filter(record)
    assert record.config_source == "-"


def test_push_empty_source_is_noop():
    assert push_config_source(None) is None
    reset_config_source(None)
