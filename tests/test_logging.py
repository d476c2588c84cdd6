import logging

import pytest

from teamfights.core.logging import PACKAGE_LOGGER, log_timing, setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def test_setup_logging_writes_file(tmp_path, package_logger):
    log_file = tmp_path / "logs" / "tick.log"
    setup_logging(level="debug", log_file=log_file, format_style="simple")
    logging.getLogger("teamfights.cycle.machine").info("batch 1 done")
    for handler in package_logger.handlers:
        handler.flush()
    assert package_logger.level == logging.DEBUG
    assert "INFO: batch 1 done" in log_file.read_text()


def test_log_timing_reraises(package_logger):
    setup_logging(format_style="simple")
    with pytest.raises(RuntimeError):
        with log_timing(package_logger, "batch 3/4"):
            raise RuntimeError("boom")
