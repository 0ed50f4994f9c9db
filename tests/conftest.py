import dataclasses
import logging

import pytest

from vstruct.config import vstruct_config


@pytest.fixture(autouse=True)
def restore_logging_and_config():
    """The CLI reconfigures the package logger and the global config; undo that."""
    saved_config = dataclasses.asdict(vstruct_config)
    yield
    for key, value in saved_config.items():
        setattr(vstruct_config, key, value)
    logger = logging.getLogger("vstruct")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
