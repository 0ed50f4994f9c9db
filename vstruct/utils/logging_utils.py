# Copyright 2025 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
import sys
from typing import Optional


PACKAGE_LOGGER = "vstruct"


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int) -> None:
        super().__init__()
        self._max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self._max_level


def configure_split_stream_logging(
    *,
    level: int = logging.INFO,
    stderr_level: int = logging.WARNING,
    formatter: Optional[logging.Formatter] = None,
    logger_name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """Configure the package logger:

    - records below ``stderr_level`` go to stdout
    - ``stderr_level`` and above go to stderr

    Only the named logger is touched, so embedding applications keep their own
    root configuration. Calling this again replaces the previous handlers.
    """

    logger = logging.getLogger(logger_name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    if formatter is None:
        formatter = logging.Formatter("%(name)s - %(levelname)s - %(message)s")

    if stderr_level < logging.DEBUG:
        stderr_level = logging.DEBUG

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(_MaxLevelFilter(stderr_level - 1))
    stdout_handler.setFormatter(formatter)

    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setLevel(stderr_level)
    stderr_handler.setFormatter(formatter)

    logger.addHandler(stdout_handler)
    logger.addHandler(stderr_handler)
    return logger
