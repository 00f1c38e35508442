# Copyright (c) 2024-2025 Institute of Information Engineering, Chinese Academy of Sciences
#
# DiveFuzz is licensed under Mulan PSL v2.
# You can use this software according to the terms and conditions of the Mulan PSL v2.
# You may obtain a copy of Mulan PSL v2 at:
#          http://license.coscl.org.cn/MulanPSL2
#
# THIS SOFTWARE IS PROVIDED ON AN "AS IS" BASIS, WITHOUT WARRANTIES OF ANY KIND,
# EITHER EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO NON-INFRINGEMENT,
# MERCHANTABILITY OR FIT FOR A PARTICULAR PURPOSE.
#
# See the Mulan PSL v2 for more details.

import logging
import os
import sys
from contextlib import contextmanager

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Parent of every module logger in this package
PACKAGE_LOGGER = "directed_streams"


def setup_logging(log_file=None, level=logging.INFO, console=True):
    """
    Configure global root logger.

    Args:
        log_file (str): Path to the global log file (optional)
        level (int): Logging level
        console (bool): Enable console output
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove all existing handlers to avoid duplicated lines on re-configuration
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(level)
        logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)


@contextmanager
def seed_log_handler(out_dir, seed_idx, level=logging.DEBUG):
    """
    Copy every package log record emitted while generating one seed into
    '<out_dir>/directed_<idx>.log' (context manager).

    Works the same inside a worker process, where the root logger is not
    configured: the handler hangs off the package logger.

    Yields:
        str: log file path
    """
    os.makedirs(out_dir, exist_ok=True)
    log_path = os.path.join(out_dir, f"directed_{seed_idx}.log")

    logger = logging.getLogger(PACKAGE_LOGGER)
    old_level = logger.level
    logger.setLevel(level)

    file_handler = logging.FileHandler(log_path, mode='w')
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    file_handler.setLevel(level)
    logger.addHandler(file_handler)
    try:
        yield log_path
    finally:
        logger.removeHandler(file_handler)
        file_handler.close()
        logger.setLevel(old_level)
