"""Mini README: Tests for the shared logging helpers."""

from __future__ import annotations

import logging

from fundtracker.logging_utils import configure_root_logger, get_logger, level_for_environment


def test_get_logger_keeps_an_explicit_debug_level() -> None:
    root_logger = logging.getLogger()
    previous = root_logger.level
    try:
        configure_root_logger(logging.DEBUG)
        logger = get_logger("fundtracker.late_import")

        assert root_logger.level == logging.DEBUG
        assert logger.isEnabledFor(logging.DEBUG)
    finally:
        root_logger.setLevel(previous)


def test_handler_is_installed_once() -> None:
    root_logger = logging.getLogger()
    configure_root_logger()
    handlers = list(root_logger.handlers)

    configure_root_logger(logging.WARNING)
    get_logger("fundtracker.again")

    try:
        assert root_logger.handlers == handlers
        assert root_logger.level == logging.WARNING
    finally:
        root_logger.setLevel(logging.INFO)


def test_level_for_environment() -> None:
    assert level_for_environment(" Development ") == logging.DEBUG
    assert level_for_environment("production") == logging.INFO
