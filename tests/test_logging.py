"""Unit tests for kvstorage/utils/logging.py"""
from __future__ import annotations

import logging


class TestGetLogger:

    def test_single_handler(self):
        from kvstorage.utils.logging import get_logger
        first = get_logger("kvstorage.tests.single")
        second = get_logger("kvstorage.tests.single")
        assert first is second
        assert len(first.handlers) == 1
        assert first.propagate is False

    def test_explicit_level(self):
        from kvstorage.utils.logging import get_logger
        assert get_logger("kvstorage.tests.int", logging.DEBUG).level == logging.DEBUG
        assert get_logger("kvstorage.tests.name", "warning").level == logging.WARNING

    def test_level_from_env(self, monkeypatch):
        from kvstorage.utils.logging import get_logger
        monkeypatch.setenv("KVSTORAGE_LOG_LEVEL", "ERROR")
        assert get_logger("kvstorage.tests.env").level == logging.ERROR

    def test_unknown_level_falls_back_to_info(self, monkeypatch):
        from kvstorage.utils.logging import get_logger
        monkeypatch.delenv("KVSTORAGE_LOG_LEVEL", raising=False)
        assert get_logger("kvstorage.tests.unknown", "chatty").level == logging.INFO
        assert get_logger("kvstorage.tests.default").level == logging.INFO
