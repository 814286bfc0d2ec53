"""Tests for logging configuration."""

import logging

from octatools.utils.logging_setup import configure_logging


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert configure_logging() == logging.DEBUG
    assert logging.getLogger().level == logging.DEBUG


def test_default_level(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    assert configure_logging() == logging.WARNING


def test_invalid_level_falls_back(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    assert configure_logging("INFO") == logging.INFO


def test_records_go_to_stderr(monkeypatch, capsys):
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    configure_logging()
    logging.getLogger("octatools.test").info("hello")
    captured = capsys.readouterr()
    assert "INFO [octatools.test] hello" in captured.err
    assert captured.out == ""
