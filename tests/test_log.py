"""Test for the logging functions."""

# clean

import os

import pytest

from epbdcalc import log
from epbdcalc.balance.energy_performance import calculate
from epbdcalc.energytypes import Carrier, Service
from tests import functions_for_testing as fft


@pytest.mark.base
def test_logs_are_kept_until_logfile_is_known(tmp_path, monkeypatch):
    """Messages written before the logging path is known end up in the logfile."""
    monkeypatch.setattr(log, "PRE", True)
    monkeypatch.setattr(log, "PRE_LOGS", "")
    monkeypatch.setattr(log, "LOGGING_PATH", None)
    monkeypatch.setattr(log, "LOGGING_LEVEL", log.LOGGING_LEVEL)

    log.information("Before the logfile")
    assert "IFO:Before the logfile" in log.PRE_LOGS

    log.initialize_properly(str(tmp_path), log.LogPrio.DEBUG)
    log.debug("After the logfile")

    with open(os.path.join(str(tmp_path), log.LOG_FILE_NAME), "r", encoding="utf-8") as file:
        content = file.read()
    assert "IFO:Before the logfile" in content
    assert "DBG:After the logfile" in content
    assert log.LOGGING_LEVEL == log.LogPrio.DEBUG


@pytest.mark.base
def test_calculations_without_logfile_keep_no_debug_messages(monkeypatch):
    """Debug and trace messages of repeated calculations are not buffered at the default level."""
    monkeypatch.setattr(log, "PRE", True)
    monkeypatch.setattr(log, "PRE_LOGS", "")
    monkeypatch.setattr(log, "LOGGING_PATH", None)
    monkeypatch.setattr(log, "LOGGING_LEVEL", log.LogPrio.INFORMATION)

    components = fft.get_components(fft.used(Carrier.ELECTRICIDAD, Service.CAL, 10.0))
    for _ in range(50):
        calculate(components, fft.get_peninsula_factors())

    assert log.PRE_LOGS == ""


@pytest.mark.base
def test_buffered_logs_are_bounded(monkeypatch):
    """Buffered messages are limited in size and the newest ones are kept."""
    monkeypatch.setattr(log, "PRE", True)
    monkeypatch.setattr(log, "PRE_LOGS", "")
    monkeypatch.setattr(log, "LOGGING_PATH", None)
    monkeypatch.setattr(log, "LOGGING_LEVEL", log.LogPrio.TRACE)

    for i in range(200):
        log.trace(f"Message {i}: " + "x" * 1000)

    assert len(log.PRE_LOGS) <= log.PRE_LOGS_MAX_LENGTH
    assert "Message 199:" in log.PRE_LOGS
    assert "Message 0:" not in log.PRE_LOGS
