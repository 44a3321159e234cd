""" Logging functionality for all of epbdcalc. """
# clean
from enum import IntEnum
import os
from typing import Optional

LOGGING_LEVEL = 3
LOGGING_PATH: Optional[str] = None
LOG_FILE_NAME = "epbdcalc.log"
# for storing logs that are written before the logging path is known
PRE = True
PRE_LOGS = ""
# maximum number of characters kept in PRE_LOGS, older lines are dropped first
PRE_LOGS_MAX_LENGTH = 100_000


class LogPrio(IntEnum):
    """Define a logging priority."""

    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    DEBUG = 4
    TRACE = 5

    @staticmethod
    def get_prio_string(prio: int) -> str:
        """Get the string representation of the priority."""
        prio_strings = {
            LogPrio.ERROR: "ERR",
            LogPrio.WARNING: "WRN",
            LogPrio.INFORMATION: "IFO",
            LogPrio.DEBUG: "DBG",
            LogPrio.TRACE: "TRC",
        }
        return prio_strings.get(prio, "???")  # type: ignore


def error(message: str) -> None:
    """Log an error message."""
    log(LogPrio.ERROR, message)


def warning(message: str) -> None:
    """Log a warning message."""
    log(LogPrio.WARNING, message)


def information(message: str) -> None:
    """Log a information message."""
    log(LogPrio.INFORMATION, message)


def debug(message: str) -> None:
    """Log a debug message."""
    log(LogPrio.DEBUG, message)


def trace(message: str) -> None:
    """Log a trace message."""
    log(LogPrio.TRACE, message)


def log(prio: int, message: str) -> None:
    """Print a log message and write it to the logfile, or keep it until the logfile exists."""
    if prio <= LOGGING_LEVEL:
        print(str(LogPrio.get_prio_string(prio)) + ":" + message)

    line = LogPrio.get_prio_string(prio) + ":" + message + "\n"
    if PRE or LOGGING_PATH is None:
        # only messages within the logging level are kept until the logfile exists
        if prio > LOGGING_LEVEL:
            return
        global PRE_LOGS
        PRE_LOGS = (PRE_LOGS + line)[-PRE_LOGS_MAX_LENGTH:]
        return
    append_to_logfile(line, LOGGING_PATH)


def append_to_logfile(text: str, logging_path: str) -> None:
    """Append text to the logfile in the logging path."""
    if not os.path.exists(logging_path):
        os.makedirs(logging_path)
    file_name = os.path.join(logging_path, LOG_FILE_NAME)
    try:
        with open(file_name, "a", encoding="utf-8") as filestream:
            filestream.write(text)
    except OSError:
        print(f"{LOG_FILE_NAME} could not be appended. "
              "This might happen when too many simultaneous calculations are running.")


def initialize_properly(logging_path: str, logging_level: Optional[int] = None) -> None:
    """Set the actual logging path and move pre logs there."""
    global PRE_LOGS, PRE, LOGGING_PATH, LOGGING_LEVEL
    if not PRE:
        print("WARNING! Logging seems to be already initialized.")
    LOGGING_PATH = logging_path
    if logging_level is not None:
        LOGGING_LEVEL = logging_level

    append_to_logfile(PRE_LOGS, LOGGING_PATH)

    # turn off pre_logging and clear pre_logs
    PRE = False
    PRE_LOGS = ""
