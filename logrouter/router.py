"""
LogRouter: fans application and access records out to console and file destinations.
"""

import logging
import sys
from typing import Any, List, Optional, TextIO, Union

from logrouter.formatters import ConsoleFormatter, FileFormatter
from logrouter.records import AccessRecord, ApplicationRecord

CONSOLE = 'console'
FILE = 'file'

Record = Union[AccessRecord, ApplicationRecord]


def console_destination(stream: Optional[TextIO] = None, level: int = logging.INFO) -> logging.Handler:
    """Console destination writing to stream (default: stdout)"""
    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.set_name(CONSOLE)
    handler.setLevel(level)
    handler.setFormatter(ConsoleFormatter())
    return handler


def file_destination(log_file: str, level: int = logging.INFO) -> logging.Handler:
    """
    Append-only file destination.

    Raises:
        OSError: If the file cannot be opened for appending
    """
    handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    handler.set_name(FILE)
    handler.setLevel(level)
    handler.setFormatter(FileFormatter())
    return handler


class LogRouter:
    """
    Single entry point for submitting log records.

    Owns a private logger that is not registered with the logging module, so
    each router is independent of any process-wide logging configuration.
    Handlers serialize their writes, so concurrent submissions never produce
    interleaved lines.

    Example:
        router = LogRouter()
        router.configure(production=False)
        router.info({'user_id': 7})
    """

    def __init__(
        self,
        name: str = 'users_api',
        stream: Optional[TextIO] = None,
        log_file: str = 'info.log',
        level: int = logging.INFO
    ):
        self.stream = stream
        self.log_file = log_file
        self.level = level

        self.logger = logging.Logger(name)
        self.logger.propagate = False

    @property
    def destinations(self) -> List[str]:
        """Names of the active destinations, in delivery order"""
        return [h.get_name() for h in self.logger.handlers]

    def configure(self, production: bool) -> None:
        """
        Select the active destinations.

        The console is always active; the log file only in production mode.

        Raises:
            OSError: If production is set and the log file is not writable
        """
        # Check if we already have handlers to avoid duplicates
        if CONSOLE not in self.destinations:
            self.logger.addHandler(console_destination(self.stream, self.level))

        if production and FILE not in self.destinations:
            self.logger.addHandler(file_destination(self.log_file, self.level))

    def submit(self, record: Record) -> None:
        """
        Deliver a record to every active destination whose level it meets.

        A destination that fails to write reports the error on stderr; the
        remaining destinations still receive the record.
        """
        self.logger.log(record.level, '%s', record.origin.value, extra={'entry': record})

    def info(self, payload: Any) -> None:
        """Submit payload as an INFO application record"""
        self.submit(ApplicationRecord(payload=payload))

    def close(self) -> None:
        """Flush and close every destination"""
        for handler in list(self.logger.handlers):
            handler.flush()
            handler.close()
            self.logger.removeHandler(handler)
