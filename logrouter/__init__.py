"""
logrouter: Log routing for application and HTTP access records

Fans each record out to the console and, in production mode, to a log file,
formatting it per destination.
"""

from logrouter.formatters import ConsoleFormatter, FileFormatter, render_access_line, strip_ansi
from logrouter.records import AccessRecord, ApplicationRecord, Origin
from logrouter.router import LogRouter

__all__ = [
    'AccessRecord',
    'ApplicationRecord',
    'ConsoleFormatter',
    'FileFormatter',
    'LogRouter',
    'Origin',
    'render_access_line',
    'strip_ansi',
]
__version__ = '1.0.0'
