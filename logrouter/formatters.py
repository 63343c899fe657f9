"""
Destination formatters for the log router.
"""

import json
import logging
import re
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Dict, Optional

import click

from logrouter.records import AccessRecord, ApplicationRecord, Origin

# CSI and single-character escape sequences, including the 8-bit CSI introducer.
ANSI_PATTERN = re.compile(
    r'[\u001b\u009b][\[()#;?]*(?:[0-9]{1,4}(?:;[0-9]{0,4})*)?[0-9A-ORZcf-nqry=><]'
)

# (background, foreground) per HTTP method
METHOD_STYLES = {
    'POST': ('magenta', 'white'),
    'PUT': ('yellow', 'black'),
    'DELETE': ('bright_red', 'black'),
}
DEFAULT_METHOD_STYLE = ('blue', 'white')

ACCESS_LINE_PATTERN = re.compile(
    r'^ (?P<status>\d{3})  - (?P<elapsed_ms>\d+\.\d{3}) ms -  (?P<method>[A-Z]+)  '
    r'(?P<url>\S+) - (?P<date>\w{3}, \d{2} \w{3} \d{4} \d{2}:\d{2}:\d{2} GMT)$'
)


def strip_ansi(text: str) -> str:
    """Remove every ANSI escape sequence from text"""
    return ANSI_PATTERN.sub('', text)


def style_status(record: AccessRecord) -> str:
    if record.success:
        return click.style(f' {record.status} ', fg='black', bg='green')
    return click.style(f' {record.status} ', fg='white', bg='red')


def style_method(method: str) -> str:
    bg, fg = METHOD_STYLES.get(method, DEFAULT_METHOD_STYLE)
    return click.style(f' {method} ', fg=fg, bg=bg)


def http_date(timestamp: datetime) -> str:
    """Format a timestamp as an HTTP-date, e.g. 'Mon, 19 Oct 2026 13:53:00 GMT'"""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return format_datetime(timestamp.astimezone(timezone.utc), usegmt=True)


def render_access_line(record: AccessRecord) -> str:
    """
    Render an access record as a single color-coded line.

    Example (styling omitted):
        " 200  - 1.234 ms -  GET  /api/v1/users - Mon, 19 Oct 2026 13:53:00 GMT"
    """
    return ' '.join([
        style_status(record),
        '-',
        f'{record.elapsed_ms:.3f}',
        'ms',
        '-',
        style_method(record.method),
        record.url,
        '-',
        http_date(record.timestamp),
    ])


def parse_access_line(line: str) -> Optional[Dict[str, Any]]:
    """
    Parse an unstyled access line back into its fields.

    Returns:
        Dict with status, elapsed_ms, method, url and date, or None if the
        line is not a well-formed access line
    """
    match = ACCESS_LINE_PATTERN.match(line)
    if not match:
        return None

    fields = match.groupdict()
    fields['status'] = int(fields['status'])
    fields['elapsed_ms'] = float(fields['elapsed_ms'])
    return fields


def _router_record(record: logging.LogRecord):
    """Router record attached to a LogRecord, or an application record built from its message"""
    entry = getattr(record, 'entry', None)
    if entry is None:
        entry = ApplicationRecord(payload=record.getMessage(), level=record.levelno)
    return entry


class ConsoleFormatter(logging.Formatter):
    """
    Console output: access lines keep their styling, application records are
    pretty-printed in full.

    Application output format:
    {
      "timestamp": "2026-10-19T13:53:00.123456Z",
      "level": "INFO",
      "logger": "users_api",
      "origin": "application",
      "message": {...},
      "context": {...}  # Optional extra fields
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = _router_record(record)

        if entry.origin is Origin.ACCESS:
            return render_access_line(entry)

        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_data = {
            'timestamp': created.strftime('%Y-%m-%dT%H:%M:%S.%fZ'),
            'level': record.levelname,
            'logger': record.name,
            'origin': entry.origin.value,
            'message': entry.payload,
        }

        # Add context if present (from logger.info(..., extra={'context': {...}}))
        if hasattr(record, 'context') and record.context:
            log_data['context'] = record.context

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(log_data, indent=2, default=str)


class FileFormatter(logging.Formatter):
    """File output: access lines without ANSI styling, application payloads only"""

    def format(self, record: logging.LogRecord) -> str:
        entry = _router_record(record)

        if entry.origin is Origin.ACCESS:
            return strip_ansi(render_access_line(entry))

        return json.dumps(entry.payload, indent=2, default=str)
