"""
Record types accepted by the log router.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class Origin(str, Enum):
    """Where a record came from; selects the formatting rule"""
    ACCESS = 'access'
    APPLICATION = 'application'


@dataclass(frozen=True)
class AccessRecord:
    """One completed HTTP request. Carries no presentation styling."""
    status: int
    elapsed_ms: float
    method: str
    url: str
    timestamp: datetime
    level: int = logging.INFO

    origin = Origin.ACCESS

    @property
    def success(self) -> bool:
        # Only 4xx counts as a failure; 5xx is rendered as success.
        return not str(self.status).startswith('4')


@dataclass(frozen=True)
class ApplicationRecord:
    """Structured application event; payload must be JSON serializable"""
    payload: Any
    level: int = logging.INFO

    origin = Origin.APPLICATION
