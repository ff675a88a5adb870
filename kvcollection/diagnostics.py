# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Diagnostic sinks a collection reports to before raising an error.

A sink is injected per collection; nothing here is process-wide state
except the settings used to build the default sink.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import NamedTuple

from ._concepts import DiagnosticSink
from .config import settings

__all__ = (
    "Severity",
    "DiagnosticRecord",
    "NullSink",
    "LoggingSink",
    "MemorySink",
    "get_default_sink",
)


class Severity(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def level(self) -> int:
        """The matching `logging` level."""
        return _LOG_LEVELS[self]


_LOG_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.CRITICAL: logging.CRITICAL,
}


class DiagnosticRecord(NamedTuple):
    severity: Severity
    category: str
    message: str


class NullSink(DiagnosticSink):
    """Discards every diagnostic."""

    def write(self, severity: Severity, category: str, message: str) -> None:
        return None

    def __repr__(self) -> str:
        return "NullSink()"


class LoggingSink(DiagnosticSink):
    """Forwards diagnostics to the standard `logging` module.

    The category is appended to the base logger name, so
    ``LoggingSink("app").write(Severity.ERROR, "COLLECTION", msg)`` logs
    ``msg`` at ERROR on the ``app.collection`` logger.
    """

    def __init__(self, logger_name: str | None = None):
        self.logger_name = logger_name or settings.KVCOLLECTION_LOGGER_NAME

    def get_logger(self, category: str) -> logging.Logger:
        if not category:
            return logging.getLogger(self.logger_name)
        return logging.getLogger(f"{self.logger_name}.{category.lower()}")

    def write(self, severity: Severity, category: str, message: str) -> None:
        severity = Severity(severity)
        self.get_logger(category).log(
            severity.level, message, extra={"category": category}
        )

    def __repr__(self) -> str:
        return f"LoggingSink(logger_name={self.logger_name!r})"


class MemorySink(DiagnosticSink):
    """Keeps diagnostics in memory, oldest first."""

    def __init__(self):
        self.records: list[DiagnosticRecord] = []

    def write(self, severity: Severity, category: str, message: str) -> None:
        self.records.append(
            DiagnosticRecord(Severity(severity), category, message)
        )

    @property
    def messages(self) -> list[str]:
        return [r.message for r in self.records]

    def clear(self) -> None:
        self.records.clear()

    def __len__(self) -> int:
        return len(self.records)

    def __repr__(self) -> str:
        return f"MemorySink(records={len(self.records)})"


def get_default_sink() -> DiagnosticSink:
    """Build the sink named by ``KVCOLLECTION_DIAGNOSTIC_SINK``."""
    match settings.KVCOLLECTION_DIAGNOSTIC_SINK:
        case "logging":
            return LoggingSink()
        case "memory":
            return MemorySink()
    return NullSink()
