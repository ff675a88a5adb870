# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from abc import ABC, abstractmethod
from typing import Any

__all__ = (
    "Collective",
    "DiagnosticSink",
)


class Collective(ABC):
    """Base for keyed collections of values."""

    @abstractmethod
    def add(self, value: Any, key: Any = None, /):
        pass

    @abstractmethod
    def drop(self, key_or_value: Any, /):
        pass


class DiagnosticSink(ABC):
    """Receives diagnostics a collection emits on its error paths."""

    @abstractmethod
    def write(self, severity: Any, category: str, message: str) -> None:
        pass
