# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

import logging

from ._concepts import DiagnosticSink
from ._errors import (
    CollectionError,
    ErrorCode,
    KeyAlreadyAddedError,
    KeyInvalidError,
    MethodDoesNotExistError,
)
from .collection import Collection
from .config import CollectionSettings, settings
from .diagnostics import (
    LoggingSink,
    MemorySink,
    NullSink,
    Severity,
    get_default_sink,
)
from .version import __version__

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

__all__ = (
    "__version__",
    "Collection",
    "CollectionError",
    "CollectionSettings",
    "DiagnosticSink",
    "ErrorCode",
    "KeyAlreadyAddedError",
    "KeyInvalidError",
    "LoggingSink",
    "MemorySink",
    "MethodDoesNotExistError",
    "NullSink",
    "Severity",
    "get_default_sink",
    "logger",
    "settings",
)
