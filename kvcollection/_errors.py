# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from enum import IntEnum
from typing import Any, ClassVar

__all__ = (
    "ErrorCode",
    "CollectionError",
    "KeyAlreadyAddedError",
    "KeyInvalidError",
    "MethodDoesNotExistError",
)


class ErrorCode(IntEnum):
    """Stable numeric codes carried by collection errors."""

    KEY_ALREADY_ADDED = 500
    KEY_INVALID = 501
    METHOD_DOES_NOT_EXIST = 502


class CollectionError(Exception):
    default_message: ClassVar[str] = "Collection error"
    default_code: ClassVar[int | None] = None

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        code: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message or self.default_message)
        if cause:
            self.__cause__ = cause  # preserves traceback
        self.message = message or self.default_message
        self.details = details or {}
        self.code = code if code is not None else self.default_code

    def to_dict(self, *, include_cause: bool = False) -> dict[str, Any]:
        data = {
            "error": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            **({"details": self.details} if self.details else {}),
        }
        if include_cause and (cause := self.get_cause()):
            data["cause"] = repr(cause)
        return data

    def get_cause(self) -> Exception | None:
        """Get the cause of this error, if any."""
        return self.__cause__ if hasattr(self, "__cause__") else None


class KeyAlreadyAddedError(CollectionError):
    """Raised when adding under a key the collection already holds."""

    default_message = "Key already added."
    default_code = ErrorCode.KEY_ALREADY_ADDED

    @classmethod
    def for_key(cls, key: Any) -> "KeyAlreadyAddedError":
        return cls(f"Key {key} already added.", details={"key": key})


class KeyInvalidError(CollectionError, LookupError):
    """Raised when a key (or value, for drop) is not in the collection."""

    default_message = "The key does not exist in the collection."
    default_code = ErrorCode.KEY_INVALID

    @classmethod
    def for_key(cls, key: Any) -> "KeyInvalidError":
        return cls(
            f"The key {key} does not exist in the collection.",
            details={"key": key},
        )


class MethodDoesNotExistError(CollectionError, AttributeError):
    """Raised when alias dispatch receives an unknown name.

    Also an ``AttributeError`` so ``hasattr`` and ``getattr`` with a
    default behave as usual on a collection.
    """

    default_message = "Method or alias does not exist."
    default_code = ErrorCode.METHOD_DOES_NOT_EXIST

    @classmethod
    def for_name(cls, name: str) -> "MethodDoesNotExistError":
        return cls(
            f"Method or alias {name} does not exist.",
            details={"name": name},
        )
