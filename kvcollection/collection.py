# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any, ClassVar, NoReturn

from pydantic import BaseModel, Field, PrivateAttr, field_validator
from typing_extensions import Self

from ._concepts import Collective, DiagnosticSink
from ._errors import (
    CollectionError,
    KeyAlreadyAddedError,
    KeyInvalidError,
    MethodDoesNotExistError,
)
from .config import settings
from .diagnostics import Severity, get_default_sink

__all__ = (
    "Collection",
    "next_auto_key",
)

logger = logging.getLogger(__name__)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_key(value: Any) -> bool:
    return _is_int(value) or isinstance(value, str)


def _validate_key(key: Any) -> int | str:
    if not _is_key(key):
        raise TypeError(
            f"keys must be int or str, not {key.__class__.__name__}"
        )
    return key


def _is_nested(value: Any) -> bool:
    return isinstance(value, (Collection, Mapping, list, tuple))


def _nested_entries(value: Any) -> dict | None:
    """Entries of a nested structure, or None for a scalar value."""
    if isinstance(value, Collection):
        return value.get_all()
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (list, tuple)):
        return dict(enumerate(value))
    return None


def _coerce_entries(items: Any) -> dict[int | str, Any]:
    """Turns a Collection, mapping or sequence into an entries dict.

    Sequences are keyed ``0..n-1``. Raises TypeError on any other input
    or on a key that is neither int nor str.
    """
    entries = _nested_entries(items)
    if entries is None:
        raise TypeError(
            "entries must be a Collection, a mapping or a sequence, "
            f"not {items.__class__.__name__}"
        )
    for key in entries:
        _validate_key(key)
    return entries


def _to_text(value: Any) -> str:
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    if _is_nested(value):
        raise TypeError(
            f"cannot join a nested {value.__class__.__name__} value"
        )
    return str(value)


def next_auto_key(keys: Iterable[Any]) -> int:
    """Next automatic key for a collection holding `keys`.

    One past the highest integer key, never below 0.
    """
    ints = [k for k in keys if _is_int(k)]
    return max(max(ints) + 1, 0) if ints else 0


class Collection(BaseModel, Collective):
    """An insertion-ordered collection of keyed values.

    Keys are either automatic integers, assigned on append, or explicit
    `int`/`str` keys supplied by the caller; both kinds may be mixed.
    Mutators work in place and return the collection so calls can be
    chained; `map`, `filter`, `reverse` and `flatten` return a new
    collection and leave the receiver untouched.

    Before raising a `CollectionError`, the collection reports the error
    at `Severity.ERROR` to its diagnostic sink.

    Attributes:
        entries (dict[int | str, Any]):
            The (key, value) pairs in insertion order.

    Example:
        >>> c = Collection().add("foo", "bar").add("foo2", "bar2")
        >>> c.keys()
        ['bar', 'bar2']
        >>> c.reverse().get_all()
        {'bar2': 'foo2', 'bar': 'foo'}
    """

    ALIASES: ClassVar[dict[str, str]] = {
        "count": "length",
        "size": "length",
        "all": "get_all",
        "first": "get_first",
        "last": "get_last",
    }
    OPERATIONS: ClassVar[frozenset[str]] = frozenset(
        {
            "is_empty",
            "length",
            "sum",
            "contains",
            "contains_with_regex",
            "contains_string",
            "key_exists",
            "keys",
            "get_all",
            "get_first",
            "get_last",
            "get",
            "find",
            "join",
            "add",
            "replace",
            "drop",
            "slice",
            "purge",
            "push",
            "push_only_values",
            "merge",
            "reverse",
            "map",
            "filter",
            "flatten",
        }
    )

    entries: dict[int | str, Any] = Field(
        default_factory=dict,
        title="Entries",
        description="Keyed values in insertion order.",
    )
    _next_key: int = PrivateAttr(default=0)
    _sink: DiagnosticSink = PrivateAttr(default_factory=get_default_sink)

    def __init__(
        self,
        entries: Any = None,
        /,
        *,
        sink: DiagnosticSink | None = None,
        **data: Any,
    ) -> None:
        if entries is not None:
            data["entries"] = _coerce_entries(entries)
        super().__init__(**data)
        if sink is not None:
            self._sink = sink

    def model_post_init(self, __context: Any) -> None:
        super().model_post_init(__context)
        self._next_key = next_auto_key(self.entries)

    @field_validator("entries", mode="before")
    def _validate_entries(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, (Collection, list, tuple)):
            return _nested_entries(value)
        return value

    # --- construction -----------------------------------------------------

    @classmethod
    def from_collection(
        cls, source: Collection, /, *, sink: DiagnosticSink | None = None
    ) -> Self:
        """Copies every entry of `source`, keys and order included.

        The copy reports to `source`'s sink unless `sink` is given.
        """
        if not isinstance(source, Collection):
            raise TypeError(
                f"source must be a Collection, not {source.__class__.__name__}"
            )
        return cls(
            source.get_all(),
            sink=sink if sink is not None else source.sink,
        )

    @classmethod
    def of(
        cls, items: Any = None, /, *, sink: DiagnosticSink | None = None
    ) -> Self:
        """Seeds a collection from a mapping, a sequence or a Collection."""
        return cls(items, sink=sink)

    @property
    def sink(self) -> DiagnosticSink:
        return self._sink

    # --- queries ----------------------------------------------------------

    def is_empty(self) -> bool:
        return not self.entries

    def length(self) -> int:
        """Returns the number of entries."""
        return len(self.entries)

    def sum(self, key: int | str | None = None) -> int:
        """Sums the integer values of the collection.

        Args:
            key (int | str | None):
                When given, each nested value (mapping, Collection, list
                or tuple) contributes the integer it holds under `key`.
                Top-level integer values are summed either way.

        Returns:
            int: The total, 0 for an empty collection.
        """
        total = 0
        for value in self.entries.values():
            nested = None if key is None else _nested_entries(value)
            if nested is not None:
                sub = nested.get(key)
                if _is_int(sub):
                    total += sub
            elif _is_int(value):
                total += value
        return total

    def contains(self, value: Any) -> bool:
        return any(v == value for v in self.entries.values())

    def contains_with_regex(self, pattern: str | re.Pattern) -> bool:
        """True if `pattern` matches somewhere in any string value."""
        regex = re.compile(pattern)
        return any(
            isinstance(v, str) and regex.search(v) is not None
            for v in self.entries.values()
        )

    def contains_string(self, substring: str) -> bool:
        """True if any string value contains `substring`."""
        return any(
            isinstance(v, str) and substring in v
            for v in self.entries.values()
        )

    def key_exists(self, key: Any) -> bool:
        return _is_key(key) and key in self.entries

    def keys(self) -> list[int | str]:
        return list(self.entries)

    def get_all(self) -> dict[int | str, Any]:
        """Returns a shallow copy of the entries."""
        return dict(self.entries)

    def get_first(self) -> Any:
        return next(iter(self.entries.values()), None)

    def get_last(self) -> Any:
        return next(reversed(self.entries.values()), None)

    def get(self, key: int | str) -> Any:
        """Returns the value stored under `key`.

        Raises:
            KeyInvalidError: If `key` is not in the collection.
        """
        if not self.key_exists(key):
            self._fail(KeyInvalidError.for_key(key))
        return self.entries[key]

    def find(self, predicate: Callable[[Any, Any, dict], Any]) -> Any:
        """Returns the first value for which `predicate` holds.

        Args:
            predicate (Callable):
                Called as ``predicate(value, key, entries)`` in order;
                `entries` is a snapshot of the whole collection.

        Returns:
            Any: The matching value, or None when nothing matches.
        """
        snapshot = self.get_all()
        for key, value in snapshot.items():
            if predicate(value, key, snapshot):
                return value
        return None

    def join(self, separator: str) -> str:
        """Joins the values as text.

        None and False become "", True becomes "1", other scalars go
        through `str`. Nested values raise TypeError.
        """
        return separator.join(_to_text(v) for v in self.entries.values())

    # --- mutation ---------------------------------------------------------

    def add(self, value: Any, key: int | str | None = None) -> Self:
        """Appends `value`, under `key` or the next automatic key.

        Raises:
            KeyAlreadyAddedError: If `key` is already in the collection.
            TypeError: If `key` is neither int nor str.
        """
        if key is None:
            self._insert(self._next_key, value)
            return self
        key = _validate_key(key)
        if key in self.entries:
            self._fail(KeyAlreadyAddedError.for_key(key))
        self._insert(key, value)
        return self

    def replace(self, key: int | str, value: Any) -> Self:
        """Overwrites the value under `key`, keeping its position.

        Raises:
            KeyInvalidError: If `key` is not in the collection.
        """
        if not self.key_exists(key):
            self._fail(KeyInvalidError.for_key(key))
        self.entries[key] = value
        return self

    def drop(self, key_or_value: Any) -> Self:
        """Removes an entry by key, or every entry holding a value.

        A matching key wins: only that entry is removed. Otherwise all
        entries whose value equals `key_or_value` are removed.

        Raises:
            KeyInvalidError: If neither a key nor a value matches.
        """
        if self.key_exists(key_or_value):
            del self.entries[key_or_value]
        elif self.contains(key_or_value):
            doomed = [k for k, v in self.entries.items() if v == key_or_value]
            for key in doomed:
                del self.entries[key]
        else:
            self._fail(KeyInvalidError.for_key(key_or_value))
        return self

    def slice(self, start: int, length: int | None = None) -> Self:
        """Keeps only `length` entries from ordinal position `start`.

        A negative `start` counts from the end. A missing `length` keeps
        everything to the end; a negative one stops that many entries
        before the end. Retained entries keep their keys.
        """
        pairs = list(self.entries.items())
        n = len(pairs)
        begin = start if start >= 0 else max(n + start, 0)
        if length is None:
            stop = n
        elif length < 0:
            stop = max(n + length, 0)
        else:
            stop = begin + length
        self.entries = dict(pairs[begin:stop])
        self._next_key = next_auto_key(self.entries)
        return self

    def purge(self) -> Self:
        self.entries.clear()
        self._next_key = 0
        return self

    def push(self, other: Collection | Mapping) -> Self:
        """Adds the entries of `other` whose keys are not present here.

        Values already in this collection are never overwritten.
        """
        for key, value in _coerce_entries(other).items():
            if key not in self.entries:
                self._insert(key, value)
        return self

    def push_only_values(self, other: Collection | Mapping) -> Self:
        """Appends the values of `other` under fresh automatic keys."""
        for value in _coerce_entries(other).values():
            self._insert(self._next_key, value)
        return self

    def merge(self, other: Collection | Mapping) -> Self:
        """Inserts or overwrites with every entry of `other`.

        On a key collision the value from `other` wins and the entry
        keeps its current position.
        """
        for key, value in _coerce_entries(other).items():
            self._insert(key, value)
        return self

    # --- derived collections ----------------------------------------------

    def reverse(self) -> Self:
        return self._derive(reversed(self.entries.items()))

    def map(self, transform: Callable[[Any, Any], Any]) -> Self:
        """Returns a collection of ``transform(value, key)``, same keys."""
        return self._derive(
            (k, transform(v, k)) for k, v in self.entries.items()
        )

    def filter(self, predicate: Callable[[Any], Any]) -> Self:
        """Returns the entries whose value satisfies `predicate`.

        Keys are kept as they are; gaps are not renumbered.
        """
        return self._derive(
            (k, v) for k, v in self.entries.items() if predicate(v)
        )

    def flatten(self) -> Self:
        """Returns a single-level collection of all nested entries.

        Nested collections, mappings and sequences are flattened
        recursively and merged in order, so a later key overwrites an
        earlier one. Scalars are merged under their own key.
        """
        flat = self._derive(())
        for key, value in self.entries.items():
            if isinstance(value, Collection):
                flat.merge(value.flatten())
            elif (nested := _nested_entries(value)) is not None:
                flat.merge(self._derive(nested.items()).flatten())
            else:
                flat.merge({key: value})
        return flat

    # --- alias dispatch ---------------------------------------------------

    def call(self, name: str, /, *args: Any, **kwargs: Any) -> Any:
        """Invokes an operation or alias by name.

        Raises:
            MethodDoesNotExistError: If `name` is neither.
        """
        if name in self.OPERATIONS:
            return getattr(self, name)(*args, **kwargs)
        return self._resolve_alias(name)(*args, **kwargs)

    def _resolve_alias(self, name: str) -> Callable[..., Any]:
        target = self.ALIASES.get(name)
        if target is None:
            self._fail(MethodDoesNotExistError.for_name(name))
        return getattr(self, target)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            return super().__getattr__(name)
        return self._resolve_alias(name)

    # --- internals --------------------------------------------------------

    def _insert(self, key: int | str, value: Any) -> None:
        self.entries[key] = value
        if _is_int(key) and key >= self._next_key:
            self._next_key = key + 1

    def _derive(self, pairs: Iterable[tuple[Any, Any]]) -> Self:
        return self.__class__(dict(pairs), sink=self._sink)

    def _fail(self, error: CollectionError) -> NoReturn:
        message = f"{error.message} Code : {int(error.code)}"
        try:
            self._sink.write(
                Severity.ERROR, settings.KVCOLLECTION_LOG_CATEGORY, message
            )
        except Exception:
            logger.warning(
                "Diagnostic sink %r failed to record: %s",
                self._sink,
                message,
                exc_info=True,
            )
        raise error

    # --- python protocol --------------------------------------------------

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Any]:
        """Iterates over the values in order."""
        return iter(list(self.entries.values()))

    def __getitem__(self, key: int | str) -> Any:
        return self.get(key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Collection):
            return NotImplemented
        return list(self.entries.items()) == list(other.entries.items())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.entries!r})"
