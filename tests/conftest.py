# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

import pytest

from kvcollection import Collection, MemorySink


@pytest.fixture
def sink():
    """In-memory diagnostic sink."""
    return MemorySink()


@pytest.fixture
def collection(sink):
    """Empty collection reporting to the in-memory sink."""
    return Collection(sink=sink)


@pytest.fixture
def keyed(sink):
    """Collection with two explicit string keys."""
    return Collection(sink=sink).add("foo", "key").add("bar", "key2")
