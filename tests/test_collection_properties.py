"""Property-based tests for Collection using Hypothesis.

These tests check that ordering and keying invariants hold across
randomized contents.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from kvcollection import Collection, KeyAlreadyAddedError

# =============================================================================
# Hypothesis Strategies
# =============================================================================

keys = st.one_of(
    st.integers(min_value=-50, max_value=50),
    st.text(max_size=5),
)
values = st.one_of(
    st.none(),
    st.integers(min_value=-1000, max_value=1000),
    st.text(max_size=10),
)
entries = st.dictionaries(keys, values, max_size=20)


# =============================================================================
# Invariant Tests
# =============================================================================


@pytest.mark.hypothesis
@given(st.lists(values, max_size=30))
def test_appends_get_keys_zero_to_n(items):
    collection = Collection()
    for item in items:
        collection.add(item)
    assert collection.keys() == list(range(len(items)))
    assert collection.length() == len(items)
    assert list(collection) == items


@pytest.mark.hypothesis
@given(entries)
def test_reverse_round_trip(data):
    collection = Collection.of(data)
    twice = collection.reverse().reverse()
    assert list(twice.get_all().items()) == list(data.items())


@pytest.mark.hypothesis
@given(entries)
def test_reverse_is_exact_reverse_order(data):
    reversed_ = Collection.of(data).reverse()
    assert list(reversed_.get_all().items()) == list(reversed(data.items()))


@pytest.mark.hypothesis
@given(entries)
def test_map_keeps_keys_and_leaves_source(data):
    collection = Collection.of(data)
    mapped = collection.map(lambda value, key: (key, value))
    assert mapped.keys() == list(data)
    assert mapped.get_all() == {k: (k, v) for k, v in data.items()}
    assert collection.get_all() == data


@pytest.mark.hypothesis
@given(entries)
def test_filter_keeps_matching_entries_in_order(data):
    def predicate(value):
        return isinstance(value, int)

    filtered = Collection.of(data).filter(predicate)
    expected = [(k, v) for k, v in data.items() if predicate(v)]
    assert list(filtered.get_all().items()) == expected


@pytest.mark.hypothesis
@given(entries, keys, values)
def test_duplicate_add_leaves_collection_unchanged(data, key, value):
    collection = Collection.of(data)
    if key in data:
        with pytest.raises(KeyAlreadyAddedError):
            collection.add(value, key)
        assert collection.get_all() == data
    else:
        collection.add(value, key)
        assert collection.keys()[-1] == key


@pytest.mark.hypothesis
@given(entries, entries)
def test_push_never_overwrites_and_merge_always_does(left, right):
    pushed = Collection.of(left).push(Collection.of(right))
    merged = Collection.of(left).merge(Collection.of(right))
    for key, value in right.items():
        if key in left:
            assert pushed.get(key) == left[key]
        else:
            assert pushed.get(key) == value
        assert merged.get(key) == value
    assert pushed.keys() == merged.keys()


@pytest.mark.hypothesis
@given(entries)
def test_auto_key_is_past_highest_integer_key(data):
    collection = Collection.of(data).add("new")
    ints = [k for k in data if isinstance(k, int)]
    expected = max(max(ints) + 1, 0) if ints else 0
    assert collection.keys()[-1] == expected
