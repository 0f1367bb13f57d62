import math

import pytest

from seqpipe.seq import sources
from seqpipe.seq.core import EXHAUSTED


def test_range_between_inclusive():
    assert sources.range_between(1, 5).collect() == [1, 2, 3, 4, 5]
    assert sources.range_between(0, 10, 3).collect() == [0, 3, 6, 9]
    assert sources.range_between(5, 1, -2).collect() == [5, 3, 1]
    assert sources.range_between(3, 3).collect() == [3]


def test_range_between_empty_when_bounds_inverted():
    assert sources.range_between(5, 1).collect() == []
    assert sources.range_between(1, 5, -1).collect() == []


def test_range_between_element_count():
    for start, stop, step in [(1, 10, 1), (1, 10, 2), (0, 100, 7), (10, -10, -3)]:
        expected = math.floor((stop - start) / step) + 1
        assert sources.range_between(start, stop, step).count() == expected


def test_range_between_float_step():
    assert sources.range_between(0.0, 1.0, 0.25).collect() == [0.0, 0.25, 0.5, 0.75, 1.0]


def test_range_zero_step_rejected():
    with pytest.raises(ValueError):
        sources.range_between(1, 10, 0)


def test_range_count_matches_range_between_from_one():
    # With the stop argument omitted, the count form starts at 1, not 0.
    assert sources.range_count(5).collect() == sources.range_between(1, 5).collect()
    assert sources.range_count(5).collect() == [1, 2, 3, 4, 5]
    assert sources.range_count(0).collect() == []


def test_count_from_is_unbounded():
    assert sources.count_from(10).take(3).collect() == [10, 11, 12]
    assert sources.count_from(0, 5).take(4).collect() == [0, 5, 10, 15]
    assert sources.count_from(0, -1).take(3).collect() == [0, -1, -2]
    assert sources.range_between(1, math.inf).take(2).collect() == [1, 2]


def test_from_collection_snapshots_length():
    items = [1, 2, 3]
    seq = sources.from_collection(items)
    assert seq.pull() == 1
    items.append(4)
    assert seq.collect() == [2, 3]


def test_from_collection_stops_when_shrunk():
    items = [1, 2, 3]
    seq = sources.from_collection(items)
    assert seq.pull() == 1
    items.pop()
    items.pop()
    assert seq.collect() == []


def test_from_iterable_and_as_sequence():
    gen = (x * x for x in range(4))
    assert sources.from_iterable(gen).collect() == [0, 1, 4, 9]

    seq = sources.range_count(3)
    assert sources.as_sequence(seq) is seq
    assert sources.as_sequence("ab").collect() == ["a", "b"]


def test_from_function_until_sentinel():
    values = iter([3, 2, 1, None, 7])
    assert sources.from_function(lambda: next(values)).collect() == [3, 2, 1]

    values = iter(["a", "b", "STOP", "c"])
    assert sources.from_function(lambda: next(values), sentinel="STOP").collect() == ["a", "b"]


def test_from_function_is_never_called_after_end():
    calls = []

    def fn():
        calls.append(1)
        return None

    seq = sources.from_function(fn)
    assert seq.pull() is EXHAUSTED
    assert seq.pull() is EXHAUSTED
    assert len(calls) == 1


def test_from_pairs():
    assert sources.from_pairs({"a": 1, "b": 2}).collect() == [("a", 1), ("b", 2)]


def test_repeat_once_empty():
    assert sources.repeat_value("x", 3).collect() == ["x", "x", "x"]
    assert sources.repeat_value(7).take(4).collect() == [7, 7, 7, 7]
    assert sources.repeat_value(1, 0).collect() == []
    with pytest.raises(ValueError):
        sources.repeat_value(1, -1)

    assert sources.once(42).collect() == [42]
    assert sources.empty().collect() == []
    assert sources.empty().pull() is EXHAUSTED


def test_random_ints():
    values = sources.random_ints(50, lower=3, upper=7, seed=1).collect()
    assert len(values) == 50
    assert all(3 <= v < 7 for v in values)
    assert all(isinstance(v, int) for v in values)

    again = sources.random_ints(50, lower=3, upper=7, seed=1).collect()
    assert values == again

    assert sources.random_ints(None, seed=0).take(5).count() == 5

    with pytest.raises(ValueError):
        sources.random_ints(5, lower=10, upper=10)
