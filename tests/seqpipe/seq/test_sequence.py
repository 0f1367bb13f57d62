import logging
import math

import numpy as np
import pandas as pd
import pytest

from seqpipe.collections import HashMap, HashSet, Vec
from seqpipe.errors import ContractViolation, EmptySourceError
from seqpipe.outcome.option import Nothing, Some
from seqpipe.seq import sources
from seqpipe.seq.core import EXHAUSTED, Sequence
from testutils import CountingSource


class TestPullProtocol:

    def test_pull_and_next(self):
        seq = sources.range_count(2)
        assert seq.pull() == 1
        assert seq.next() == Some(2)
        assert seq.next() == Nothing()
        assert seq.exhausted

    def test_exhaustion_is_latched(self):
        src = CountingSource([1])
        assert src.pull() == 1
        assert src.pull() is EXHAUSTED
        src.items.append(2)
        assert src.pull() is EXHAUSTED
        assert src.advances == 2

    def test_exhausted_sentinel(self):
        assert not EXHAUSTED
        assert repr(EXHAUSTED) == "EXHAUSTED"
        assert type(EXHAUSTED)() is EXHAUSTED

    def test_python_iteration(self):
        assert list(sources.range_count(3)) == [1, 2, 3]
        total = 0
        for x in sources.range_count(4):
            total += x
        assert total == 10

    def test_none_elements_flow_through_pull(self):
        seq = sources.from_iterable([None, 1])
        assert seq.pull() is None
        assert seq.pull() == 1

    def test_option_consumers_reject_none_elements(self):
        with pytest.raises(ContractViolation):
            sources.from_iterable([None]).next()
        with pytest.raises(ContractViolation):
            sources.from_iterable([1, None]).last()
        with pytest.raises(ContractViolation):
            sources.from_iterable([None]).nth(0)

    def test_custom_subclass(self):
        class Countdown(Sequence):
            def __init__(self, n):
                self.n = n

            def _advance(self):
                if self.n == 0:
                    return EXHAUSTED
                self.n -= 1
                return self.n + 1

        assert Countdown(3).map(lambda x: x * 2).collect() == [6, 4, 2]


class TestFullDrain:

    def test_map_squares(self):
        assert sources.from_collection([1, 2, 3]).map(lambda x: x * x).collect() == [1, 4, 9]

    def test_fold(self):
        assert sources.range_count(4).fold(0, lambda acc, x: acc + x) == 10
        assert sources.range_count(3).fold("", lambda acc, x: acc + str(x)) == "123"

    def test_fold_on_empty_returns_init(self):
        marker = object()
        assert sources.empty().fold(marker, lambda acc, x: x) is marker

    def test_reduce(self):
        assert sources.range_count(4).reduce(lambda a, b: a * b) == 24
        assert sources.once(5).reduce(lambda a, b: a + b) == 5

    def test_reduce_on_empty_raises(self):
        with pytest.raises(EmptySourceError, match="reduce on an empty sequence"):
            sources.empty().reduce(lambda a, b: a + b)

    def test_sum_product_count(self):
        assert sources.range_count(4).sum() == 10
        assert sources.empty().sum() == 0
        assert sources.range_count(4).product() == 24
        assert sources.empty().product() == 1
        assert sources.from_iterable(["a", "b"]).sum("") == "ab"
        assert sources.range_count(7).count() == 7
        assert sources.empty().count() == 0

    def test_for_each(self):
        seen = []
        assert sources.range_count(3).for_each(seen.append) is None
        assert seen == [1, 2, 3]

    def test_last(self):
        assert sources.range_count(3).last() == Some(3)
        assert sources.empty().last() == Nothing()

    def test_min_max(self):
        assert sources.from_iterable([3, 1, 2]).min() == 1
        assert sources.from_iterable([3, 1, 2]).max() == 3
        words = ["bb", "a", "cc", "d"]
        assert sources.from_iterable(words).min(key=len) == "a"
        assert sources.from_iterable(words).max(key=len) == "bb"
        with pytest.raises(EmptySourceError, match="min on an empty sequence"):
            sources.empty().min()
        with pytest.raises(EmptySourceError, match="max on an empty sequence"):
            sources.empty().max()

    def test_partition(self):
        evens, odds = sources.range_count(6).partition(lambda x: x % 2 == 0)
        assert evens == [2, 4, 6]
        assert odds == [1, 3, 5]


class TestShortCircuit:

    def test_find_stops_at_first_match(self):
        src = CountingSource([1, 4, 6, 8])
        assert src.find(lambda x: x % 2 == 0) == Some(4)
        assert src.pulls == 2
        assert sources.range_count(3).find(lambda x: x > 5) == Nothing()

    def test_position_is_zero_based(self):
        assert sources.from_iterable("abc").position(lambda c: c == "c") == Some(2)
        assert sources.from_iterable("abc").position(lambda c: c == "z") == Nothing()

    def test_any_all(self):
        src = CountingSource([1, 2, 3, 4])
        assert src.any(lambda x: x == 2)
        assert src.pulls == 2

        src = CountingSource([1, 2, 3, 4])
        assert not src.all(lambda x: x < 2)
        assert src.pulls == 2

        assert not sources.empty().any(lambda x: True)
        assert sources.empty().all(lambda x: False)

    def test_nth_pulls_exactly_n_plus_one(self):
        src = CountingSource([10, 20, 30, 40])
        assert src.nth(2) == Some(30)
        assert src.pulls == 3
        assert src.pull() == 40

        assert sources.range_count(2).nth(5) == Nothing()
        with pytest.raises(ValueError):
            sources.range_count(2).nth(-1)

    def test_short_circuit_on_unbounded_source(self):
        assert sources.count_from(1).find(lambda x: x * x > 50) == Some(8)
        assert sources.range_between(1, math.inf).take(5).count() == 5

    def test_short_circuit_consumers_log_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="seqpipe.seq.core"):
            sources.range_count(3).find(lambda x: x == 2)
            sources.range_count(3).position(lambda x: x == 2)
            sources.range_count(3).any(lambda x: x == 2)
            sources.range_count(3).all(lambda x: x < 2)
            sources.range_count(3).nth(1)
        for name in ("find", "position", "any", "all", "nth"):
            assert f"{name} pulling from Range" in caplog.text


class TestProperties:

    def test_filter_never_yields_failing_elements(self):
        predicate = lambda x: x % 3 == 0
        assert sources.range_count(100).filter(predicate).all(predicate)

    def test_zip_three_and_five(self):
        pairs = sources.range_count(3).zip(sources.range_count(5)).collect()
        assert len(pairs) == 3

    def test_chain_order(self):
        a, b = [3, 1, 2], [9, 7]
        assert sources.from_collection(a).chain(sources.from_collection(b)).collect() == a + b

    def test_collect_twice_from_same_collection(self):
        data = [4, 5, 6]
        first = sources.from_collection(data).collect()
        second = sources.from_collection(data).collect()
        assert first == second == data

    def test_vec_round_trip(self):
        original = sources.range_count(5).map(lambda x: x * 3).collect_vec()
        again = original.iter().collect_vec()
        assert again == original
        assert again.to_list() == [3, 6, 9, 12, 15]


class TestCollectionBridge:

    def test_collect_default_is_list(self):
        assert sources.range_count(3).collect() == [1, 2, 3]

    def test_collect_into(self):
        assert sources.range_count(3).collect(tuple) == (1, 2, 3)
        assert sources.range_count(3).collect(Vec) == Vec([1, 2, 3])
        assert sources.from_iterable([1, 1, 2]).collect(HashSet) == {1, 2}

    def test_collect_vec_set_map(self):
        assert isinstance(sources.range_count(2).collect_vec(), Vec)
        assert sources.from_iterable([3, 3, 4]).collect_set() == HashSet([3, 4])
        pairs = sources.from_iterable([("a", 1), ("b", 2), ("a", 3)])
        assert pairs.collect_map() == HashMap([("a", 3), ("b", 2)])

    def test_collect_array(self):
        arr = sources.range_count(4).collect_array()
        assert isinstance(arr, np.ndarray)
        np.testing.assert_array_equal(arr, np.array([1, 2, 3, 4]))
        assert sources.range_count(2).collect_array(dtype=float).dtype == np.float64

    def test_collect_frame(self):
        rows = sources.range_count(3).map(lambda x: {"n": x, "sq": x * x})
        df = rows.collect_frame()
        assert isinstance(df, pd.DataFrame)
        assert list(df["sq"]) == [1, 4, 9]

        df = sources.range_count(2).map(lambda x: (x, -x)).collect_frame(columns=["a", "b"])
        assert list(df.columns) == ["a", "b"]
        assert list(df["b"]) == [-1, -2]

    def test_collect_after_partial_pull(self):
        seq = sources.range_count(4)
        seq.pull()
        assert seq.collect() == [2, 3, 4]
        assert seq.collect() == []
