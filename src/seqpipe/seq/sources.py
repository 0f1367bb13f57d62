"""Source constructors: sequences that start a pipeline.

Sources have no upstream.  Running out of elements is a normal outcome, never
an error.

Ranges come in three explicit flavours instead of one overloaded signature:

- ``range_between(start, stop, step)`` walks an inclusive interval;
- ``range_count(n)`` yields ``1..n``;
- ``count_from(start, step)`` never ends.
"""
import logging
import math
from typing import Any, Callable, Iterable, Mapping, Optional, Sized

import numpy as np

from seqpipe.seq.core import EXHAUSTED, IterableSource, Sequence, as_sequence

logger = logging.getLogger(__name__)


class RangeSource(Sequence):
    """Arithmetic progression with an inclusive bound.

    While ``step > 0`` values are produced as long as ``current <= stop``; while
    ``step < 0`` as long as ``current >= stop``.  The bound may be infinite.
    """

    def __init__(self, start, stop, step=1):
        if step == 0:
            raise ValueError("range step must not be zero")
        self._current = start
        self._stop = stop
        self._step = step

    def _advance(self) -> Any:
        if (self._step > 0 and self._current <= self._stop) or \
           (self._step < 0 and self._current >= self._stop):
            value = self._current
            self._current += self._step
            return value
        return EXHAUSTED


class CollectionSource(Sequence):
    """Index-based walk over a sized, indexable collection.

    The length is snapshotted when the source is created: appending to the
    collection afterwards does not extend the walk, and shrinking it ends the
    walk early.
    """

    def __init__(self, items: Sized):
        self._items = items
        self._length = len(items)
        self._index = 0

    def _advance(self) -> Any:
        if self._index >= self._length or self._index >= len(self._items):
            return EXHAUSTED
        value = self._items[self._index]
        self._index += 1
        return value


class FunctionSource(Sequence):
    """Calls ``fn()`` until it returns ``sentinel``."""

    def __init__(self, fn: Callable[[], Any], sentinel: Any = None):
        self._fn = fn
        self._sentinel = sentinel

    def _advance(self) -> Any:
        value = self._fn()
        if value is self._sentinel or (self._sentinel is not None and value == self._sentinel):
            return EXHAUSTED
        return value


class RepeatSource(Sequence):

    def __init__(self, value: Any, count: Optional[int] = None):
        if count is not None and count < 0:
            raise ValueError(f"repeat count must be >= 0, got {count}")
        self._value = value
        self._remaining = count

    def _advance(self) -> Any:
        if self._remaining is None:
            return self._value
        if self._remaining <= 0:
            return EXHAUSTED
        self._remaining -= 1
        return self._value


class OnceSource(Sequence):

    def __init__(self, value: Any):
        self._value = value
        self._done = False

    def _advance(self) -> Any:
        if self._done:
            return EXHAUSTED
        self._done = True
        return self._value


class EmptySource(Sequence):

    def _advance(self) -> Any:
        return EXHAUSTED


class RandomIntsSource(Sequence):
    """Random integers in ``[lower, upper)``, drawn one per pull."""

    def __init__(self, n: Optional[int], lower: int, upper: int, seed: Optional[int] = None):
        if n is not None and n < 0:
            raise ValueError(f"n must be >= 0, got {n}")
        if upper <= lower:
            raise ValueError("upper must be > lower")
        self._remaining = n
        self._lower = lower
        self._upper = upper
        self._rng = np.random.default_rng(seed)

    def _advance(self) -> Any:
        if self._remaining is not None:
            if self._remaining <= 0:
                return EXHAUSTED
            self._remaining -= 1
        return int(self._rng.integers(self._lower, self._upper))


def range_between(start, stop, step=1) -> RangeSource:
    """Values from ``start`` to ``stop`` inclusive, ``step`` apart.

    For a non-empty finite range the element count is
    ``floor((stop - start) / step) + 1``.  Use ``math.inf`` as ``stop`` for an
    unbounded walk.
    """
    return RangeSource(start, stop, step)


def range_count(n) -> RangeSource:
    """``1, 2, ..., n``."""
    return RangeSource(1, n, 1)


def count_from(start=1, step=1) -> RangeSource:
    """Unbounded counter starting at ``start``."""
    return RangeSource(start, math.inf if step > 0 else -math.inf, step)


def from_collection(items: Sized) -> CollectionSource:
    return CollectionSource(items)


def from_iterable(iterable: Iterable[Any]) -> IterableSource:
    return IterableSource(iterable)


def from_function(fn: Callable[[], Any], sentinel: Any = None) -> FunctionSource:
    """Pull elements by calling ``fn``; ``sentinel`` marks the end."""
    return FunctionSource(fn, sentinel)


def from_pairs(mapping: Mapping[Any, Any]) -> IterableSource:
    """``(key, value)`` tuples of a mapping."""
    return IterableSource(mapping.items())


def repeat_value(value: Any, count: Optional[int] = None) -> RepeatSource:
    """``value`` repeated ``count`` times, or forever when ``count`` is None."""
    return RepeatSource(value, count)


def once(value: Any) -> OnceSource:
    return OnceSource(value)


def empty() -> EmptySource:
    return EmptySource()


def random_ints(n: Optional[int] = 10, lower: int = 0, upper: int = 100,
                seed: Optional[int] = None) -> RandomIntsSource:
    """``n`` random integers between ``lower`` (inclusive) and ``upper`` (exclusive)."""
    return RandomIntsSource(n, lower, upper, seed)
