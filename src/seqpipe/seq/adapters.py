"""Adapters: sequences that transform another sequence.

Every adapter keeps its own cursor state as attributes and owns its upstream
sequence.  None of them reads ahead: an adapter pulls from upstream only while
computing its own next element, and at most one element per side per step for
``ZipAdapter``.  Exceptions raised by the user callbacks propagate out of
``pull()`` untouched.
"""
import logging
from typing import Any, Callable, Iterable, Optional, Tuple

from seqpipe.outcome.option import Nothing, Some
from seqpipe.seq.core import EXHAUSTED, Sequence, as_sequence

logger = logging.getLogger(__name__)


class Adapter(Sequence):
    """Base for sequences wrapping exactly one upstream sequence."""

    def __init__(self, upstream: Sequence):
        self._upstream = upstream

    def _upstreams(self) -> Tuple[Sequence, ...]:
        return (self._upstream,)


class MapAdapter(Adapter):

    def __init__(self, upstream: Sequence, fn: Callable[[Any], Any]):
        super().__init__(upstream)
        self._fn = fn

    def _advance(self) -> Any:
        value = self._upstream.pull()
        if value is EXHAUSTED:
            return EXHAUSTED
        return self._fn(value)


class FilterAdapter(Adapter):

    def __init__(self, upstream: Sequence, predicate: Callable[[Any], bool]):
        super().__init__(upstream)
        self._predicate = predicate

    def _advance(self) -> Any:
        while True:
            value = self._upstream.pull()
            if value is EXHAUSTED or self._predicate(value):
                return value


class FilterMapAdapter(Adapter):
    """Keeps ``fn(x)`` unless it is None or ``Nothing()``; ``Some`` is unwrapped."""

    def __init__(self, upstream: Sequence, fn: Callable[[Any], Any]):
        super().__init__(upstream)
        self._fn = fn

    def _advance(self) -> Any:
        while True:
            value = self._upstream.pull()
            if value is EXHAUSTED:
                return EXHAUSTED
            mapped = self._fn(value)
            if mapped is None or isinstance(mapped, Nothing):
                continue
            if isinstance(mapped, Some):
                return mapped.value
            return mapped


class TakeAdapter(Adapter):
    """Yields at most ``n`` elements; upstream is not pulled after the n-th."""

    def __init__(self, upstream: Sequence, n: int):
        if n < 0:
            raise ValueError(f"take count must be >= 0, got {n}")
        super().__init__(upstream)
        self._remaining = n

    def _advance(self) -> Any:
        if self._remaining <= 0:
            return EXHAUSTED
        self._remaining -= 1
        return self._upstream.pull()


class TakeWhileAdapter(Adapter):

    def __init__(self, upstream: Sequence, predicate: Callable[[Any], bool]):
        super().__init__(upstream)
        self._predicate = predicate

    def _advance(self) -> Any:
        value = self._upstream.pull()
        if value is EXHAUSTED or not self._predicate(value):
            # The failing element is consumed and dropped.
            return EXHAUSTED
        return value


class SkipAdapter(Adapter):
    """Discards the first ``n`` elements, all at once on the first pull."""

    def __init__(self, upstream: Sequence, n: int):
        if n < 0:
            raise ValueError(f"skip count must be >= 0, got {n}")
        super().__init__(upstream)
        self._to_skip = n

    def _advance(self) -> Any:
        while self._to_skip > 0:
            self._to_skip -= 1
            if self._upstream.pull() is EXHAUSTED:
                self._to_skip = 0
                return EXHAUSTED
        return self._upstream.pull()


class SkipWhileAdapter(Adapter):
    """Discards while the predicate holds, then passes everything through."""

    def __init__(self, upstream: Sequence, predicate: Callable[[Any], bool]):
        super().__init__(upstream)
        self._predicate = predicate
        self._skipping = True

    def _advance(self) -> Any:
        while True:
            value = self._upstream.pull()
            if value is EXHAUSTED or not self._skipping:
                return value
            if not self._predicate(value):
                self._skipping = False
                return value


class ChainAdapter(Sequence):
    """Drains ``first`` completely before pulling anything from ``second``."""

    def __init__(self, first: Sequence, second: Sequence):
        self._first = first
        self._second = second
        self._first_done = False

    def _upstreams(self) -> Tuple[Sequence, ...]:
        return (self._first, self._second)

    def _advance(self) -> Any:
        if not self._first_done:
            value = self._first.pull()
            if value is not EXHAUSTED:
                return value
            self._first_done = True
        return self._second.pull()


class ZipAdapter(Sequence):
    """Pairs elements from two sequences; ends with the shorter one.

    The right side is not pulled once the left side is exhausted.
    """

    def __init__(self, left: Sequence, right: Sequence):
        self._left = left
        self._right = right

    def _upstreams(self) -> Tuple[Sequence, ...]:
        return (self._left, self._right)

    def _advance(self) -> Any:
        a = self._left.pull()
        if a is EXHAUSTED:
            return EXHAUSTED
        b = self._right.pull()
        if b is EXHAUSTED:
            return EXHAUSTED
        return (a, b)


class EnumerateAdapter(Adapter):

    def __init__(self, upstream: Sequence, start: int = 1):
        super().__init__(upstream)
        self._index = start

    def _advance(self) -> Any:
        value = self._upstream.pull()
        if value is EXHAUSTED:
            return EXHAUSTED
        pair = (self._index, value)
        self._index += 1
        return pair


class FlatMapAdapter(Adapter):
    """Maps each element to an inner sequence and drains it fully before moving on."""

    def __init__(self, upstream: Sequence, fn: Callable[[Any], Iterable[Any]]):
        super().__init__(upstream)
        self._fn = fn
        self._inner: Optional[Sequence] = None

    def _advance(self) -> Any:
        while True:
            if self._inner is not None:
                value = self._inner.pull()
                if value is not EXHAUSTED:
                    return value
                self._inner = None
            outer = self._upstream.pull()
            if outer is EXHAUSTED:
                return EXHAUSTED
            self._inner = as_sequence(self._fn(outer))


class InspectAdapter(Adapter):

    def __init__(self, upstream: Sequence, fn: Callable[[Any], Any]):
        super().__init__(upstream)
        self._fn = fn

    def _advance(self) -> Any:
        value = self._upstream.pull()
        if value is not EXHAUSTED:
            self._fn(value)
        return value


class ScanAdapter(Adapter):
    """Running state: yields ``state = fn(state, x)`` for every element."""

    def __init__(self, upstream: Sequence, init: Any, fn: Callable[[Any, Any], Any]):
        super().__init__(upstream)
        self._state = init
        self._fn = fn

    def _advance(self) -> Any:
        value = self._upstream.pull()
        if value is EXHAUSTED:
            return EXHAUSTED
        self._state = self._fn(self._state, value)
        return self._state
