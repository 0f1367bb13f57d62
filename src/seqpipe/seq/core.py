"""Core definitions for lazy sequences.

A Sequence is a stateful, pull-based producer.  Each call to ``pull()`` returns
either the next element or the ``EXHAUSTED`` sentinel.  Sources produce
elements from ranges, collections or functions; adapters wrap exactly one
upstream sequence (two for ``chain`` and ``zip``) and are themselves
sequences, so they compose without limit:

    evens = sources.range_between(1, 9).filter(lambda x: x % 2 == 0)
    squares = evens.map(lambda x: x * x)
    squares.collect()    # [4, 16, 36, 64]

Terminal consumers (``fold``, ``collect``, ``find`` ...) drive the outermost
sequence.  Each pulls exactly as many elements as its semantics need: the
short-circuiting ones stop on the first deciding element, and a sequence
abandoned part way through is not meant to be resumed.

Sequences are also ordinary Python iterators, so ``for x in seq`` and
``list(seq)`` work as expected.
"""
import logging
from abc import ABC, abstractmethod
from typing import (
    Any, Callable, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar
)

import numpy as np
import pandas as pd

from seqpipe.errors import EmptySourceError
from seqpipe.outcome.option import Option, Some, Nothing

logger = logging.getLogger(__name__)

T = TypeVar('T')
U = TypeVar('U')


class _Exhausted:
    """Type of the ``EXHAUSTED`` sentinel.  There is only ever one instance."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "EXHAUSTED"

    def __bool__(self):
        return False

    def __reduce__(self):
        return (_Exhausted, ())


EXHAUSTED = _Exhausted()


def _wrap(value: Any) -> Option:
    return Nothing() if value is EXHAUSTED else Some(value)


class Sequence(ABC, Generic[T]):
    """Abstract base class of every source and adapter.

    Subclasses implement ``_advance()``, which returns the next element or
    ``EXHAUSTED``.  Callers never use ``_advance()`` directly; ``pull()`` wraps
    it and latches exhaustion, so once a sequence has reported the end it
    keeps reporting the end without touching its state again.

    Element values may be anything, None included.  Consumers that report a
    possibly missing element as an Option (``next``, ``find``, ``nth``,
    ``last``) cannot represent a None element and raise ContractViolation
    if they land on one.
    """

    _exhausted: bool = False

    @abstractmethod
    def _advance(self) -> Any:
        """Produce the next element, or ``EXHAUSTED`` when there is none."""

    def _upstreams(self) -> Tuple['Sequence', ...]:
        return ()

    def pull(self) -> Any:
        """Return the next element or ``EXHAUSTED``."""
        if self._exhausted:
            return EXHAUSTED
        value = self._advance()
        if value is EXHAUSTED:
            self._exhausted = True
        return value

    @property
    def exhausted(self) -> bool:
        """True once ``pull()`` has returned ``EXHAUSTED``."""
        return self._exhausted

    def next(self) -> Option:
        """Pull one element as ``Some(element)``, or ``Nothing()`` at the end."""
        return _wrap(self.pull())

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        value = self.pull()
        if value is EXHAUSTED:
            raise StopIteration
        return value

    def __or__(self, segment: Callable[['Sequence[T]'], Any]) -> 'Sequence':
        """Apply a reusable segment: ``seq | firstN(n=3)``."""
        return as_sequence(segment(self))

    def _label(self) -> str:
        name = type(self).__name__
        for suffix in ("Adapter", "Source"):
            if name.endswith(suffix) and name != suffix:
                return name[:-len(suffix)]
        return name

    def __repr__(self) -> str:
        ups = self._upstreams()
        if not ups:
            return self._label()
        if len(ups) == 1:
            return f"{self._label()} <- {ups[0]!r}"
        return f"{self._label()}({', '.join(repr(u) for u in ups)})"

    # Adapters

    def map(self, fn: Callable[[T], U]) -> 'Sequence[U]':
        return adapters.MapAdapter(self, fn)

    def filter(self, predicate: Callable[[T], bool]) -> 'Sequence[T]':
        return adapters.FilterAdapter(self, predicate)

    def filter_map(self, fn: Callable[[T], Any]) -> 'Sequence':
        """Map and filter in one step.

        ``fn`` returns the mapped value to keep it, or None / ``Nothing()`` to
        drop the element.  A ``Some`` result is unwrapped.
        """
        return adapters.FilterMapAdapter(self, fn)

    def take(self, n: int) -> 'Sequence[T]':
        return adapters.TakeAdapter(self, n)

    def take_while(self, predicate: Callable[[T], bool]) -> 'Sequence[T]':
        return adapters.TakeWhileAdapter(self, predicate)

    def skip(self, n: int) -> 'Sequence[T]':
        return adapters.SkipAdapter(self, n)

    def skip_while(self, predicate: Callable[[T], bool]) -> 'Sequence[T]':
        return adapters.SkipWhileAdapter(self, predicate)

    def chain(self, other: Iterable[T]) -> 'Sequence[T]':
        return adapters.ChainAdapter(self, as_sequence(other))

    def zip(self, other: Iterable[U]) -> 'Sequence[Tuple[T, U]]':
        return adapters.ZipAdapter(self, as_sequence(other))

    def enumerate(self, start: int = 1) -> 'Sequence[Tuple[int, T]]':
        """Pair each element with a running index, 1-based by default."""
        return adapters.EnumerateAdapter(self, start)

    def flat_map(self, fn: Callable[[T], Iterable[U]]) -> 'Sequence[U]':
        return adapters.FlatMapAdapter(self, fn)

    def inspect(self, fn: Callable[[T], Any]) -> 'Sequence[T]':
        return adapters.InspectAdapter(self, fn)

    def scan(self, init: U, fn: Callable[[U, T], U]) -> 'Sequence[U]':
        return adapters.ScanAdapter(self, init, fn)

    def bypass(self, predicate: Callable[[T], bool],
               handler: Callable[['Sequence[T]'], Iterable[Any]]) -> 'Sequence':
        """Route elements failing ``predicate`` through ``handler``.

        See ``seqpipe.util.iterators.bypass``.
        """
        from seqpipe.util.iterators import BypassAdapter
        return BypassAdapter(self, predicate, handler)

    # Terminal consumers: full drain

    def fold(self, init: U, fn: Callable[[U, T], U]) -> U:
        logger.debug(f"fold draining {self!r}")
        acc = init
        for value in self:
            acc = fn(acc, value)
        return acc

    def reduce(self, fn: Callable[[T, T], T]) -> T:
        """Fold seeded with the first element.

        Raises:
            EmptySourceError: if the sequence has no elements.
        """
        logger.debug(f"reduce draining {self!r}")
        acc = self.pull()
        if acc is EXHAUSTED:
            raise EmptySourceError("reduce on an empty sequence")
        for value in self:
            acc = fn(acc, value)
        return acc

    def sum(self, start: Any = 0) -> Any:
        return self.fold(start, lambda acc, x: acc + x)

    def product(self, start: Any = 1) -> Any:
        return self.fold(start, lambda acc, x: acc * x)

    def count(self) -> int:
        return self.fold(0, lambda acc, _: acc + 1)

    def for_each(self, fn: Callable[[T], Any]) -> None:
        logger.debug(f"for_each draining {self!r}")
        for value in self:
            fn(value)

    def last(self) -> Option:
        """The final element; the whole sequence is drained to find it."""
        logger.debug(f"last draining {self!r}")
        last_value = EXHAUSTED
        for value in self:
            last_value = value
        return _wrap(last_value)

    def _extreme(self, name: str, key: Optional[Callable[[T], Any]], better: Callable[[Any, Any], bool]) -> T:
        logger.debug(f"{name} draining {self!r}")
        best = self.pull()
        if best is EXHAUSTED:
            raise EmptySourceError(f"{name} on an empty sequence")
        key = key or (lambda x: x)
        best_key = key(best)
        for value in self:
            value_key = key(value)
            if better(value_key, best_key):
                best, best_key = value, value_key
        return best

    def min(self, key: Optional[Callable[[T], Any]] = None) -> T:
        """Smallest element (first one on ties).

        Raises:
            EmptySourceError: if the sequence has no elements.
        """
        return self._extreme("min", key, lambda a, b: a < b)

    def max(self, key: Optional[Callable[[T], Any]] = None) -> T:
        """Largest element (first one on ties).

        Raises:
            EmptySourceError: if the sequence has no elements.
        """
        return self._extreme("max", key, lambda a, b: a > b)

    def partition(self, predicate: Callable[[T], bool]) -> Tuple[List[T], List[T]]:
        """Split into (matching, non-matching) lists, each in pull order."""
        logger.debug(f"partition draining {self!r}")
        left, right = [], []
        for value in self:
            (left if predicate(value) else right).append(value)
        return left, right

    # Terminal consumers: short-circuit

    def find(self, predicate: Callable[[T], bool]) -> Option:
        logger.debug(f"find pulling from {self!r}")
        for value in self:
            if predicate(value):
                return Some(value)
        return Nothing()

    def position(self, predicate: Callable[[T], bool]) -> Option:
        """0-based index of the first matching element."""
        logger.debug(f"position pulling from {self!r}")
        pos = 0
        for value in self:
            if predicate(value):
                return Some(pos)
            pos += 1
        return Nothing()

    def any(self, predicate: Callable[[T], bool]) -> bool:
        logger.debug(f"any pulling from {self!r}")
        for value in self:
            if predicate(value):
                return True
        return False

    def all(self, predicate: Callable[[T], bool]) -> bool:
        logger.debug(f"all pulling from {self!r}")
        for value in self:
            if not predicate(value):
                return False
        return True

    def nth(self, n: int) -> Option:
        """Skip ``n`` elements and return the next one (0-based).

        Exactly ``n + 1`` elements are pulled when the sequence is long enough.
        """
        if n < 0:
            raise ValueError(f"nth index must be >= 0, got {n}")
        logger.debug(f"nth pulling from {self!r}")
        for _ in range(n):
            if self.pull() is EXHAUSTED:
                return Nothing()
        return _wrap(self.pull())

    # Collection bridge

    def collect(self, into: Optional[Callable[[Iterable[T]], Any]] = None) -> Any:
        """Materialize the remaining elements in pull order.

        With no argument the result is a list.  ``into`` may be a collection
        class exposing ``from_iterable`` (Vec, HashSet, HashMap) or any callable
        accepting an iterable (``tuple``, ``set``, ``dict`` ...).
        """
        logger.debug(f"collect draining {self!r}")
        if into is None:
            return list(self)
        if hasattr(into, "from_iterable"):
            return into.from_iterable(self)
        return into(self)

    def collect_vec(self):
        from seqpipe.collections.vec import Vec
        return self.collect(Vec)

    def collect_set(self):
        from seqpipe.collections.hashset import HashSet
        return self.collect(HashSet)

    def collect_map(self):
        """Materialize ``(key, value)`` pairs into a HashMap; later keys win."""
        from seqpipe.collections.hashmap import HashMap
        return self.collect(HashMap)

    def collect_array(self, dtype: Any = None) -> np.ndarray:
        """Materialize into a numpy array."""
        return np.array(self.collect(), dtype=dtype)

    def collect_frame(self, columns: Optional[List[str]] = None) -> pd.DataFrame:
        """Materialize rows (dicts or tuples) into a pandas DataFrame."""
        return pd.DataFrame(self.collect(), columns=columns)


class IterableSource(Sequence[T]):
    """Sequence over any Python iterable."""

    def __init__(self, iterable: Iterable[T]):
        self._iterator = iter(iterable)

    def _advance(self) -> Any:
        return next(self._iterator, EXHAUSTED)


def as_sequence(obj: Iterable[T]) -> Sequence[T]:
    """Return ``obj`` unchanged if it is a Sequence, else wrap it."""
    if isinstance(obj, Sequence):
        return obj
    return IterableSource(obj)


# Adapters subclass Sequence, so the module can only be bound once Sequence exists.
from seqpipe.seq import adapters  # noqa: E402
