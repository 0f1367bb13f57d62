"""Unique-value set.

Elements must be hashable and not None.  Set algebra returns new sets and
leaves both operands untouched.
"""
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from seqpipe.collections.base import DictViewSource, TrackedCollection
from seqpipe.seq.core import Sequence

logger = logging.getLogger(__name__)


class HashSet(TrackedCollection):

    def __init__(self, items: Optional[Iterable[Any]] = None):
        # dict keys rather than a set, so iteration order is stable for a given history
        self._data: Dict[Any, None] = {}
        if items is not None:
            self.extend(items)

    @classmethod
    def from_iterable(cls, items: Iterable[Any]) -> 'HashSet':
        return cls(items)

    def len(self) -> int:
        return len(self._data)

    def is_empty(self) -> bool:
        return not self._data

    def insert(self, value: Any) -> bool:
        """Add ``value``; True if it was not already present."""
        self._check_value(value)
        if value in self._data:
            return False
        self._data[value] = None
        self._modified()
        return True

    def remove(self, value: Any) -> bool:
        """Discard ``value``; True if it was present."""
        if value not in self._data:
            return False
        del self._data[value]
        self._modified()
        return True

    def contains(self, value: Any) -> bool:
        return value in self._data

    def clear(self):
        if self._data:
            self._data = {}
            self._modified()

    def retain(self, predicate: Callable[[Any], bool]):
        doomed = [value for value in self._data if not predicate(value)]
        for value in doomed:
            del self._data[value]
        if doomed:
            self._modified()

    def union(self, other: 'HashSet') -> 'HashSet':
        result = self.clone()
        result.extend(other)
        return result

    def intersection(self, other: 'HashSet') -> 'HashSet':
        return self.filter(other.contains)

    def difference(self, other: 'HashSet') -> 'HashSet':
        return self.filter(lambda value: not other.contains(value))

    def symmetric_difference(self, other: 'HashSet') -> 'HashSet':
        result = self.difference(other)
        result.extend(other.difference(self))
        return result

    def is_subset(self, other: 'HashSet') -> bool:
        if len(self) > len(other):
            return False
        return self.all(other.contains)

    def is_superset(self, other: 'HashSet') -> bool:
        return other.is_subset(self)

    def is_disjoint(self, other: 'HashSet') -> bool:
        return not self.any(other.contains)

    def extend(self, items: Iterable[Any]):
        for value in items:
            self.insert(value)

    def iter(self) -> Sequence:
        return DictViewSource(self, self._data.keys(), "iter")

    def map(self, fn: Callable[[Any], Any]) -> 'HashSet':
        """Set of ``fn(x)``; results that collide collapse into one element."""
        return self.iter().map(fn).collect_set()

    def filter(self, predicate: Callable[[Any], bool]) -> 'HashSet':
        return self.iter().filter(predicate).collect_set()

    def for_each(self, fn: Callable[[Any], Any]):
        self.iter().for_each(fn)

    def any(self, predicate: Callable[[Any], bool]) -> bool:
        return self.iter().any(predicate)

    def all(self, predicate: Callable[[Any], bool]) -> bool:
        return self.iter().all(predicate)

    def clone(self) -> 'HashSet':
        return HashSet(self._data)

    def to_list(self) -> List[Any]:
        return list(self._data)

    def to_vec(self):
        return self.iter().collect_vec()

    def __len__(self):
        return len(self._data)

    def __contains__(self, value: Any):
        return value in self._data

    def __iter__(self):
        return self.iter()

    def __eq__(self, other):
        if isinstance(other, HashSet):
            return self._data.keys() == other._data.keys()
        if isinstance(other, (set, frozenset)):
            return self._data.keys() == other
        return NotImplemented

    def __repr__(self):
        return f"HashSet({list(self._data)!r})"

    def __str__(self):
        return "{" + ", ".join(str(value) for value in self._data) + "}"
