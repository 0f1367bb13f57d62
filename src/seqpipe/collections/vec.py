"""Growable ordered array.

``Vec`` keeps insertion order and uses 0-based indices.  Lookups that can miss
(``get``, ``pop``, ``first`` ...) return an Option; operations that require a
valid index (``set``, ``insert``, ``remove``) raise IndexError instead.
"""
import bisect
import logging
from typing import Any, Callable, Iterable, List, Optional

from seqpipe.collections.base import GuardedSource, TrackedCollection
from seqpipe.outcome.option import Nothing, Option, Some
from seqpipe.seq.core import EXHAUSTED, Sequence

logger = logging.getLogger(__name__)


class VecSource(GuardedSource):
    """Index walk over a Vec, bounded by the length at creation time."""

    def __init__(self, vec: 'Vec'):
        super().__init__(vec)
        self._index = 0
        self._length = len(vec)

    def _advance(self) -> Any:
        self._check_unmodified()
        data = self._collection._data
        if self._index >= self._length or self._index >= len(data):
            return EXHAUSTED
        value = data[self._index]
        self._index += 1
        return value


class Vec(TrackedCollection):

    def __init__(self, items: Optional[Iterable[Any]] = None):
        self._data: List[Any] = []
        self._capacity = 0
        if items is not None:
            self.extend(items)

    @classmethod
    def from_iterable(cls, items: Iterable[Any]) -> 'Vec':
        return cls(items)

    @classmethod
    def with_capacity(cls, capacity: int) -> 'Vec':
        """An empty Vec.  ``capacity`` is only a hint."""
        vec = cls()
        vec._capacity = capacity
        return vec

    def capacity(self) -> int:
        return max(self._capacity, len(self._data))

    def len(self) -> int:
        return len(self._data)

    def is_empty(self) -> bool:
        return not self._data

    def _check_index(self, index: int, upper: int):
        if index < 0 or index >= upper:
            raise IndexError(f"index out of bounds: index {index}, len {len(self._data)}")

    def push(self, value: Any):
        self._check_value(value)
        self._data.append(value)
        self._modified()

    def pop(self) -> Option:
        if not self._data:
            return Nothing()
        value = self._data.pop()
        self._modified()
        return Some(value)

    def get(self, index: int) -> Option:
        if 0 <= index < len(self._data):
            return Some(self._data[index])
        return Nothing()

    def set(self, index: int, value: Any):
        self._check_index(index, len(self._data))
        self._check_value(value)
        self._data[index] = value

    def first(self) -> Option:
        return self.get(0)

    def last(self) -> Option:
        return self.get(len(self._data) - 1)

    def insert(self, index: int, value: Any):
        self._check_index(index, len(self._data) + 1)
        self._check_value(value)
        self._data.insert(index, value)
        self._modified()

    def remove(self, index: int) -> Any:
        self._check_index(index, len(self._data))
        value = self._data.pop(index)
        self._modified()
        return value

    def swap(self, i: int, j: int):
        self._check_index(i, len(self._data))
        self._check_index(j, len(self._data))
        self._data[i], self._data[j] = self._data[j], self._data[i]

    def clear(self):
        if self._data:
            self._data = []
            self._modified()

    def truncate(self, length: int):
        if length < len(self._data):
            del self._data[length:]
            self._modified()

    def retain(self, predicate: Callable[[Any], bool]):
        """Keep only the elements for which ``predicate`` is true, in order."""
        kept = [value for value in self._data if predicate(value)]
        if len(kept) != len(self._data):
            self._data = kept
            self._modified()

    def append(self, other: 'Vec'):
        """Copy every element of ``other`` onto the end."""
        self.extend(other.to_list())

    def extend(self, items: Iterable[Any]):
        for value in items:
            self.push(value)

    def resize(self, new_len: int, default: Any):
        if new_len == len(self._data):
            return
        if new_len < len(self._data):
            self.truncate(new_len)
        else:
            self._check_value(default)
            self._data.extend([default] * (new_len - len(self._data)))
            self._modified()

    def split_off(self, at: int) -> 'Vec':
        """Move the elements from ``at`` onward into a new Vec."""
        self._check_index(at, len(self._data) + 1)
        tail = Vec(self._data[at:])
        self.truncate(at)
        return tail

    def reverse(self):
        self._data.reverse()

    def sort(self, key: Optional[Callable[[Any], Any]] = None, reverse: bool = False):
        self._data.sort(key=key, reverse=reverse)

    def binary_search(self, value: Any, key: Optional[Callable[[Any], Any]] = None) -> Option:
        """Index of ``value`` in a Vec sorted by ``key``, or Nothing()."""
        key = key or (lambda x: x)
        target = key(value)
        index = bisect.bisect_left(self._data, target, key=key)
        if index < len(self._data) and key(self._data[index]) == target:
            return Some(index)
        return Nothing()

    def contains(self, value: Any) -> bool:
        return value in self._data

    def position(self, predicate: Callable[[Any], bool]) -> Option:
        return self.iter().position(predicate)

    def map(self, fn: Callable[[Any], Any]) -> 'Vec':
        return self.iter().map(fn).collect_vec()

    def filter(self, predicate: Callable[[Any], bool]) -> 'Vec':
        return self.iter().filter(predicate).collect_vec()

    def fold(self, init: Any, fn: Callable[[Any, Any], Any]) -> Any:
        return self.iter().fold(init, fn)

    def for_each(self, fn: Callable[[Any], Any]):
        self.iter().for_each(fn)

    def any(self, predicate: Callable[[Any], bool]) -> bool:
        return self.iter().any(predicate)

    def all(self, predicate: Callable[[Any], bool]) -> bool:
        return self.iter().all(predicate)

    def clone(self) -> 'Vec':
        return Vec(self._data)

    def to_list(self) -> List[Any]:
        return list(self._data)

    def iter(self) -> Sequence:
        """A sequence over the elements in index order."""
        return VecSource(self)

    def __len__(self):
        return len(self._data)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Vec(self._data[index])
        return self._data[index]

    def __setitem__(self, index, value: Any):
        if isinstance(index, slice):
            values = list(value)
            for item in values:
                self._check_value(item)
            old_len = len(self._data)
            self._data[index] = values
            if len(self._data) != old_len:
                self._modified()
            return
        self._check_value(value)
        self._data[index] = value

    def __contains__(self, value: Any):
        return self.contains(value)

    def __iter__(self):
        return self.iter()

    def __eq__(self, other):
        if isinstance(other, Vec):
            return self._data == other._data
        if isinstance(other, list):
            return self._data == other
        return NotImplemented

    def __repr__(self):
        return f"Vec({self._data!r})"

    def __str__(self):
        return "[" + ", ".join(str(value) for value in self._data) + "]"
