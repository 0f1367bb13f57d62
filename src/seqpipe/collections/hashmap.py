"""Key-value map.

Backed by a dict, so keys must be hashable.  Neither keys nor values may be
None: a missing entry is reported as ``Nothing()``.  Iteration visits every
entry exactly once; no particular order is promised.
"""
import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from seqpipe.collections.base import DictViewSource, TrackedCollection
from seqpipe.outcome.option import Nothing, Option, Some
from seqpipe.seq.core import Sequence

logger = logging.getLogger(__name__)


class HashMap(TrackedCollection):

    def __init__(self, entries: Optional[Iterable[Tuple[Any, Any]]] = None):
        self._data: Dict[Any, Any] = {}
        if entries is not None:
            self.extend(entries)

    @classmethod
    def from_iterable(cls, entries: Iterable[Tuple[Any, Any]]) -> 'HashMap':
        """Build from ``(key, value)`` pairs; later pairs overwrite earlier ones."""
        return cls(entries)

    @classmethod
    def from_mapping(cls, mapping: Mapping[Any, Any]) -> 'HashMap':
        return cls(mapping.items())

    def len(self) -> int:
        return len(self._data)

    def is_empty(self) -> bool:
        return not self._data

    def insert(self, key: Any, value: Any) -> Option:
        """Store ``value`` under ``key`` and return the previous value, if any."""
        self._check_value(key, "key")
        self._check_value(value)
        old = self.get(key)
        self._data[key] = value
        if old.is_none():
            self._modified()
        return old

    def get(self, key: Any) -> Option:
        if key in self._data:
            return Some(self._data[key])
        return Nothing()

    def get_entry(self, key: Any) -> Option:
        """``Some((key, value))`` for a stored key."""
        if key in self._data:
            return Some((key, self._data[key]))
        return Nothing()

    def remove(self, key: Any) -> Option:
        if key not in self._data:
            return Nothing()
        value = self._data.pop(key)
        self._modified()
        return Some(value)

    def contains_key(self, key: Any) -> bool:
        return key in self._data

    def get_or_insert(self, key: Any, default: Any) -> Any:
        if key not in self._data:
            self.insert(key, default)
        return self._data[key]

    def get_or_insert_with(self, key: Any, fn: Callable[[], Any]) -> Any:
        """Like get_or_insert, but ``fn`` only runs when the key is missing."""
        if key not in self._data:
            self.insert(key, fn())
        return self._data[key]

    def clear(self):
        if self._data:
            self._data = {}
            self._modified()

    def retain(self, predicate: Callable[[Any, Any], bool]):
        """Drop every entry for which ``predicate(key, value)`` is false."""
        doomed = [key for key, value in self._data.items() if not predicate(key, value)]
        for key in doomed:
            del self._data[key]
        if doomed:
            self._modified()

    def extend(self, entries: Any):
        """Insert all entries from another HashMap, a mapping, or an iterable of pairs."""
        if isinstance(entries, HashMap):
            entries = entries.to_dict().items()
        elif isinstance(entries, Mapping):
            entries = entries.items()
        for key, value in entries:
            self.insert(key, value)

    def iter(self) -> Sequence:
        """A sequence of ``(key, value)`` tuples."""
        return DictViewSource(self, self._data.items(), "iter")

    def keys(self) -> Sequence:
        return DictViewSource(self, self._data.keys(), "keys")

    def values(self) -> Sequence:
        return DictViewSource(self, self._data.values(), "values")

    def map(self, fn: Callable[[Any, Any], Any]) -> 'HashMap':
        """New map with the same keys and values ``fn(key, value)``."""
        return self.iter().map(lambda kv: (kv[0], fn(kv[0], kv[1]))).collect_map()

    def filter(self, predicate: Callable[[Any, Any], bool]) -> 'HashMap':
        return self.iter().filter(lambda kv: predicate(kv[0], kv[1])).collect_map()

    def for_each(self, fn: Callable[[Any, Any], Any]):
        self.iter().for_each(lambda kv: fn(kv[0], kv[1]))

    def any(self, predicate: Callable[[Any, Any], bool]) -> bool:
        return self.iter().any(lambda kv: predicate(kv[0], kv[1]))

    def all(self, predicate: Callable[[Any, Any], bool]) -> bool:
        return self.iter().all(lambda kv: predicate(kv[0], kv[1]))

    def clone(self) -> 'HashMap':
        return HashMap(self._data.items())

    def to_dict(self) -> Dict[Any, Any]:
        return dict(self._data)

    def keys_vec(self):
        return self.keys().collect_vec()

    def values_vec(self):
        return self.values().collect_vec()

    def __len__(self):
        return len(self._data)

    def __getitem__(self, key: Any) -> Any:
        return self._data[key]

    def __setitem__(self, key: Any, value: Any):
        self.insert(key, value)

    def __delitem__(self, key: Any):
        if self.remove(key).is_none():
            raise KeyError(key)

    def __contains__(self, key: Any):
        return key in self._data

    def __iter__(self):
        return self.keys()

    def __eq__(self, other):
        if isinstance(other, HashMap):
            return self._data == other._data
        if isinstance(other, dict):
            return self._data == other
        return NotImplemented

    def __repr__(self):
        return f"HashMap({self._data!r})"

    def __str__(self):
        return "{" + ", ".join(f"{key}: {value}" for key, value in self._data.items()) + "}"
