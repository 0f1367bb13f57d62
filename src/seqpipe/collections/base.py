"""Shared plumbing for the eager collections.

Every collection counts its structural modifications (anything that changes
its size).  A sequence created by ``iter()`` remembers the count it started
from; when the ``iteration_guard`` setting is on, a pull that finds the count
changed raises ConcurrentModificationError instead of producing an element.
"""
import logging
from typing import Any, Iterable

from seqpipe.errors import ConcurrentModificationError, ContractViolation
from seqpipe.seq.core import EXHAUSTED, Sequence
from seqpipe.util.config import get_flag
from seqpipe.util.constants import ITERATION_GUARD

logger = logging.getLogger(__name__)


class TrackedCollection:
    """Mixin holding the structural modification counter."""

    _version: int = 0

    def _modified(self):
        self._version += 1

    def _check_value(self, value: Any, what: str = "value"):
        if value is None:
            raise ContractViolation(
                f"cannot store None as a {type(self).__name__} {what}; absence is expressed with Nothing()")


class GuardedSource(Sequence):
    """Base for sequences that walk a TrackedCollection.

    ``view`` names the collection method that created the sequence and only
    shows up in ``repr()``.
    """

    def __init__(self, collection: TrackedCollection, view: str = "iter"):
        self._collection = collection
        self._view = view
        self._start_version = collection._version
        self._guard = get_flag(ITERATION_GUARD, True)

    def _label(self) -> str:
        return f"{type(self._collection).__name__}.{self._view}"

    def _check_unmodified(self):
        if self._guard and self._collection._version != self._start_version:
            logger.warning(f"{type(self._collection).__name__} changed size while {self!r} was draining")
            raise ConcurrentModificationError(
                f"{type(self._collection).__name__} was structurally modified during iteration")


class DictViewSource(GuardedSource):
    """Walks a view (keys, values or items) of a collection's backing dict.

    With the guard off, resizing the dict mid-walk is undefined; in practice
    the dict iterator raises RuntimeError.
    """

    def __init__(self, collection: TrackedCollection, view_iterable: Iterable[Any], view: str = "iter"):
        super().__init__(collection, view)
        self._iterator = iter(view_iterable)

    def _advance(self) -> Any:
        self._check_unmodified()
        return next(self._iterator, EXHAUSTED)
