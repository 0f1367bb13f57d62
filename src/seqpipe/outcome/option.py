"""Presence/absence container.

An Option is exactly one of ``Some(value)`` or ``Nothing()``.  Both variants
are frozen pydantic models, so they compare by value and cannot be modified
after construction.  ``Some`` refuses a ``None`` payload; absence is always
spelled ``Nothing()``.
"""
import logging
from typing import Any, Callable, ClassVar, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from seqpipe.errors import ContractViolation, PanicError

logger = logging.getLogger(__name__)


class Option(BaseModel):
    """Common behaviour of ``Some`` and ``Nothing``.

    Combinators act on the matching variant only and pass the other variant
    through untouched, so checks can be chained without branching:

        Some(4).map(lambda x: x * 2).filter(lambda x: x > 5).unwrap_or(0)  # 8
        Nothing().map(lambda x: x * 2).unwrap_or(0)                        # 0
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    TAG: ClassVar[str] = ""

    @property
    def tag(self) -> str:
        """Variant name, ``"Some"`` or ``"None"``."""
        return self.TAG

    def is_some(self) -> bool:
        return isinstance(self, Some)

    def is_none(self) -> bool:
        return isinstance(self, Nothing)

    def is_some_and(self, predicate: Callable[[Any], bool]) -> bool:
        return self.is_some() and bool(predicate(self.value))

    def unwrap(self) -> Any:
        if self.is_some():
            return self.value
        raise PanicError("called `Option.unwrap()` on a `None` value")

    def expect(self, msg: str) -> Any:
        if self.is_some():
            return self.value
        raise PanicError(msg)

    def unwrap_or(self, default: Any) -> Any:
        return self.value if self.is_some() else default

    def unwrap_or_else(self, fn: Callable[[], Any]) -> Any:
        return self.value if self.is_some() else fn()

    def map(self, fn: Callable[[Any], Any]) -> "Option":
        if self.is_some():
            return Some(fn(self.value))
        return self

    def map_or(self, default: Any, fn: Callable[[Any], Any]) -> Any:
        return fn(self.value) if self.is_some() else default

    def map_or_else(self, default_fn: Callable[[], Any], fn: Callable[[Any], Any]) -> Any:
        return fn(self.value) if self.is_some() else default_fn()

    def and_then(self, fn: Callable[[Any], "Option"]) -> "Option":
        """Chain a function that itself returns an Option."""
        if self.is_some():
            return fn(self.value)
        return self

    def or_else(self, fn: Callable[[], "Option"]) -> "Option":
        if self.is_none():
            return fn()
        return self

    def and_option(self, other: "Option") -> "Option":
        return other if self.is_some() else self

    def or_option(self, other: "Option") -> "Option":
        return self if self.is_some() else other

    def xor(self, other: "Option") -> "Option":
        if self.is_some() and other.is_none():
            return self
        if self.is_none() and other.is_some():
            return other
        return Nothing()

    def filter(self, predicate: Callable[[Any], bool]) -> "Option":
        if self.is_some() and predicate(self.value):
            return self
        return Nothing()

    def match(self, patterns: Optional[Mapping[str, Callable]] = None, **handlers) -> Any:
        """Dispatch on the variant.

        ``patterns`` maps variant names (``"Some"``, ``"None"``) to callables;
        keyword handlers are merged on top.  The ``Some`` handler receives the
        payload, the ``None`` handler receives nothing.  When no handler is
        given for the current variant, nothing is called and None is returned.
        """
        table = {**(patterns or {}), **handlers}
        handler = table.get(self.tag)
        if handler is None:
            return None
        return handler(self.value) if self.is_some() else handler()

    def ok_or(self, error: Any):
        """Convert to a Result, using ``error`` when absent."""
        from seqpipe.outcome.result import Ok, Err
        return Ok(self.value) if self.is_some() else Err(error)

    def ok_or_else(self, error_fn: Callable[[], Any]):
        from seqpipe.outcome.result import Ok, Err
        return Ok(self.value) if self.is_some() else Err(error_fn())

    def transpose(self):
        """Turn ``Option[Result]`` into ``Result[Option]``."""
        from seqpipe.outcome.result import Ok, Err, Result
        if self.is_none():
            return Ok(Nothing())
        inner = self.value
        if not isinstance(inner, Result):
            raise ContractViolation("transpose called on non-Result inner value")
        if inner.is_ok():
            return Ok(from_nullable(inner.value))
        return Err(inner.error)

    def flatten(self) -> "Option":
        """Remove one level of nesting from ``Option[Option]``."""
        if self.is_some() and isinstance(self.value, Option):
            return self.value
        return self

    def iter(self):
        """A sequence of zero or one element."""
        from seqpipe.seq import sources
        return sources.once(self.value) if self.is_some() else sources.empty()


class Some(Option):
    """The present variant."""

    TAG: ClassVar[str] = "Some"
    value: Any

    def __init__(self, value: Any, **data):
        if value is None:
            raise ContractViolation("cannot create Some with a None value, use Nothing instead")
        super().__init__(value=value, **data)

    def __repr__(self) -> str:
        return f"Some({self.value!r})"

    __str__ = __repr__


class Nothing(Option):
    """The absent variant."""

    TAG: ClassVar[str] = "None"

    def __repr__(self) -> str:
        return "Nothing"

    __str__ = __repr__


def from_nullable(value: Any) -> Option:
    """``Nothing()`` for None, ``Some(value)`` otherwise."""
    return Nothing() if value is None else Some(value)
