"""Success/failure container.

A Result is exactly one of ``Ok(value)`` or ``Err(error)``.  Like Option it is
an immutable pydantic model.  Transformers such as ``map`` and ``map_err`` touch
only their own variant, and ``and_then`` short-circuits on the first failure:

    parse(text).and_then(validate).map(normalize).unwrap_or(fallback)
"""
import logging
from typing import Any, Callable, ClassVar, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from seqpipe.errors import PanicError

logger = logging.getLogger(__name__)


class Result(BaseModel):
    """Common behaviour of ``Ok`` and ``Err``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    TAG: ClassVar[str] = ""

    @property
    def tag(self) -> str:
        """Variant name, ``"Ok"`` or ``"Err"``."""
        return self.TAG

    def is_ok(self) -> bool:
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        return isinstance(self, Err)

    def unwrap(self) -> Any:
        if self.is_ok():
            return self.value
        cause = self.error if isinstance(self.error, BaseException) else None
        raise PanicError(f"called `Result.unwrap()` on an `Err` value: {self.error}") from cause

    def unwrap_err(self) -> Any:
        if self.is_err():
            return self.error
        raise PanicError(f"called `Result.unwrap_err()` on an `Ok` value: {self.value}")

    def expect(self, msg: str) -> Any:
        if self.is_ok():
            return self.value
        raise PanicError(f"{msg}: {self.error}")

    def expect_err(self, msg: str) -> Any:
        if self.is_err():
            return self.error
        raise PanicError(msg)

    def unwrap_or(self, default: Any) -> Any:
        return self.value if self.is_ok() else default

    def unwrap_or_else(self, fn: Callable[[Any], Any]) -> Any:
        """Return the value, or compute one from the error."""
        return self.value if self.is_ok() else fn(self.error)

    def map(self, fn: Callable[[Any], Any]) -> "Result":
        if self.is_ok():
            return Ok(fn(self.value))
        return self

    def map_err(self, fn: Callable[[Any], Any]) -> "Result":
        if self.is_err():
            return Err(fn(self.error))
        return self

    def map_or(self, default: Any, fn: Callable[[Any], Any]) -> Any:
        return fn(self.value) if self.is_ok() else default

    def map_or_else(self, default_fn: Callable[[Any], Any], fn: Callable[[Any], Any]) -> Any:
        return fn(self.value) if self.is_ok() else default_fn(self.error)

    def and_then(self, fn: Callable[[Any], "Result"]) -> "Result":
        if self.is_ok():
            return fn(self.value)
        return self

    def or_else(self, fn: Callable[[Any], "Result"]) -> "Result":
        if self.is_err():
            return fn(self.error)
        return self

    def and_result(self, other: "Result") -> "Result":
        return other if self.is_ok() else self

    def or_result(self, other: "Result") -> "Result":
        return self if self.is_ok() else other

    def match(self, patterns: Optional[Mapping[str, Callable]] = None, **handlers) -> Any:
        """Dispatch on the variant.

        Handlers are looked up by ``"Ok"``/``"Err"`` in ``patterns`` and then in
        the keyword handlers.  A variant without a handler is a no-op that
        returns None.
        """
        table = {**(patterns or {}), **handlers}
        handler = table.get(self.tag)
        if handler is None:
            return None
        return handler(self.value if self.is_ok() else self.error)

    def ok(self):
        """Success payload as an Option; an Err becomes ``Nothing()``."""
        from seqpipe.outcome.option import Nothing, from_nullable
        return from_nullable(self.value) if self.is_ok() else Nothing()

    def err(self):
        """Failure payload as an Option; an Ok becomes ``Nothing()``."""
        from seqpipe.outcome.option import Nothing, from_nullable
        return from_nullable(self.error) if self.is_err() else Nothing()

    def iter(self):
        """A sequence holding the success payload, empty for Err."""
        from seqpipe.seq import sources
        return sources.once(self.value) if self.is_ok() else sources.empty()


class Ok(Result):
    TAG: ClassVar[str] = "Ok"
    value: Any = None

    def __init__(self, value: Any = None, **data):
        super().__init__(value=value, **data)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"

    __str__ = __repr__


class Err(Result):
    TAG: ClassVar[str] = "Err"
    error: Any

    def __init__(self, error: Any, **data):
        super().__init__(error=error, **data)

    def __repr__(self) -> str:
        return f"Err({self.error!r})"

    __str__ = __repr__


def collect(results: Iterable[Result]) -> Result:
    """Gather many Results into one.

    Returns ``Ok(list_of_values)`` when every input is Ok, or the first Err
    encountered.  Inputs after the first Err are not consumed.
    """
    values = []
    for res in results:
        if res.is_err():
            return Err(res.error)
        values.append(res.value)
    return Ok(values)


def attempt(fn: Callable[..., Any], *args, **kwargs) -> Result:
    """Call ``fn`` and capture a raised exception as ``Err``."""
    try:
        return Ok(fn(*args, **kwargs))
    except Exception as e:
        return Err(e)
