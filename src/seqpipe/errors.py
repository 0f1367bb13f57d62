"""Error taxonomy for seqpipe.

Three kinds of failure come out of the library:

- empty-source errors, raised by terminal consumers such as ``reduce``,
  ``min`` and ``max`` when there is nothing to consume;
- contract violations, raised when a container is built with an absent
  payload (``Some(None)``) or ``None`` is stored in a collection;
- concurrent modification, raised when a collection is structurally changed
  while a sequence over it is still being drained.

Exceptions raised by user supplied callbacks are never wrapped. They
propagate unchanged out of whichever ``pull()`` invoked them.
"""
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class SeqpipeError(Exception):
    """Root of all errors raised by seqpipe itself."""


class PanicError(SeqpipeError, RuntimeError):
    """A fatal abort, such as unwrapping an absent value."""


class EmptySourceError(PanicError):
    """A terminal consumer that needs at least one element found none."""


class ContractViolation(PanicError, ValueError):
    """A value was constructed or stored in a way its type forbids."""


class ConcurrentModificationError(SeqpipeError, RuntimeError):
    """A collection was structurally modified while a sequence over it was live."""


def panic(msg: str):
    """Abort with a PanicError carrying ``msg``."""
    raise PanicError(f"panicked: {msg}")


def catch_panic(fn: Callable[..., Any], *args, **kwargs):
    """Run ``fn`` and capture its outcome as a Result.

    Any exception raised by ``fn`` becomes ``Err(exception)``; a normal return
    becomes ``Ok(value)``.  This is the boundary callers use when they want a
    whole pipeline run to report failure as a value instead of raising.
    """
    from seqpipe.outcome.result import attempt

    outcome = attempt(fn, *args, **kwargs)
    if outcome.is_err():
        logger.debug(f"Captured {type(outcome.error).__name__} from {getattr(fn, '__name__', fn)}: {outcome.error}")
    return outcome
