import logging
from typing import Any, Callable, Iterable, Optional, Tuple

from greenlet import greenlet

from seqpipe.seq.core import EXHAUSTED, Sequence, as_sequence

logger = logging.getLogger(__name__)


class _FailedStream(Sequence):
    """Sequence handed to the bypass handler.

    Each pull switches back to the pulling greenlet to ask for the next
    element that failed the predicate.
    """

    def __init__(self, outer: greenlet):
        self._outer = outer

    def _advance(self) -> Any:
        msg_type, value = self._outer.switch(("need_item", None))
        if msg_type == "item":
            return value
        if msg_type == "end":
            return EXHAUSTED
        raise RuntimeError(f"Unexpected message to stream: {msg_type}")


class BypassAdapter(Sequence):
    """
    upstream:  input sequence
    predicate: function(item) -> bool
    handler:   function(sequence_of_failed_items) -> iterable

    Behavior:
      - Items with predicate(item) == True are passed through directly.
      - Items with predicate(item) == False are sent to `handler`, which is
        called exactly once with a single sequence over the failed items.
      - The outputs of `handler` are interleaved with bypassed items in the
        order implied by the original stream.
      - If no item ever fails, the handler is never called.

    The handler runs in its own greenlet so it can be written as ordinary
    pull-style code.  Every pull must come from the same greenlet.
    """

    def __init__(self, upstream: Sequence, predicate: Callable[[Any], bool],
                 handler: Callable[[Sequence], Iterable[Any]]):
        self._upstream = upstream
        self._predicate = predicate
        self._handler = handler
        self._handler_gl: Optional[greenlet] = None
        self._message: Tuple[str, Any] = ("idle", None)
        self._first_failed = None
        self._first_failed_pending = False

    def _upstreams(self) -> Tuple[Sequence, ...]:
        return (self._upstream,)

    def _run_handler(self, outer: greenlet):
        stream = _FailedStream(outer)
        for out in as_sequence(self._handler(stream)):
            outer.switch(("output", out))
        return ("handler_done", None)

    def _start_handler(self, first_failed: Any):
        logger.debug(f"Starting bypass handler {getattr(self._handler, '__name__', self._handler)}")
        self._first_failed = first_failed
        self._first_failed_pending = True
        outer = greenlet.getcurrent()
        self._handler_gl = greenlet(self._run_handler)
        # The handler immediately asks for its first item.
        self._message = self._handler_gl.switch(outer)

    def _advance(self) -> Any:
        # Phase 1: pass items through until the first failed one.
        if self._handler_gl is None:
            while True:
                item = self._upstream.pull()
                if item is EXHAUSTED:
                    return EXHAUSTED
                if self._predicate(item):
                    return item
                self._start_handler(item)
                break

        # Phase 2: cooperate with the handler.
        while True:
            msg_type, payload = self._message
            if msg_type == "need_item":
                if self._first_failed_pending:
                    next_failed = self._first_failed
                    self._first_failed = None
                    self._first_failed_pending = False
                else:
                    item = self._upstream.pull()
                    if item is EXHAUSTED:
                        self._message = self._handler_gl.switch(("end", None))
                        continue
                    if self._predicate(item):
                        # Message stays "need_item"; the next pull resumes scanning.
                        return item
                    next_failed = item
                self._message = self._handler_gl.switch(("item", next_failed))
            elif msg_type == "output":
                self._message = ("resume", None)
                return payload
            elif msg_type == "resume":
                self._message = self._handler_gl.switch()
            elif msg_type == "handler_done":
                return EXHAUSTED
            else:
                raise RuntimeError(f"Unexpected message from handler: {msg_type}")


def bypass(source: Iterable[Any], predicate: Callable[[Any], bool],
           handler: Callable[[Sequence], Iterable[Any]]) -> Sequence:
    """Pass items satisfying ``predicate`` straight through and feed the rest to ``handler``.

    ``handler`` is called once with a sequence of the failing items; whatever
    it yields is interleaved with the passed-through items in stream order.

    Example:
        out = bypass([2, 3, 4, 5], lambda x: x % 2 == 0,
                     lambda odd: (x * 10 for x in odd))
        out.collect()   # [2, 30, 4, 50]
    """
    return BypassAdapter(as_sequence(source), predicate, handler)
