"""Standard segments for sequence pipelines."""

from typing import Any, Annotated, Callable, Iterable, Iterator, Optional
import logging
import sys
import time

from seqpipe.pipe.core import AbstractSegment, segment
from seqpipe.seq.core import Sequence
from seqpipe.util.config import configure_logger, get_config

logger = logging.getLogger(__name__)


@segment()
def mapItems(items: Sequence, fn: Annotated[Callable[[Any], Any], "Function applied to each item"]):
    """Apply ``fn`` to every item."""
    return items.map(fn)


@segment()
def filterItems(items: Sequence, predicate: Annotated[Callable[[Any], bool], "Items for which this is true are kept"]):
    """Keep the items for which ``predicate`` is true."""
    return items.filter(predicate)


@segment()
def firstN(items: Sequence, n: Annotated[int, "The number of items to yield."] = 1):
    """Yields the first n items from the input sequence.

    Useful for sampling data, testing pipelines with limited data, or bounding
    an infinite source.  No more than n items are pulled from upstream.

    Args:
        items (Sequence): The input sequence.
        n (int): The number of items to yield. Defaults to 1.
    """
    return items.take(n)


@segment()
def skipN(items: Sequence, n: Annotated[int, "The number of items to drop."] = 1):
    """Drops the first n items and yields the rest."""
    return items.skip(n)


@segment()
def everyN(items: Sequence, n: Annotated[int, "Number of items to skip between each yield"]):
    """Yield every nth item from the input sequence.

    With n=5 the items at positions 5, 10, 15 ... (1-based) are yielded.
    """
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    return items.enumerate().filter(lambda pair: pair[0] % n == 0).map(lambda pair: pair[1])


def _flatten_one(item: Any) -> Iterable[Any]:
    if isinstance(item, dict):
        return item.items()
    if isinstance(item, (str, bytes)):
        return [item]
    try:
        return iter(item)
    except TypeError:
        return [item]


@segment()
def flatten(items: Sequence):
    """Flatten one level of nesting.

    For dictionaries: yields key-value tuples (like .items())
    For iterables other than strings: yields each element
    For anything else: yields the item unchanged
    """
    return items.flat_map(_flatten_one)


@segment()
def diagPrint(
    items: Sequence,
    label: Annotated[Optional[str], "Optional label printed with each item."] = None,
    output: Annotated[
        Optional[str],
        "If 'stderr', output to stderr.  If 'stdout', output to stdout.  Otherwise write to a logger with this name.  If None or the string 'None', do not write output."
    ] = "stdout",
    level: Annotated[str, "Logging level if output is to a logger."] = "DEBUG"
):
    """Print pass-through diagnostics for each item in a sequence.

    Emits a separator, optional label, elapsed time since the last item, type,
    and value.  Items pass through unchanged and are pulled one at a time, so
    the output interleaves with whatever the downstream consumer does.

    Output routing:
    - `stdout` (default) prints to standard output.
    - `stderr` prints to standard error.
    - Any other string is treated as a logger name; messages are emitted at `level`.
    - `None` or `"None"` disables all output.
    - `config:<key>` looks up the target from `get_config()[<key>]`.
    """
    if output is not None and output.lower().startswith("config:"):
        output = get_config().get(output[len("config:"):].strip(), None)

    if output is None or output.lower() == "none":
        return items
    if output.lower() == "stderr":
        output_fn = lambda msg: print(msg, file=sys.stderr, flush=True)
    elif output.lower() == "stdout":
        output_fn = lambda msg: print(msg, file=sys.stdout, flush=True)
    else:
        output_fn = lambda msg: logging.getLogger(output).log(msg=msg, level=logging.getLevelName(level.upper()))

    last_time: Optional[float] = None

    def report(item):
        nonlocal last_time
        now = time.perf_counter()
        elapsed_str = "0.000s" if last_time is None else f"{now - last_time:.3f}s"
        last_time = now
        output_fn("================================")
        if label:
            output_fn(label)
        output_fn(f"Elapsed: {elapsed_str} since last call")
        output_fn(f"Type: {type(item)}")
        output_fn("-------\nValue:")
        output_fn(f"{item}")

    return items.inspect(report)


class ToList(AbstractSegment):
    """Drains the input sequence and emits a list of all items as its only element."""

    def transform(self, input_seq: Sequence) -> Iterator:
        yield input_seq.collect()


class ConfigureLogger(AbstractSegment):
    """Configures loggers when instantiated and passes items through unchanged.

    Args:
        logger_levels (str): Logger levels in format 'logger:level,logger:level,...'
        logger_files (str): Logger files in format 'logger:file,logger:file,...'
    """
    def __init__(self,
                 logger_levels: Annotated[Optional[str], "Logger levels in format 'logger:level,logger:level,...'"] = None,
                 logger_files: Annotated[Optional[str], "Logger files in format 'logger:file,logger:file,...'"] = None):
        super().__init__()
        self.logger_levels = logger_levels
        self.logger_files = logger_files
        configure_logger(self.logger_levels, logger_files=self.logger_files)

    def transform(self, input_seq: Sequence) -> Sequence:
        return input_seq


toList = ToList
configureLogger = ConfigureLogger
