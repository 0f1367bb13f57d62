import logging

from seqpipe.errors import (
    SeqpipeError, PanicError, EmptySourceError, ContractViolation,
    ConcurrentModificationError, panic, catch_panic
)
from seqpipe.outcome import Option, Some, Nothing, from_nullable, Result, Ok, Err, attempt
from seqpipe.seq.core import Sequence, EXHAUSTED, as_sequence
from seqpipe.seq.sources import (
    range_between, range_count, count_from, from_collection, from_iterable,
    from_function, from_pairs, repeat_value, once, empty, random_ints
)
from seqpipe.collections import Vec, HashMap, HashSet
from seqpipe.pipe.core import segment, source, AbstractSegment, AbstractSource, Pipeline
from seqpipe.util.iterators import bypass

logger = logging.getLogger(__name__)
