from seqpipe.seq.core import Sequence, EXHAUSTED, IterableSource, as_sequence
from seqpipe.seq import sources
