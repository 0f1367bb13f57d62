from seqpipe.outcome.option import Option, Some, Nothing, from_nullable
from seqpipe.outcome.result import Result, Ok, Err, collect, attempt
