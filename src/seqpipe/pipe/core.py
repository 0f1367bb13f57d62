"""Reusable pipeline stages.

A Sequence is single-use: once drained it stays exhausted.  Segments are the
reusable counterpart.  A segment describes a transformation from one
sequence to another and can be applied to any number of sequences, and
segments chain with ``|`` into a Pipeline:

    squares_of_evens = filterItems(predicate=is_even) | mapItems(fn=square)
    squares_of_evens(sources.range_between(1, 9)).collect()   # [4, 16, 36, 64]
    squares_of_evens([3, 4]).collect()                         # [16]

Sources are the reusable counterpart of source sequences: each call to a
source produces a fresh sequence, so ``myNumbers() | firstN(n=3)`` can be run
repeatedly.
"""
import logging
from abc import ABC, abstractmethod
from typing import (
    Any, TypeVar, Generic, Iterable, List,
    Union, Callable, Type, Concatenate, ParamSpec, Annotated
)

from seqpipe.seq.core import Sequence, as_sequence
from seqpipe.seq.sources import empty

logger = logging.getLogger(__name__)

T = TypeVar('T')
U = TypeVar('U')
P = ParamSpec('P')


class AbstractSegment(ABC, Generic[T, U]):
    """Abstract base class for all segments.

    A segment turns an input sequence into an output sequence.  The number of
    output elements need not match the number of input elements, and the
    segment may stop pulling from its input early.

    Segments can be chained together to create pipelines:
        pipeline = segment1 | segment2 | segment3
    """

    @abstractmethod
    def transform(self, input_seq: Annotated[Sequence[T], "The sequence of input items to process"]) -> Iterable[U]:
        """Transform input items into output items.

        Implementations may return a Sequence (typically by chaining adapters
        on ``input_seq``) or any iterable, such as a generator; the result is
        wrapped into a Sequence by ``__call__``.

        Examples:
            # Adapter based
            def transform(self, input_seq):
                return input_seq.map(str.upper)

            # Generator based
            def transform(self, input_seq):
                for item in input_seq:
                    yield item
                    yield item * 2
        """

    def __or__(self, other: 'AbstractSegment[U, Any]') -> 'Pipeline':
        """Allows chaining operations using the | (or) operator."""
        return Pipeline(self, other)

    def __call__(self, input_iter: Iterable[T] = None) -> Sequence[U]:
        logger.debug(f"Running segment {self.__class__.__name__}")
        input_seq = empty() if input_iter is None else as_sequence(input_iter)
        return as_sequence(self.transform(input_seq))

    def as_function(self,
                    single_in: Annotated[bool, "If True, the function will expect a single input argument."] = False,
                    single_out: Annotated[bool, "If True, the function will return a single output."] = False) -> Callable:
        """Convert the segment to a plain callable.

        By default, the function will expect an iterable and return a list.
        single_in and single_out can be set to True to expect a single input and return a single output.
        """
        def func(item=None):
            results = self([item] if single_in else item).collect()
            if single_out:
                if len(results) != 1:
                    raise ValueError(f"Expected 1 result, got {len(results)}")
                return results[0]
            return results
        return func


class AbstractSource(ABC, Generic[U]):
    """Abstract base class for reusable sequence factories that start a pipeline.

    Each call produces a new Sequence, so a source can feed any number of
    pipeline runs.
    """

    @abstractmethod
    def generate(self) -> Iterable[U]:
        """Produce the items for one run.

        May return a Sequence or any iterable, finite or not.

        Examples:
            # Adapter based
            def generate(self):
                return sources.range_between(1, self.n)

            # Generator based
            def generate(self):
                counter = 0
                while True:
                    yield counter
                    counter += 1
        """

    def __or__(self, other: 'AbstractSegment[U, Any]') -> 'Pipeline':
        """Allows chaining operations using the | (or) operator."""
        return Pipeline(self, other)

    def __call__(self) -> Sequence[U]:
        logger.debug(f"Running source {self.__class__.__name__}")
        return as_sequence(self.generate())


def source(*decorator_args: Annotated[Any, "Positional arguments for the source"],
           **decorator_kwargs: Annotated[Any, "Keyword arguments for the source"]):
    """Decorator to convert a function into a source class with optional parameters.

    Can be used with or without arguments:

        # Without arguments - function takes no parameters
        @source
        def myNumbers():
            yield from range(10)

        # With arguments - decorator kwargs are defaults, constructor args override them
        @source(step=1)
        def evens(limit: int, step: int):
            return sources.range_between(0, limit, 2 * step)

    Returns:
        A Source class.  Instances are called with no arguments to produce a
        fresh Sequence, and chain with segments using ``|``.
    """
    if len(decorator_args) == 1 and callable(decorator_args[0]):
        func = decorator_args[0]

        class FunctionSource(AbstractSource[U]):

            def generate(self) -> Iterable[U]:
                return func()

        FunctionSource.__name__ = f"{func.__name__}Source"
        FunctionSource.__doc__ = func.__doc__
        FunctionSource._original_func = func
        return FunctionSource

    def decorator(func: Callable[P, Iterable[U]]) -> Type[AbstractSource[U]]:
        class ParameterizedSource(AbstractSource[U]):
            def __init__(self, *init_args, **init_kwargs):
                merged_kwargs = {**decorator_kwargs, **init_kwargs}
                self._func = lambda: func(*init_args, **merged_kwargs)

            def generate(self) -> Iterable[U]:
                return self._func()

        ParameterizedSource.__name__ = f"{func.__name__}Source"
        ParameterizedSource.__doc__ = func.__doc__
        ParameterizedSource._original_func = func
        return ParameterizedSource

    return decorator


def segment(*decorator_args: Annotated[Any, "Positional arguments for the segment"],
            **decorator_kwargs: Annotated[Any, "Keyword arguments for the segment"]):
    """Decorator to convert a function into a segment class with optional parameters.

    The decorated function receives the input Sequence as its first argument
    and returns a Sequence or any iterable.

        # Without arguments
        @segment
        def uppercase(items):
            return items.map(str.upper)

        # With arguments - decorator kwargs are defaults
        @segment(multiplier=2)
        def scale(items, multiplier):
            for item in items:
                yield item * multiplier

    Returns:
        A Segment class.  Instances are applied to sequences or iterables and
        chain with other segments using ``|``.
    """
    if len(decorator_args) == 1 and callable(decorator_args[0]):
        func = decorator_args[0]

        class FunctionSegment(AbstractSegment[T, U]):

            def transform(self, input_seq: Sequence[T]) -> Iterable[U]:
                return func(input_seq)

        FunctionSegment.__name__ = f"{func.__name__}Segment"
        FunctionSegment.__doc__ = func.__doc__
        FunctionSegment._original_func = func
        return FunctionSegment

    def decorator(func: Callable[Concatenate[Sequence[T], P], Iterable[U]]) -> Type[AbstractSegment[T, U]]:
        class ParameterizedSegment(AbstractSegment[T, U]):
            def __init__(self, *init_args, **init_kwargs):
                # Constructor arguments take precedence over decorator defaults
                merged_kwargs = {**decorator_kwargs, **init_kwargs}
                self._func = lambda x: func(x, *init_args, **merged_kwargs)

            def transform(self, input_seq: Sequence[T]) -> Iterable[U]:
                return self._func(input_seq)

        ParameterizedSegment.__name__ = f"{func.__name__}Segment"
        ParameterizedSegment.__doc__ = func.__doc__
        ParameterizedSegment._original_func = func
        return ParameterizedSegment

    return decorator


class Pipeline(AbstractSegment):
    """A chain of operations where each draws from the output of the previous one.

    The first operation may be a source, in which case the pipeline is
    called with no input.  Nothing runs until the returned Sequence is pulled.

    Examples:
        pipeline = myNumbers() | scale(multiplier=3) | firstN(n=2)
        pipeline().collect()
    """

    def __init__(self, *operations: Union[AbstractSource, AbstractSegment]):
        self.operations: List[Union[AbstractSource, AbstractSegment]] = []
        for op in operations:
            # Flatten nested pipelines so a | (b | c) and (a | b) | c are the same chain
            if isinstance(op, Pipeline):
                self.operations.extend(op.operations)
            else:
                self.operations.append(op)
        for op in self.operations[1:]:
            if isinstance(op, AbstractSource):
                raise ValueError(f"A source can only start a pipeline, found {op.__class__.__name__} later")

    def transform(self, input_seq: Sequence = None) -> Sequence:
        current = input_seq
        for op in self.operations:
            if isinstance(op, AbstractSource):
                current = op()
            else:
                current = op(current)
        return current

    def __or__(self, other: Union[AbstractSource, AbstractSegment]) -> 'Pipeline':
        return Pipeline(*self.operations, other)
