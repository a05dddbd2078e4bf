"""Lazy sequence transformations.

Every function checks its arguments immediately and returns a generator
that does no work until it is pulled. Sources are treated as sequences of
(key, value) pairs: mappings contribute their items, results of the
key-preserving functions (map, filter, filter_not, partition) carry their
keys along, and any other iterable is keyed by position.
"""

import builtins
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Callable, Iterator, List, Optional, Tuple

from args import (
    callable_,
    expects,
    expects_optional,
    integer,
    non_negative_integer,
    positive_integer,
    sized,
    traversable,
)

logger = logging.getLogger(__name__)

_ATOMIC_ITERABLES = (str, bytes, bytearray)
_MISSING = object()


class KeyedIterator:
    """Iterator over values that remembers the key each value came from.

    Iterating yields values. ``items()`` yields the remaining
    ``(key, value)`` pairs from the same cursor, so both views advance
    together.
    """

    def __init__(self, pairs: Iterable[Tuple[Any, Any]]):
        self._pairs = iter(pairs)

    def __iter__(self):
        return self

    def __next__(self):
        return next(self._pairs)[1]

    def items(self) -> Iterator[Tuple[Any, Any]]:
        return self._pairs


def _pairs(sequence) -> Iterator[Tuple[Any, Any]]:
    if isinstance(sequence, KeyedIterator):
        return sequence.items()
    if isinstance(sequence, Mapping):
        return iter(sequence.items())
    return enumerate(sequence)


def _values(sequence) -> Iterator[Any]:
    if isinstance(sequence, Mapping):
        return iter(sequence.values())
    return iter(sequence)


def _is_nested(value) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, _ATOMIC_ITERABLES)


# --------- single-sequence transforms ----------

def map(function: Callable[[Any], Any], sequence) -> KeyedIterator:
    """Apply ``function`` to each value lazily, keeping keys."""
    expects(callable_, function, 1)
    expects(traversable, sequence, 2)
    return KeyedIterator(_map(function, sequence))


def _map(function, sequence):
    for key, value in _pairs(sequence):
        yield key, function(value)


def filter(predicate: Callable[[Any], Any], sequence) -> KeyedIterator:
    """Lazily keep the items that satisfy ``predicate``, keeping keys."""
    expects(callable_, predicate, 1)
    expects(traversable, sequence, 2)
    return KeyedIterator(_filter(predicate, sequence, True))


def filter_not(predicate: Callable[[Any], Any], sequence) -> KeyedIterator:
    """Lazily keep the items that don't satisfy ``predicate``, keeping keys."""
    expects(callable_, predicate, 1)
    expects(traversable, sequence, 2)
    return KeyedIterator(_filter(predicate, sequence, False))


def _filter(predicate, sequence, wanted):
    for key, value in _pairs(sequence):
        if bool(predicate(value)) is wanted:
            yield key, value


def take(sequence, n: int, step: int = 1) -> Iterator[Any]:
    """Return the first ``n`` items of ``sequence`` taken every ``step`` positions.

    The number of raw items scanned is bounded by ``min(len(sequence), n * step)``,
    so ``sequence`` must have a length.
    """
    expects(sized, sequence, 1)
    expects(integer, n, 2)
    expects(positive_integer, step, 3)
    return _take(sequence, n, step)


def _take(sequence, n, step):
    length = min(len(sequence), n * step)
    for counter, value in enumerate(_values(sequence)):
        if counter >= length:
            break
        if counter % step == 0:
            yield value


def take_while(predicate: Callable[[Any], Any], sequence) -> Iterator[Any]:
    """Return the longest prefix whose items all satisfy ``predicate``."""
    expects(callable_, predicate, 1)
    expects(traversable, sequence, 2)
    return _take_while(predicate, sequence)


def _take_while(predicate, sequence):
    for value in _values(sequence):
        if not predicate(value):
            return
        yield value


def drop(sequence, n: int) -> Iterator[Any]:
    """Skip the first ``n`` items by position and yield the rest."""
    expects(traversable, sequence, 1)
    expects(integer, n, 2)
    return _drop(sequence, n)


def _drop(sequence, n):
    for counter, value in enumerate(_values(sequence)):
        if counter < n:
            continue
        yield value


def drop_while(predicate: Callable[[Any], Any], sequence) -> Iterator[Any]:
    """Skip the longest prefix whose items satisfy ``predicate``, yield the rest."""
    expects(callable_, predicate, 1)
    expects(traversable, sequence, 2)
    return _drop_while(predicate, sequence)


def _drop_while(predicate, sequence):
    iterator = _values(sequence)
    for value in iterator:
        if not predicate(value):
            yield value
            break
    # predicate is not consulted again once it has failed
    yield from iterator


# --------- multi-sequence combinators ----------

def zip(sequence1, sequence2, *sequences) -> Iterator[Tuple[Any, ...]]:
    """Zip two or more sequences lazily, stopping at the shortest."""
    sequences = (sequence1, sequence2) + sequences
    for position, sequence in enumerate(sequences, 1):
        expects(traversable, sequence, position)
    return _zip(sequences)


def _zip(sequences):
    yield from builtins.zip(*[_values(sequence) for sequence in sequences])


def zip_with(function: Callable[..., Any], sequence1, sequence2, *sequences) -> Iterator[Any]:
    """Like zip(), but yield ``function(v1, ..., vK)`` instead of a tuple."""
    expects(callable_, function, 1)
    sequences = (sequence1, sequence2) + sequences
    for position, sequence in enumerate(sequences, 2):
        expects(traversable, sequence, position)
    return _zip_with(function, sequences)


def _zip_with(function, sequences):
    for values in _zip(sequences):
        yield function(*values)


# --------- structural recursion ----------

def flat_map(function: Callable[[Any], Iterable], sequence) -> Iterator[Any]:
    """Map each value to an iterable and yield the elements of all of them in order."""
    expects(callable_, function, 1)
    expects(traversable, sequence, 2)
    return _flat_map(function, sequence)


def _flat_map(function, sequence):
    for value in _values(sequence):
        yield from function(value)


def flatten(sequence, depth: Optional[int] = None) -> Iterator[Any]:
    """Flatten nested iterables.

    ``depth=None`` flattens without limit, ``depth=0`` leaves the items
    unchanged, and ``depth=D`` unwraps at most D levels. Strings and bytes
    are never unwrapped.
    """
    expects(traversable, sequence, 1)
    expects_optional(non_negative_integer, depth, 2)
    return _flatten(sequence, depth)


def _flatten(sequence, depth):
    for value in _values(sequence):
        if depth == 0 or not _is_nested(value):
            yield value
        elif depth is None:
            yield from _flatten(value, None)
        elif depth > 1:
            yield from _flatten(value, depth - 1)
        else:
            yield from _values(value)


# --------- partition ----------

def partition(predicate: Callable[[Any], Any], sequence) -> Tuple[KeyedIterator, KeyedIterator]:
    """Split ``sequence`` into the items that satisfy ``predicate`` and those that don't.

    Both iterators scan ``sequence`` independently, so it has to be
    iterable more than once. They share one cache of predicate results
    keyed by item key: the predicate runs at most once per item however
    the two iterators are driven. Not thread-safe.
    """
    expects(callable_, predicate, 1)
    expects(traversable, sequence, 2)

    checked = {}

    def select(wanted):
        for key, value in _pairs(sequence):
            if key not in checked:
                checked[key] = bool(predicate(value))
            if checked[key] is wanted:
                yield key, value

    return KeyedIterator(select(True)), KeyedIterator(select(False))


# --------- chainable collection ----------

class LazyCollection:
    """
    A chainable, lazy collection. Steps are recorded and turned into a
    pipeline of the functions above only when you iterate. Optionally
    caches realised results.
    """
    def __init__(self, source, ops=None, cache_enabled=False):
        expects(traversable, source, 1, function="LazyCollection")
        self._source = source
        self._ops = ops or []          # sequence of (op_name, argument)
        self._cache_enabled = cache_enabled
        self._cache = []               # realised items (post-ops)
        self._exhausted = False        # whether the cache holds a full pass

    # --------- chainable steps (lazy) ----------
    def map(self, function):
        expects(callable_, function, 1)
        return self._with_op(("map", function))

    def filter(self, predicate):
        expects(callable_, predicate, 1)
        return self._with_op(("filter", predicate))

    def filter_not(self, predicate):
        expects(callable_, predicate, 1)
        return self._with_op(("filter_not", predicate))

    def flat_map(self, function):
        expects(callable_, function, 1)
        return self._with_op(("flat_map", function))

    def flatten(self, depth=None):
        expects_optional(non_negative_integer, depth, 1)
        return self._with_op(("flatten", depth))

    def skip(self, n):
        expects(integer, n, 1)
        return self._with_op(("skip", n))

    def take(self, n, step=1):
        """Keep ``n`` items sampled every ``step`` positions.

        Counts pulls instead of asking for a length, so it works on
        unbounded pipelines.
        """
        expects(integer, n, 1)
        expects(positive_integer, step, 2)
        return self._with_op(("take", (n, step)))

    def take_while(self, predicate):
        expects(callable_, predicate, 1)
        return self._with_op(("take_while", predicate))

    def drop_while(self, predicate):
        expects(callable_, predicate, 1)
        return self._with_op(("drop_while", predicate))

    def batch(self, size):
        """Group items into tuples of ``size``; the last one may be shorter."""
        expects(positive_integer, size, 1)
        return self._with_op(("batch", size))

    def cache(self, enabled=True):
        return LazyCollection(self._source, list(self._ops), enabled)

    # --------- terminal operations ----------
    def to_list(self) -> List[Any]:
        return list(self)

    def first(self, default=None):
        for item in self:
            return item
        return default

    def count(self) -> int:
        return sum(1 for _ in self)

    def reduce(self, function, initial=_MISSING):
        """Fold items from left to right with a function of two arguments."""
        expects(callable_, function, 1)
        iterator = iter(self)
        if initial is _MISSING:
            try:
                accumulator = next(iterator)
            except StopIteration:
                raise TypeError("reduce() of empty collection with no initial value") from None
        else:
            accumulator = initial
        for item in iterator:
            accumulator = function(accumulator, item)
        return accumulator

    # --------- iterator protocol ----------
    def __iter__(self):
        if self._cache_enabled and self._exhausted:
            yield from self._cache
            return

        realised = []
        for item in self._pipeline():
            if self._cache_enabled:
                realised.append(item)
            yield item

        if self._cache_enabled:
            self._cache = realised
            self._exhausted = True

    def _pipeline(self):
        it = self._source
        for op, arg in self._ops:
            if op == "map":
                it = map(arg, it)
            elif op == "filter":
                it = filter(arg, it)
            elif op == "filter_not":
                it = filter_not(arg, it)
            elif op == "flat_map":
                it = flat_map(arg, it)
            elif op == "flatten":
                it = flatten(it, arg)
            elif op == "skip":
                it = drop(it, arg)
            elif op == "take":
                it = _take_counted(_values(it), *arg)
            elif op == "take_while":
                it = take_while(arg, it)
            elif op == "drop_while":
                it = drop_while(arg, it)
            elif op == "batch":
                it = _batch(_values(it), arg)
            else:
                raise ValueError(f"Unknown op: {op}")
        return _values(it)

    # --------- helpers ----------
    def _with_op(self, op_tuple):
        logger.debug(f"Chaining {op_tuple[0]} onto pipeline of {len(self._ops)} step(s)")
        return LazyCollection(self._source, self._ops + [op_tuple], self._cache_enabled)


def _take_counted(iterator, n, step):
    if n <= 0:
        return
    taken = 0
    for counter, value in enumerate(iterator):
        if counter % step:
            continue
        yield value
        taken += 1
        if taken >= n:
            return


def _batch(iterator, size):
    bucket = []
    for value in iterator:
        bucket.append(value)
        if len(bucket) == size:
            yield tuple(bucket)
            bucket = []
    if bucket:
        yield tuple(bucket)
