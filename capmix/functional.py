"""
functional.py

Collection toolkit used by the typeclass machinery.

Apart from merge_missing, every function is pure: inputs are never modified
and results are freshly allocated. Functions accept both sequences and
mappings. For sequences the "key" of an element is its index; for mappings
it is the mapping key.
"""

import copy
from typing import Any, Callable, Iterable, Iterator, List, Mapping, MutableMapping, Optional, Sequence, Tuple, Union

Collection = Union[Sequence[Any], Mapping[Any, Any]]

_builtin_all = all
_builtin_any = any


# =============================================================================
# Helper Functions
# =============================================================================

def _pairs(coll: Collection, caller: str) -> Iterator[Tuple[Any, Any]]:
    """Yield (key, value) pairs from a sequence or mapping."""
    if isinstance(coll, Mapping):
        return iter(coll.items())
    if isinstance(coll, (str, bytes)) or not isinstance(coll, Iterable):
        raise TypeError(f"{caller} can be called only on collections, got {type(coll).__name__}")
    return enumerate(coll)


def _rebuild(coll: Collection, pairs: Iterable[Tuple[Any, Any]]) -> Collection:
    """Build a new collection of the same shape as coll from (key, value) pairs."""
    if isinstance(coll, Mapping):
        return dict(pairs)
    values = [v for _, v in pairs]
    if isinstance(coll, tuple):
        return tuple(values)
    return values


def _require_non_empty(coll: Collection, what: str) -> None:
    if empty(coll):
        raise ValueError(f"Empty collection has no {what}")


# =============================================================================
# Traversal
# =============================================================================

def fold(coll: Collection, f: Callable[[Any, Any, Any], Any], acc: Any) -> Any:
    """
    Accumulate a value over a collection.

    ``f`` receives the accumulator, the current value and the current key,
    and returns the new accumulator. Sequences are folded in order; mappings
    in insertion order.
    """
    for key, value in _pairs(coll, "fold"):
        acc = f(acc, value, key)
    return acc


def map(coll: Collection, f: Callable[[Any, Any], Any]) -> Collection:
    """Return a new collection with ``f(value, key)`` applied to every element."""
    return _rebuild(coll, ((k, f(v, k)) for k, v in _pairs(coll, "map")))


def partition(coll: Collection, pred: Callable[[Any, Any], bool]) -> Tuple[Collection, Collection]:
    """Split a collection into (matching, not matching) by ``pred(value, key)``."""
    matching: List[Tuple[Any, Any]] = []
    rest: List[Tuple[Any, Any]] = []
    for key, value in _pairs(coll, "partition"):
        (matching if pred(value, key) else rest).append((key, value))
    return _rebuild(coll, matching), _rebuild(coll, rest)


def filter(coll: Collection, pred: Callable[[Any, Any], bool]) -> Collection:
    """Return the elements satisfying ``pred(value, key)``."""
    return partition(coll, pred)[0]


def first(coll: Collection, pred: Callable[[Any, Any], bool]) -> Optional[Any]:
    """Return the key of the first element satisfying the predicate, or None."""
    for key, value in _pairs(coll, "first"):
        if pred(value, key):
            return key
    return None


def all(coll: Collection, pred: Callable[[Any, Any], bool]) -> bool:
    """True if every element satisfies ``pred(value, key)``."""
    return _builtin_all(pred(v, k) for k, v in _pairs(coll, "all"))


def any(coll: Collection, pred: Callable[[Any, Any], bool]) -> bool:
    """True if at least one element satisfies ``pred(value, key)``."""
    return _builtin_any(pred(v, k) for k, v in _pairs(coll, "any"))


def empty(coll: Collection) -> bool:
    return sizeof(coll) == 0


def sizeof(coll: Collection) -> int:
    """Number of elements, counting mapping entries."""
    return fold(coll, lambda acc, _v, _k: acc + 1, 0)


# =============================================================================
# Sequence Access
# =============================================================================

def head(coll: Collection) -> Any:
    """First element of a sequence (first value of a mapping)."""
    _require_non_empty(coll, "head")
    return next(v for _, v in _pairs(coll, "head"))


def tail(coll: Collection) -> Collection:
    """Everything except the head."""
    _require_non_empty(coll, "tail")
    return _rebuild(coll, list(_pairs(coll, "tail"))[1:])


def last(coll: Collection) -> Any:
    """Last element of a sequence (last value of a mapping)."""
    _require_non_empty(coll, "last")
    return list(_pairs(coll, "last"))[-1][1]


def init(coll: Collection) -> Collection:
    """Everything except the last element."""
    _require_non_empty(coll, "init")
    return _rebuild(coll, list(_pairs(coll, "init"))[:-1])


def keys(coll: Collection) -> List[Any]:
    """All keys (indices for sequences) as a list."""
    return fold(coll, lambda acc, _v, k: acc + [k], [])


def values(coll: Collection) -> List[Any]:
    """All values as a list."""
    return fold(coll, lambda acc, v, _k: acc + [v], [])


def contains(coll: Collection, value: Any) -> bool:
    """True if ``value`` is one of the collection's values."""
    return any(coll, lambda v, _k: v == value)


def zip_with(f: Callable[..., Any], *seqs: Sequence[Any]) -> List[Any]:
    """Combine sequences element-wise with ``f``; stops at the shortest."""
    return [f(*items) for items in zip(*seqs)]


# =============================================================================
# Function Combinators
# =============================================================================

def compose(f1: Callable[..., Any], f2: Callable[..., Any]) -> Callable[..., Any]:
    """Return ``f1 . f2``."""
    if not callable(f1) or not callable(f2):
        raise TypeError("compose can be called only on callables")
    return lambda *args, **kwargs: f1(f2(*args, **kwargs))


def flip(f: Callable[[Any, Any], Any]) -> Callable[[Any, Any], Any]:
    """Swap the two arguments of a binary function."""
    if not callable(f):
        raise TypeError("flip can be called only on callables")
    return lambda x, y: f(y, x)


def curry(f: Callable[..., Any], arg_count: int) -> Callable[..., Any]:
    """
    Curry ``f`` over ``arg_count`` positional arguments.

    The returned function may be called with any number of the remaining
    arguments; ``f`` runs once ``arg_count`` have been collected. Each partial
    application returns a new function, so partials can be reused.
    """
    if not callable(f):
        raise TypeError("only a callable may be curried")
    if not isinstance(arg_count, int) or arg_count <= 0:
        raise ValueError("you may curry a function only for a positive number of arguments")

    def collect(collected: Tuple[Any, ...]) -> Callable[..., Any]:
        def curried(*args: Any) -> Any:
            gathered = collected + args
            if len(gathered) >= arg_count:
                return f(*gathered)
            return collect(gathered)
        return curried

    return collect(())


# =============================================================================
# Typeclass Support
# =============================================================================

def has_function(table: Optional[Mapping[str, Any]], name: str) -> bool:
    """True if ``table`` binds a callable under ``name``. A missing table binds nothing."""
    if not isinstance(name, str):
        raise TypeError("function name must be a string")
    if table is None:
        return False
    return callable(table.get(name))


def deep_copy(value: Any) -> Any:
    """Return a copy sharing no mutable storage with ``value``."""
    return copy.deepcopy(value)


def merge_missing(target: MutableMapping[str, Any], source: Mapping[str, Any], copier: Callable[[Any], Any]) -> Tuple[List[str], List[str]]:
    """
    Bind every key of ``source`` that ``target`` lacks, in place.

    Values are passed through ``copier`` before binding. Existing keys are
    left untouched. Returns (bound, preserved) key lists.
    """
    def step(acc: Tuple[List[str], List[str]], value: Any, key: str) -> Tuple[List[str], List[str]]:
        bound, preserved = acc
        if key in target:
            preserved.append(key)
        else:
            target[key] = copier(value)
            bound.append(key)
        return acc

    return fold(source, step, ([], []))
