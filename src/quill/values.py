"""Runtime values — the closed set of variants the evaluator produces."""

from __future__ import annotations

import collections.abc
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Number:
    """64-bit floating point number."""

    value: float


@dataclass(frozen=True, slots=True)
class String:
    value: str


@dataclass(frozen=True, slots=True)
class Boolean:
    value: bool


@dataclass(frozen=True, slots=True)
class Array:
    """Ordered sequence of values, owned by the array."""

    elements: tuple[Value, ...] = ()


@dataclass(frozen=True, slots=True)
class Object:
    """Name → value mapping. Equality ignores insertion order."""

    # Excluded from hashing; a dict cannot be hashed
    fields: dict[str, Value] = field(default_factory=dict, hash=False)


@dataclass(frozen=True, slots=True)
class Callable:
    """Native function of fixed arity.

    Two callables are equal when name and arity match; the function
    reference itself is never compared.
    """

    name: str
    arity: int
    function: collections.abc.Callable[[list[Value]], Value] = field(
        compare=False, repr=False
    )


Value = Number | String | Boolean | Array | Object | Callable


def type_name(value: Value) -> str:
    """Return the variant name of *value*, used in error messages."""
    return type(value).__name__


def format_value(value: Value) -> str:
    """Render a value the way the REPL and CLI print results."""
    if isinstance(value, Number):
        if float(value.value).is_integer():
            return str(int(value.value))
        return repr(value.value)
    if isinstance(value, String):
        return value.value
    if isinstance(value, Boolean):
        return "true" if value.value else "false"
    if isinstance(value, Array):
        return "[" + ", ".join(format_value(e) for e in value.elements) + "]"
    if isinstance(value, Object):
        items = (f"{k}: {format_value(v)}" for k, v in sorted(value.fields.items()))
        return "{" + ", ".join(items) + "}"
    if isinstance(value, Callable):
        return f"<fn {value.name}/{value.arity}>"
    raise TypeError(f"not a Quill value: {value!r}")
