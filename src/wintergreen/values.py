from __future__ import annotations

import dataclasses
import functools
import inspect
import math
import numbers
import types
import typing

from wintergreen.config import global_config
from wintergreen.exceptions import InvalidDeferredAttribute
from wintergreen.sequences import SequenceCounter

T = typing.TypeVar("T")

_FUNCTION_TYPES = (
    types.FunctionType,
    types.MethodType,
    types.BuiltinFunctionType,
    functools.partial,
)


def is_function(value: object) -> bool:
    """Plain functions placed in a record are lazy values. Classes and other callables are literals."""
    return isinstance(value, _FUNCTION_TYPES)


def is_pending(value: object) -> bool:
    return isinstance(value, (Lazy, Deferred)) or is_function(value)


class Scope:
    """Read-only view of the record being resolved.

    Fields are reachable both as attributes and as items. Fields that still
    hold a lazy or deferred value, or that are listed in `unevaluated`, are
    reported as missing.
    """

    __slots__ = ("_data", "_unevaluated")

    def __init__(
        self,
        data: typing.Mapping[str, object],
        unevaluated: typing.AbstractSet[str] = frozenset(),
    ) -> None:
        self._data = data
        self._unevaluated = unevaluated

    def __getattr__(self, name: str) -> object:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(_unresolved_message(name)) from None

    def __getitem__(self, name: str) -> object:
        try:
            value = self._data[name]
        except KeyError:
            raise KeyError(_unresolved_message(name)) from None

        if name in self._unevaluated or is_pending(value):
            raise KeyError(_unresolved_message(name))
        return value

    def __contains__(self, name: object) -> bool:
        try:
            self[name]  # type: ignore[index]
        except KeyError:
            return False
        return True

    def __repr__(self) -> str:
        return f"<Scope fields={sorted(self._data)!r}>"


def _unresolved_message(name: str) -> str:
    return f'Field "{name}" not yet resolved or does not exist.'


class Lazy(typing.Generic[T]):
    """A value computed when the record is resolved.

    The wrapped function receives the enclosing scope when it accepts one
    positional argument and is called without arguments otherwise.
    """

    __slots__ = ("_func", "_takes_scope")

    def __init__(self, func: typing.Callable[[Scope], T] | typing.Callable[[], T]) -> None:
        if not callable(func):
            raise TypeError(f"Lazy value must wrap a callable, got {func!r}.")
        self._func = func
        self._takes_scope = _takes_scope(func)

    def resolve(self, scope: Scope) -> T:
        if self._takes_scope:
            return self._func(scope)  # type: ignore[call-arg]
        return self._func()  # type: ignore[call-arg]

    def __repr__(self) -> str:
        return f"<Lazy {self._func!r}>"


def _takes_scope(func: typing.Callable[..., object]) -> bool:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        # builtins without introspectable signatures
        return False

    try:
        signature.bind()
    except TypeError:
        pass
    else:
        return False

    try:
        signature.bind(None)
    except TypeError:
        raise TypeError(f"Lazy function {func!r} must accept zero or one positional argument.") from None
    return True


@dataclasses.dataclass(frozen=True)
class Deferred(typing.Generic[T]):
    """A field computed after every field with a lower weight is final."""

    compute: typing.Callable[[Scope], T]
    weight: int | float = 0

    def __post_init__(self) -> None:
        if isinstance(self.weight, bool) or not isinstance(self.weight, numbers.Real):
            raise InvalidDeferredAttribute(f"Deferred weight must be a number, got {self.weight!r}.")
        if isinstance(self.weight, float) and math.isnan(self.weight):
            raise InvalidDeferredAttribute("Deferred weight must not be NaN.")
        if not callable(self.compute):
            raise InvalidDeferredAttribute(f"Deferred compute must be callable, got {self.compute!r}.")

        try:
            signature = inspect.signature(self.compute)
        except (TypeError, ValueError):
            raise InvalidDeferredAttribute(f"Cannot inspect the signature of {self.compute!r}.") from None

        params = list(signature.parameters.values())
        positional = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
        if len(params) != 1 or params[0].kind not in positional:
            raise InvalidDeferredAttribute(
                f"Deferred compute {self.compute!r} must accept exactly one argument, got {signature}."
            )

    def resolve(self, scope: Scope) -> T:
        return self.compute(scope)


def lazy(func: typing.Callable[[Scope], T] | typing.Callable[[], T]) -> Lazy[T]:
    return Lazy(func)


def defer(compute: typing.Callable[[Scope], T], *, weight: int | float = 0) -> Deferred[T]:
    return Deferred(compute, weight)


class SequenceValue(Lazy[T | str | int]):
    __slots__ = ("_counter", "_format", "_name")

    def __init__(
        self,
        name: typing.Hashable,
        format: str | typing.Callable[[int], T] | None = None,
        *,
        counter: SequenceCounter | None = None,
    ) -> None:
        self._name = name
        self._format = format
        self._counter = counter

    def resolve(self, scope: Scope) -> T | str | int:
        counter = self._counter if self._counter is not None else global_config.sequences
        n = counter.next(self._name)

        if callable(self._format):
            return self._format(n)

        if self._format is not None:
            return self._format.format(n)

        return n

    def __repr__(self) -> str:
        return f"<SequenceValue {self._name!r}>"


def sequence(name: typing.Hashable, formatter: typing.Callable[[int], T] | None = None) -> int | T:
    """Draw the next value of a sequence right away."""
    return global_config.sequences.next(name, formatter)  # type: ignore[arg-type]


class FakeValue(Lazy[T]):
    __slots__ = ("_args", "_kwargs", "_method_name")

    def __init__(self, method_name: str, *args: typing.Any, **kwargs: typing.Any) -> None:
        self._method_name = method_name
        self._args = args
        self._kwargs = kwargs

    def resolve(self, scope: Scope) -> T:
        method = getattr(global_config.faker, self._method_name)
        return method(*self._args, **self._kwargs)

    def __repr__(self) -> str:
        return f"<FakeValue {self._method_name}>"


class FakerProxy:
    def __getattr__(self, name: str) -> typing.Callable[..., FakeValue]:
        def value_factory(*args: typing.Any, **kwargs: typing.Any) -> FakeValue:
            return FakeValue(name, *args, **kwargs)

        return value_factory


fake = FakerProxy()
