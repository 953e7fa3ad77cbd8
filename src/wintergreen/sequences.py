import threading
import typing

T = typing.TypeVar("T")


class SequenceCounter:
    """Hands out 0, 1, 2, ... per sequence name.

    Safe to share between threads: every caller gets a distinct integer for a
    given name, but which caller gets which one is not defined.
    """

    __slots__ = ("_counters", "_lock")

    def __init__(self) -> None:
        self._counters: dict[typing.Hashable, int] = {}
        self._lock = threading.Lock()

    @typing.overload
    def next(self, name: typing.Hashable) -> int: ...

    @typing.overload
    def next(self, name: typing.Hashable, formatter: typing.Callable[[int], T]) -> T: ...

    def next(self, name: typing.Hashable, formatter: typing.Callable[[int], T] | None = None) -> int | T:
        with self._lock:
            value = self._counters.get(name, 0)
            self._counters[name] = value + 1

        if formatter is not None:
            return formatter(value)
        return value

    def __repr__(self) -> str:
        return f"<SequenceCounter names={len(self._counters)}>"
