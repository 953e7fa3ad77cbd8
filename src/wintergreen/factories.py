import dataclasses
import datetime
import decimal
import enum
import logging
import typing
import uuid

from wintergreen.config import global_config
from wintergreen.exceptions import UndefinedFactory
from wintergreen.persistence import (
    AsyncPersistence,
    RaisingAsyncPersistence,
    RaisingSyncPersistence,
    SyncPersistence,
)
from wintergreen.resolver import resolve
from wintergreen.sequences import SequenceCounter
from wintergreen.values import SequenceValue

logger = logging.getLogger(__name__)

T = typing.TypeVar("T")

Producer = typing.Callable[[], typing.Any]


class Factories:
    """A registry of named template producers.

    Producers are zero-argument callables returning a template record (a dict
    or a dataclass instance). They are called once per build, so every build
    starts from a fresh template.
    """

    def __init__(
        self,
        *,
        sequences: SequenceCounter | None = None,
        persistence: SyncPersistence[typing.Any] | None = None,
        async_persistence: AsyncPersistence[typing.Any] | None = None,
    ) -> None:
        self._producers: dict[str, Producer] = {}
        self._sequences = sequences
        self.persistence: SyncPersistence[typing.Any] = persistence or RaisingSyncPersistence()
        self.async_persistence: AsyncPersistence[typing.Any] = async_persistence or RaisingAsyncPersistence()

    @property
    def sequences(self) -> SequenceCounter:
        if self._sequences is not None:
            return self._sequences
        return global_config.sequences

    def register(self, name: str, producer: Producer) -> None:
        if not callable(producer):
            raise TypeError(f"Factory {name!r} producer must be callable, got {producer!r}.")
        if name in self._producers:
            logger.debug(f"Replacing factory {name!r}")
        self._producers[name] = producer

    def define(self, name: str) -> typing.Callable[[Producer], Producer]:
        def decorator(producer: Producer) -> Producer:
            self.register(name, producer)
            return producer

        return decorator

    def __contains__(self, name: object) -> bool:
        return name in self._producers

    def template(self, name: str) -> typing.Any:
        try:
            producer = self._producers[name]
        except KeyError:
            raise UndefinedFactory(name) from None
        return producer()

    def sequence(self, name: typing.Hashable, formatter: typing.Callable[[int], T] | None = None) -> int | T:
        return self.sequences.next(name, formatter)  # type: ignore[arg-type]

    def seq(self, name: typing.Hashable, format: str | typing.Callable[[int], T] | None = None) -> SequenceValue[T]:
        """Like `wintergreen.seq`, drawing from this registry's counter."""
        return SequenceValue(name, format, counter=self._sequences)

    def build(self, name: str, overrides: typing.Mapping[str, object] | None = None, /, **attrs: object) -> typing.Any:
        template = self.template(name)
        record = resolve(template, _collect_overrides(overrides, attrs))
        logger.debug(f"Built {name!r}")
        return record

    def build_list(
        self,
        count: int,
        name: str,
        overrides: typing.Mapping[str, object] | None = None,
        /,
        **attrs: object,
    ) -> list[typing.Any]:
        if count < 0:
            raise ValueError("count must be >= 0.")
        merged = _collect_overrides(overrides, attrs)
        return [self.build(name, dict(merged)) for _ in range(count)]

    def build_pair(
        self,
        name: str,
        overrides: typing.Mapping[str, object] | None = None,
        /,
        **attrs: object,
    ) -> list[typing.Any]:
        return self.build_list(2, name, overrides, **attrs)

    def save(self, record: T) -> T:
        return self.persistence.persist(record)

    def create(self, name: str, overrides: typing.Mapping[str, object] | None = None, /, **attrs: object) -> typing.Any:
        return self.save(self.build(name, overrides, **attrs))

    def create_list(
        self,
        count: int,
        name: str,
        overrides: typing.Mapping[str, object] | None = None,
        /,
        **attrs: object,
    ) -> list[typing.Any]:
        return [self.save(record) for record in self.build_list(count, name, overrides, **attrs)]

    def create_pair(
        self,
        name: str,
        overrides: typing.Mapping[str, object] | None = None,
        /,
        **attrs: object,
    ) -> list[typing.Any]:
        return self.create_list(2, name, overrides, **attrs)

    async def asave(self, record: T) -> T:
        return await self.async_persistence.persist(record)

    async def acreate(
        self,
        name: str,
        overrides: typing.Mapping[str, object] | None = None,
        /,
        **attrs: object,
    ) -> typing.Any:
        return await self.asave(self.build(name, overrides, **attrs))

    async def acreate_list(
        self,
        count: int,
        name: str,
        overrides: typing.Mapping[str, object] | None = None,
        /,
        **attrs: object,
    ) -> list[typing.Any]:
        return [await self.asave(record) for record in self.build_list(count, name, overrides, **attrs)]

    def params_for(
        self,
        name: str,
        overrides: typing.Mapping[str, object] | None = None,
        /,
        **attrs: object,
    ) -> dict[str, object]:
        return typing.cast(dict[str, object], _to_params(self.build(name, overrides, **attrs)))

    def json_params_for(
        self,
        name: str,
        overrides: typing.Mapping[str, object] | None = None,
        /,
        **attrs: object,
    ) -> dict[str, object]:
        return typing.cast(dict[str, object], _jsonify(_to_params(self.build(name, overrides, **attrs))))


def _collect_overrides(overrides: typing.Mapping[str, object] | None, attrs: dict[str, object]) -> dict[str, object]:
    collected = dict(overrides or {})
    collected.update(attrs)
    return collected


def _to_params(value: object) -> object:
    # fields set to None are left out
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {k: _to_params(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_to_params(v) for v in value]
    return value


def _jsonify(value: object) -> object:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, decimal.Decimal):
        return float(value)
    if isinstance(value, enum.Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _jsonify(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {k: _jsonify(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_jsonify(v) for v in value]
    return value
