"""Turns a template record and overrides into a fully resolved record.

Resolution runs in three steps:

1. merge: overrides replace template fields;
2. function pass: nested records (resolved on their own) and sequences
   first, then lazy values and plain functions, called with the enclosing
   scope; fields the pass has not reached yet are hidden from that scope;
3. deferred pass: deferred attributes are computed in weight order, each
   pass finalizing every attribute at the lowest pending weight.
"""

import dataclasses
import logging
import typing

from wintergreen.config import global_config
from wintergreen.exceptions import DeferredResolutionError, UnknownOverrideField
from wintergreen.values import Deferred, Lazy, Scope, is_function, is_pending

logger = logging.getLogger(__name__)

R = typing.TypeVar("R")


def is_record(value: object) -> bool:
    if isinstance(value, dict):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _fields_of(record: typing.Any) -> dict[str, object]:
    if isinstance(record, dict):
        return dict(record)
    return {f.name: getattr(record, f.name) for f in dataclasses.fields(record) if f.init}


def _merge_fields(template: typing.Any, overrides: typing.Mapping[str, object]) -> dict[str, object]:
    fields = _fields_of(template)
    if not isinstance(template, dict):
        for field_name in overrides:
            if field_name not in fields:
                raise UnknownOverrideField(field_name, type(template))

    fields.update(overrides)
    return fields


def _rebuild(template: R, fields: dict[str, object]) -> R:
    if isinstance(template, dict):
        return typing.cast(R, fields)
    return dataclasses.replace(template, **fields)  # type: ignore[type-var]


def merge(template: R, overrides: typing.Mapping[str, object] | None = None) -> R:
    """Return a copy of `template` with `overrides` applied. Nothing is evaluated."""
    return _rebuild(template, _merge_fields(template, overrides or {}))


def resolve(template: R, overrides: typing.Mapping[str, object] | None = None) -> R:
    """Merge `overrides` into `template` and evaluate every lazy and deferred field.

    Dict templates produce dicts, dataclass templates produce new instances of
    the same dataclass. Neither argument is mutated.
    """
    fields = _merge_fields(template, overrides or {})
    return _rebuild(template, _resolve_fields(fields))


def _resolve_record(record: R) -> R:
    return _rebuild(record, _resolve_fields(_fields_of(record)))


def _resolve_fields(fields: dict[str, object]) -> dict[str, object]:
    names = [name for name, value in fields.items() if _needs_evaluation(value)]
    unevaluated = set(names)
    scope = Scope(fields, unevaluated)

    # nested records and sequences first, so functions see them resolved
    for field_name in sorted(names, key=lambda name: is_pending(fields[name])):
        fields[field_name] = _evaluate(fields[field_name], scope)
        unevaluated.discard(field_name)

    resolve_deferred(fields, scope)

    for field_name, value in list(fields.items()):
        if isinstance(value, (list, tuple)):
            fields[field_name] = _settle(value, scope)
    return fields


def _needs_evaluation(value: object) -> bool:
    if isinstance(value, Deferred):
        return False
    return is_pending(value) or is_record(value) or isinstance(value, (list, tuple))


def _evaluate(value: object, scope: Scope) -> object:
    while True:
        match value:
            case Deferred():
                return value
            case Lazy():
                value = value.resolve(scope)
            case _ if is_function(value):
                value = Lazy(value).resolve(scope)  # type: ignore[arg-type]
            case _ if is_record(value):
                return _resolve_record(value)
            case list():
                return [_evaluate(item, scope) for item in value]
            case tuple() if type(value) is tuple:
                return tuple(_evaluate(item, scope) for item in value)
            case _:
                return value


def _settle(value: object, scope: Scope) -> object:
    # deferred values inside sequences are computed once the record is final
    match value:
        case Deferred():
            return _settle(_evaluate(value.resolve(scope), scope), scope)
        case list():
            return [_settle(item, scope) for item in value]
        case tuple() if type(value) is tuple:
            return tuple(_settle(item, scope) for item in value)
        case _:
            return value


def resolve_deferred(
    fields: dict[str, object],
    scope: Scope | None = None,
    *,
    max_passes: int | None = None,
) -> int:
    """Resolve the deferred attributes of `fields` in place and return the number of passes used.

    Each pass moves the weight cursor to the lowest pending weight and
    computes every attribute at that weight, so negative weights run before
    the default weight of zero. Attributes of equal weight are computed in
    field order within one pass, so they must not read each other. A compute
    function returning another deferred attribute leaves it in the field for
    the next pass.
    """
    if scope is None:
        scope = Scope(fields)
    limit = max_passes if max_passes is not None else global_config.max_deferred_passes

    cursor: int | float = 0
    passes = 0
    while True:
        pending = [(name, value) for name, value in fields.items() if isinstance(value, Deferred)]
        if not pending:
            break

        if passes >= limit:
            raise DeferredResolutionError(sorted(name for name, _ in pending), passes)

        cursor = min(deferred.weight for _, deferred in pending)
        passes += 1
        for field_name, deferred in pending:
            if deferred.weight <= cursor:
                fields[field_name] = _evaluate(deferred.resolve(scope), scope)

    if passes:
        logger.debug(f"Resolved deferred attributes in {passes} passes (last weight {cursor})")
    return passes
