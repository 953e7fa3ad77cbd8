from wintergreen import values
from wintergreen.config import configure
from wintergreen.exceptions import (
    DeferredResolutionError,
    FactoryError,
    InvalidDeferredAttribute,
    UndefinedFactory,
    UndefinedSave,
    UnknownOverrideField,
)
from wintergreen.factories import Factories
from wintergreen.resolver import merge, resolve
from wintergreen.sequences import SequenceCounter
from wintergreen.values import Deferred, Lazy, Scope, defer, fake, lazy, sequence

seq = values.SequenceValue


__all__ = [
    "Deferred",
    "DeferredResolutionError",
    "Factories",
    "FactoryError",
    "InvalidDeferredAttribute",
    "Lazy",
    "Scope",
    "SequenceCounter",
    "UndefinedFactory",
    "UndefinedSave",
    "UnknownOverrideField",
    "configure",
    "defer",
    "fake",
    "lazy",
    "merge",
    "resolve",
    "seq",
    "sequence",
]
