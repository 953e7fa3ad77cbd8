import dataclasses
import random
import uuid

import faker as fakerlib

from wintergreen.sequences import SequenceCounter


@dataclasses.dataclass
class Config:
    locale: str
    faker: fakerlib.Faker
    sequences: SequenceCounter
    max_deferred_passes: int = 1000


global_config = Config(
    locale="en",
    faker=fakerlib.Faker("en"),
    sequences=SequenceCounter(),
)


def configure(
    *,
    locale: str | None = None,
    faker: fakerlib.Faker | None = None,
    seed: int | None = None,
    sequences: SequenceCounter | None = None,
    max_deferred_passes: int | None = None,
) -> None:
    if locale is not None:
        global_config.locale = locale
        if faker is None:
            faker = fakerlib.Faker(locale)

    if faker is not None:
        global_config.faker = faker

    if seed is None:
        seed = int(uuid.uuid4())
    random.seed(seed)
    global_config.faker.seed_instance(seed)

    if sequences is not None:
        global_config.sequences = sequences

    if max_deferred_passes is not None:
        if max_deferred_passes < 1:
            raise ValueError("max_deferred_passes must be >= 1.")
        global_config.max_deferred_passes = max_deferred_passes
