import pytest

from wintergreen import SequenceCounter, configure


@pytest.fixture(autouse=True)
def _configure() -> None:
    configure(seed=1, sequences=SequenceCounter())
