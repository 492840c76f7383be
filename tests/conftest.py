import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from tcr import SeededRandomSource, SampledChallenges, genstatement, genwitness  # noqa: E402


@pytest.fixture
def rng():
    return SeededRandomSource(20170517)


@pytest.fixture(scope="session")
def statement():
    return genstatement(SeededRandomSource("statement"))


@pytest.fixture
def witness(rng):
    return genwitness(rng, b=1)


@pytest.fixture(scope="session")
def sampled():
    return SampledChallenges()
