import pytest

from tests.helpers import NOW


@pytest.fixture
def now():
    return NOW
