import pytest

from zkhash.poseidon.constants import get_constants
from zkhash.poseidon.hasher import Poseidon
from zkhash.poseidon.params import REFERENCE, VARIABLE


@pytest.fixture(scope="session")
def reference_constants():
    return get_constants(REFERENCE)


@pytest.fixture(scope="session")
def variable_constants():
    return get_constants(VARIABLE)


@pytest.fixture(scope="session")
def reference_hasher(reference_constants):
    """t=6 고정 기준 해시기."""
    return Poseidon(REFERENCE, reference_constants)


@pytest.fixture(scope="session")
def variable_hasher(variable_constants):
    """t = 입력 개수 + 1 해시기."""
    return Poseidon(VARIABLE, variable_constants)
