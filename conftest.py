import pytest

from library import Library, seed_sample_data


@pytest.fixture
def lib():
    # Every test gets its own in-memory library
    return Library(removal_policy="reject")


@pytest.fixture
def seeded_lib(lib):
    return seed_sample_data(lib)


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # CLI output mode is carried in the environment; keep tests independent
    monkeypatch.delenv("LIB_CLI_OUTPUT", raising=False)
