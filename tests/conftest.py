import gc

import pytest

pytest_plugins = (
    "tests.fix_db",
    "tests.fix_pq",
)


def pytest_configure(config):
    markers = [
        "slow: this test is kinda slow (skip with -m 'not slow')",
        "timing: the test is timing based and can fail on cheese hardware",
        "subprocess: the test runs a Python subprocess",
    ]

    for marker in markers:
        config.addinivalue_line("markers", marker)


def _collect() -> None:
    """
    gc.collect(), but more insisting.
    """
    for i in range(3):
        gc.collect()


@pytest.fixture
def gc_collect():
    """
    Provides a consistent way to run garbage collection.

    **Note:** This will *not* skip tests on PyPy.
    """
    return _collect
