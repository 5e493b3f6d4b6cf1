import pytest

from minirdbms import DatabaseEngine, DatabaseREPL
from minirdbms.sample import load_library_sample


@pytest.fixture
def engine():
    return DatabaseEngine()


@pytest.fixture
def library(engine):
    results = load_library_sample(engine)
    assert all(result.success for result in results)
    return engine


@pytest.fixture
def repl(engine):
    return DatabaseREPL(engine)
