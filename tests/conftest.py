import os

from hypothesis import settings, Verbosity
import pytest

from taxtally_tst_utils import TempDirectory, RunnerContext


@pytest.fixture
def runtmp():
    with TempDirectory() as location:
        yield RunnerContext(location)


@pytest.fixture
def run():
    yield RunnerContext(os.getcwd())


@pytest.fixture(params=[1, 3, 10])
def dup_count(request):
    return request.param


@pytest.fixture(params=[0.5, 0.8, 0.95])
def confidence(request):
    return request.param


settings.register_profile("ci", max_examples=1000)
settings.register_profile("dev", max_examples=10)
settings.register_profile("debug", max_examples=10, verbosity=Verbosity.verbose)
settings.load_profile(os.getenv(u'HYPOTHESIS_PROFILE', 'default'))
