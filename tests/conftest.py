import pytest

from formguard import FormGuardConfig
from tests.fakes import FakeDocument, FakeDriver, practice_form


@pytest.fixture
def fast_config():
    """Config with waits short enough for unit tests."""
    return FormGuardConfig(timeout=0.05, poll_interval=0.01, form_wait=0.0)


@pytest.fixture
def form_driver():
    """Driver whose main document holds the practice form."""
    return FakeDriver(FakeDocument(practice_form()))
