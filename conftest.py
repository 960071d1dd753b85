
import pytest

from ratcalc.config import Settings
from ratcalc.context import Context
from ratcalc.session import Session


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    if report.when == "call":
        print(f"TEST: {item.name} - {'PASSED' if report.passed else 'FAILED'}")


@pytest.fixture
def context():
    return Context()


@pytest.fixture
def settings(tmp_path):
    return Settings(history_file=str(tmp_path / "history"), use_history=False)


@pytest.fixture
def session(settings, context):
    return Session(settings, context)
