import pytest

from chaincalc.calculator import Calculator
from chaincalc.session import Session


@pytest.fixture
def session():
    return Session()


@pytest.fixture
def calculator(session):
    return Calculator(session)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    if report.when == "call":
        print(f"TEST: {item.name} - {'PASSED' if report.passed else 'FAILED'}")
