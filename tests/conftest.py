import logging

import pytest

from authenticator_chooser.chooser import SecurityKeyChooser
from authenticator_chooser.config import ChooserSettings
from authenticator_chooser.connectors.sim import SimConnector
from authenticator_chooser.keyboard import StaticKeyOracle


class FakeClock:
    """Monotonic clock that only moves when the code under test sleeps."""

    def __init__(self, on_sleep=None):
        self.now = 100.0
        self.sleeps = []
        self.on_sleep = on_sleep

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds
        if self.on_sleep is not None:
            self.on_sleep(len(self.sleeps))


@pytest.fixture(autouse=True)
def _reset_package_logger():
    # The CLI installs its own handlers and stops propagation, which hides records from caplog
    yield
    logger = logging.getLogger("authenticator_chooser")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def sim():
    return SimConnector()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_chooser(sim, clock):
    def _make(shift=False, timeout=1.0, **kwargs):
        return SecurityKeyChooser(
            sim,
            key_oracle=StaticKeyOracle(shift),
            settings=ChooserSettings(timeout_seconds=timeout, poll_interval_seconds=0.005),
            clock=clock,
            sleep=clock.sleep,
            **kwargs,
        )
    return _make
