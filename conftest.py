import os
import signal
import logging
import pytest

# Keep the decision trace mirrored at DEBUG out of normal test output.
logging.getLogger('wallpaper_watcher.trace').setLevel(logging.INFO)

# Default per-test timeout in seconds. Can be overridden with TEST_TIMEOUT env var.
DEFAULT_TIMEOUT = int(os.environ.get('TEST_TIMEOUT', '15'))


def _raise_timeout(signum, frame):
    raise TimeoutError(f"Test exceeded timeout of {DEFAULT_TIMEOUT}s")


@pytest.hookimpl(tryfirst=True)
def pytest_runtest_setup(item):
    # Only set alarm on POSIX-like systems where signal.alarm exists
    if hasattr(signal, 'alarm'):
        timeout = int(os.environ.get('TEST_TIMEOUT', str(DEFAULT_TIMEOUT)))
        signal.signal(signal.SIGALRM, _raise_timeout)
        signal.alarm(timeout)


@pytest.hookimpl(tryfirst=True)
def pytest_runtest_teardown(item, nextitem):
    # Cancel alarm after test finishes
    if hasattr(signal, 'alarm'):
        signal.alarm(0)
