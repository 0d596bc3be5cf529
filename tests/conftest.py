"""
Pytest configuration and fixtures for Burrow tests.
"""

import tempfile
from pathlib import Path

import pytest

from burrow.retry import RetryPolicy
from burrow.users import UserResource

from .fakes import FakeBroker, FakeClock, make_client


@pytest.fixture
def broker():
    """Provide an empty fake broker."""
    return FakeBroker()


@pytest.fixture
def client(broker):
    """Provide a client wired to the fake broker."""
    with make_client(broker) as client:
        yield client


@pytest.fixture
def clock():
    """Provide a fake clock for retry timing."""
    return FakeClock()


@pytest.fixture
def resource(client, clock):
    """Provide a UserResource with a 10s create window and 1s retry interval."""
    policy = RetryPolicy(timeout=10.0, interval=1.0, clock=clock.time, sleep=clock.sleep)
    return UserResource(client, create_policy=policy)


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)
