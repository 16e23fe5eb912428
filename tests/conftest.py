"""
Global test fixtures for the pppoat test suite.
"""
import socket

import pytest

from pppoat.helper.logging_config import PppoatLoggingConfig
from tests.fakes import Pipe


@pytest.fixture
def pipe():
    """Link read side pipe, closed after the test."""
    p = Pipe()
    yield p
    p.close_all()


@pytest.fixture
def out_pipe():
    """Link write side pipe, closed after the test."""
    p = Pipe()
    yield p
    p.close_all()


@pytest.fixture
def free_udp_port():
    """Return a UDP port that is free on the wildcard address."""
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        s.bind(("0.0.0.0", 0))
        return s.getsockname()[1]


@pytest.fixture
def reset_logging():
    yield
    PppoatLoggingConfig.reset()
