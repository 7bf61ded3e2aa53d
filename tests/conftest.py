"""Pytest configuration and shared fixtures for EC2 Shutdown Manager tests."""

from __future__ import annotations

import io
import os
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from ec2_shutdown.config import ShutdownConfig
from ec2_shutdown.reporting import ConsoleReporter

ENV_VARS = [
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "EC2_SHUTDOWN_CONFIG",
    "EC2_SHUTDOWN_CONNECT_TIMEOUT",
    "EC2_SHUTDOWN_READ_TIMEOUT",
    "EC2_SHUTDOWN_LOG_LEVEL",
]


@pytest.fixture
def sample_config() -> ShutdownConfig:
    """Sample configuration for testing."""
    return ShutdownConfig(
        instances=["i-0aaa", "i-0bbb"],
        aws_region="us-east-1",
        aws_access_key_id="AKIATEST",
        aws_secret_access_key="secret",
    )


@pytest.fixture
def mock_ec2_client():
    """Mock boto3 EC2 client for testing."""
    return MagicMock()


class CapturingReporter(ConsoleReporter):
    """Reporter writing to in-memory buffers."""

    def __init__(self):
        self.out = io.StringIO()
        self.err = io.StringIO()
        super().__init__(
            console=Console(file=self.out, width=100, highlight=False),
            error_console=Console(file=self.err, width=100, highlight=False),
        )

    @property
    def output(self) -> str:
        return self.out.getvalue()

    @property
    def errors(self) -> str:
        return self.err.getvalue()


@pytest.fixture
def reporter() -> CapturingReporter:
    return CapturingReporter()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep AWS and shutdown manager variables from leaking into tests."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    yield
    # load_dotenv writes os.environ directly, outside monkeypatch's bookkeeping
    for var in ENV_VARS:
        os.environ.pop(var, None)
