"""Pytest fixtures for the stackit_webhook test suite."""

import logging
import logging.handlers
from collections.abc import Generator

import httpx
import pytest

from stackit_webhook.models import ChallengeRequest, DnsApiConfig

API_BASE_URL = "https://dns.api.stackit.cloud"
PROJECT_ID = "test-project"
PROJECT_URL = f"{API_BASE_URL}/v1/projects/{PROJECT_ID}"


@pytest.fixture
def api_config() -> DnsApiConfig:
    """Return a DnsApiConfig for the test project."""
    return DnsApiConfig(base_url=API_BASE_URL, project_id=PROJECT_ID, auth_token="test-token")


@pytest.fixture
def http_client() -> Generator[httpx.Client]:
    """Create an httpx client for repository tests."""
    client = httpx.Client()
    yield client
    client.close()


@pytest.fixture
def challenge_request() -> ChallengeRequest:
    """Return a DNS-01 challenge request as cert-manager sends it."""
    return ChallengeRequest.model_validate(
        {
            "uid": "8b6e2b1c-4f1a-4c6a-9d55-2a1f0b8f4a10",
            "action": "Present",
            "type": "dns-01",
            "dnsName": "www.example.org",
            "key": "challenge-key-value",
            "resourceNamespace": "cert-manager",
            "resolvedFQDN": "_acme-challenge.www.example.org.",
            "resolvedZone": "example.org.",
            "config": b'{"projectId": "test-project"}',
        }
    )


class LogCapture:
    """Helper class to capture and inspect log records."""

    def __init__(self, handler: logging.handlers.MemoryHandler) -> None:
        self._handler = handler

    @property
    def records(self) -> list[logging.LogRecord]:
        """Get all captured log records."""
        return self._handler.buffer

    def get_records(
        self, level: int | None = None, name: str | None = None
    ) -> list[logging.LogRecord]:
        """Get log records filtered by level and/or logger name.

        Args:
            level: Filter by log level (e.g., logging.INFO).
            name: Filter by logger name prefix (e.g., "stackit_webhook.resolver").

        Returns:
            List of matching log records.
        """
        records = self.records
        if level is not None:
            records = [r for r in records if r.levelno == level]
        if name is not None:
            records = [r for r in records if r.name.startswith(name)]
        return records

    def get_messages(self, level: int | None = None, name: str | None = None) -> list[str]:
        """Get log messages filtered by level and/or logger name."""
        return [r.getMessage() for r in self.get_records(level, name)]

    def clear(self) -> None:
        """Clear all captured log records."""
        self._handler.buffer.clear()


@pytest.fixture
def log_capture() -> Generator[LogCapture]:
    """Capture logs from the stackit_webhook package during a test.

    Usage:
        def test_something(log_capture):
            # do something that logs
            assert "Challenge presented" in log_capture.get_messages(logging.INFO)
    """
    handler = logging.handlers.MemoryHandler(capacity=1000)
    handler.setLevel(logging.DEBUG)

    package_logger = logging.getLogger("stackit_webhook")
    original_level = package_logger.level
    package_logger.setLevel(logging.DEBUG)
    package_logger.addHandler(handler)

    try:
        yield LogCapture(handler)
    finally:
        package_logger.removeHandler(handler)
        package_logger.setLevel(original_level)
        handler.close()
