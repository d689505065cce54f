"""
Pytest fixtures for the query_binding test suite.

Provides:
- Logging state reset between tests
- A JSON log capture helper
"""

import json
import logging
from io import StringIO

import pytest

from query_binding.logging_config import (
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    yield
    reset_logging()


class JsonLogCapture:
    """Structured log lines written by the query_binding logger hierarchy."""

    def __init__(self, stream: StringIO):
        self._stream = stream

    def records(self) -> list[dict]:
        lines = self._stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    def messages(self) -> list[str]:
        return [r["message"] for r in self.records()]


@pytest.fixture
def json_logs() -> JsonLogCapture:
    """Configure query_binding logging at DEBUG into an in-memory stream."""
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    configure_logging(handler=handler, level=logging.DEBUG)
    return JsonLogCapture(stream)
