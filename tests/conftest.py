"""Shared fixtures for MockGate tests."""

from pathlib import Path

import pytest

from mockgate.mock.gate import MockConfig, MockGate

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    """Directory holding the sample payload files."""
    return FIXTURES_DIR


@pytest.fixture
def gate():
    """MockGate searching the test fixtures first, then the app fixtures."""
    config = MockConfig(
        resource_dirs=[str(FIXTURES_DIR / "app")],
        test_resource_dirs=[str(FIXTURES_DIR / "test")],
        log_level="debug"
    )
    mock_gate = MockGate(config)

    yield mock_gate

    mock_gate.close()
