"""
Pytest configuration and shared fixtures.

Provides sample log lines in every supported format.
"""

from typing import List

import pytest


@pytest.fixture
def json_lines() -> List[str]:
    """
    Fixture providing well-formed JSON log lines.

    Returns:
        List[str]: Ten JSON objects with timestamp/level/message and extras
    """
    lines = []
    for i in range(10):
        level = "ERROR" if i % 5 == 0 else "INFO"
        lines.append(
            f'{{"timestamp":"2024-01-02T15:04:{i:02d}Z","level":"{level}",'
            f'"message":"Request {i} processed","service":"api","attempt":{i}}}'
        )
    return lines


@pytest.fixture
def logfmt_lines() -> List[str]:
    """
    Fixture providing logfmt lines with level= and msg= pairs.

    Returns:
        List[str]: Ten logfmt lines
    """
    return [
        f'time=2024-01-02T15:04:{i:02d}Z level=info msg="Task {i} completed" service=worker task_id=t{i}'
        for i in range(10)
    ]


@pytest.fixture
def text_lines() -> List[str]:
    """
    Fixture providing bracket-tagged text lines without '='.

    Returns:
        List[str]: Ten plain-text lines
    """
    levels = ["INFO", "WARN", "ERROR", "DEBUG", "INFO"]
    return [f"[{levels[i % len(levels)]}] Step {i} finished" for i in range(10)]


def pytest_configure(config):
    """
    Pytest hook for custom configuration.

    Registers custom markers used throughout tests.
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
