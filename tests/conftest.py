"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def reasoning_message(fixtures_dir: Path) -> Path:
    """Return path to a message with a reasoning block followed by an answer."""
    return fixtures_dir / "reasoning_then_answer.txt"


@pytest.fixture
def tool_calls_message(fixtures_dir: Path) -> Path:
    """Return path to a message with a completed tool call between text."""
    return fixtures_dir / "tool_calls.txt"


@pytest.fixture
def streaming_message(fixtures_dir: Path) -> Path:
    """Return path to a message cut off mid tool call."""
    return fixtures_dir / "streaming_partial.txt"
