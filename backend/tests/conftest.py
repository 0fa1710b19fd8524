"""Shared fixtures for the schemeless test suite."""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_schema_path() -> Path:
    """Path to a realistic, valid managed-schema file."""
    return FIXTURES_DIR / "managed-schema.xml"


@pytest.fixture
def sample_schema(sample_schema_path: Path) -> str:
    """Content of the realistic, valid managed-schema file."""
    return sample_schema_path.read_text(encoding="utf-8")
