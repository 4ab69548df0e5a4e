"""Pytest configuration: load .env early and isolate the driver registry.

This runs before any tests, so modules can import without local path hacks.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Ensure repository root is on sys.path for local package imports
sys.path.append(str(Path(__file__).resolve().parents[1]))

load_dotenv(override=False)

from switchyard.services import runtime  # noqa: E402  pylint: disable=wrong-import-position


@pytest.fixture(autouse=True)
def _isolated_driver_registry():
    """Each test starts with an empty process-wide driver registry."""
    runtime.clear_drivers()
    yield
    runtime.clear_drivers()
