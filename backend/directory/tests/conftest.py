"""Shared fixtures for user directory server tests."""

from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from directory.server.app import build_repository, create_app
from directory.server.settings import DirectoryServerSettings


@pytest.fixture
def settings() -> DirectoryServerSettings:
    return DirectoryServerSettings()


@pytest.fixture
def strict_settings() -> DirectoryServerSettings:
    return DirectoryServerSettings(strict_mode=True)


@pytest.fixture
def client(settings: DirectoryServerSettings) -> TestClient:
    """Client for a fresh app whose repository holds only the seeded admin."""
    return TestClient(create_app(settings=settings, repository=build_repository(settings)))


@pytest.fixture
def strict_client(strict_settings: DirectoryServerSettings) -> TestClient:
    return TestClient(create_app(settings=strict_settings))
