"""Pytest configuration and fixtures for the TC4400 exporter tests."""

from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from tests.helpers import load_fixture


@pytest.fixture
def registry():
    return CollectorRegistry()


@pytest.fixture
def statsifc_html():
    return load_fixture("statsifc.html")


@pytest.fixture
def cmconnectionstatus_html():
    return load_fixture("cmconnectionstatus.html")
