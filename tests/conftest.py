"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import os
from typing import Any, Dict, List

import pytest

# Settings() must initialize without a bespoke .env file.
os.environ.setdefault("TABLESCRIBE_ENV_FILE", "tests/.env.missing")

from fakes import FakeConnection, build_catalog  # noqa: E402
from tablescribe.table import Table  # noqa: E402


@pytest.fixture
def catalog() -> Dict[str, Dict[str, List[Dict[str, Any]]]]:
    return build_catalog()


@pytest.fixture
def connection(catalog) -> FakeConnection:
    return FakeConnection(catalog)


@pytest.fixture
def make_table(connection):
    """Build a Table bound to the fake connection."""

    def _make(name: str, model: Any = None) -> Table:
        return Table(name, connection, model=model)

    return _make


@pytest.fixture
def users(make_table) -> Table:
    return make_table("users")
