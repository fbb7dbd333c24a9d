"""Shared pytest fixtures."""

from __future__ import annotations

import random

import pytest

from breath_guard.catalog import ExerciseCatalog, default_catalog
from breath_guard.models import UserState

from tests.factories import make_state


@pytest.fixture
def user_state() -> UserState:
    return make_state()


@pytest.fixture
def catalog() -> ExerciseCatalog:
    return default_catalog()


@pytest.fixture
def exercise(catalog: ExerciseCatalog):
    """Look up a built-in exercise by id."""
    return catalog.get


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)
