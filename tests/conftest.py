"""Shared fixtures for the drill timing tests."""

from __future__ import annotations

import copy

import pytest

from drill_timing.fixtures import ALL_FIXTURES
from drill_timing.schema import DrillState


def load_state(name: str) -> DrillState:
    return DrillState.model_validate(copy.deepcopy(ALL_FIXTURES[name]))


@pytest.fixture
def pass_and_run() -> DrillState:
    return load_state("pass_and_run")


@pytest.fixture
def one_two() -> DrillState:
    return load_state("one_two")


@pytest.fixture(params=sorted(ALL_FIXTURES))
def any_state(request) -> DrillState:
    return load_state(request.param)


@pytest.fixture
def load():
    """Factory fixture: load(name) -> fresh DrillState for a named fixture"""
    return load_state
