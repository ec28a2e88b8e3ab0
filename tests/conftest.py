"""Shared fixtures for OptiCut tests."""

import matplotlib

matplotlib.use("Agg")

import pytest

from data_models import PieceRequest, PackingSettings
from optimization_guillotine import run_guillotine_optimization


@pytest.fixture
def default_settings() -> PackingSettings:
    return PackingSettings()


@pytest.fixture
def standard_requests():
    """Mixed piece list for a 244x122 board."""
    return [
        PieceRequest(60, 40, 8, 0, "Side panel"),
        PieceRequest(90, 30, 4, 1, "Shelf"),
        PieceRequest(70, 45, 2, 2),
        PieceRequest(120, 60, 1, 3, "Back"),
    ]


@pytest.fixture
def standard_result(standard_requests):
    return run_guillotine_optimization(244, 122, standard_requests)


@pytest.fixture
def infeasible_requests():
    """A piece wider than a 100x100 board in both orientations, plus a small one."""
    return [
        PieceRequest(200, 10, 1, 0, "Too long"),
        PieceRequest(10, 10, 3, 1, "Small"),
    ]
