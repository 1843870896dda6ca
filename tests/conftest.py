"""Pytest configuration and shared fixtures for the chi-squared lecture tests."""

import matplotlib

matplotlib.use("Agg")

import pytest

from chisq_lecture import config
from chisq_lecture.results_manager import ResultsManager


@pytest.fixture
def results_manager(tmp_path):
    """A ResultsManager writing into a fresh temporary directory."""
    return ResultsManager(str(tmp_path), "batch", "dataset")


@pytest.fixture
def test_config():
    """Lecture settings with a small, single-process simulation."""
    return config.overridden(
        simulation_n_simulations=400,
        simulation_batch_size=100,
        n_jobs=1,
        distribution_normal_samples=2000,
    )
