"""
Pytest fixtures and configuration for oscillation model tests.
"""

import matplotlib
matplotlib.use('Agg')

import pytest
import numpy as np

from sto_core import default_params, FRANSEN, ROTSTEIN


@pytest.fixture
def fransen_params():
    """Short, noise-free Fransen run."""
    params = default_params('Fransen')
    params.t_end = 0.01
    params.dt = 1e-4
    params.noise = False
    return params


@pytest.fixture
def rotstein_params():
    """Short, noise-free Rotstein run."""
    params = default_params('Rotstein')
    params.t_end = 20.0
    params.dt = 0.01
    params.noise = False
    return params


@pytest.fixture(params=[FRANSEN, ROTSTEIN], ids=['Fransen', 'Rotstein'])
def rate_set(request):
    """Fixture providing every rate function set."""
    return request.param


@pytest.fixture(params=['euler', 'crank-nicolson', 'RK45'])
def all_solvers(request):
    """Fixture providing a fixed-step and an adaptive solver name."""
    return request.param


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "physiological: mark test as checking physiological behavior"
    )
    config.addinivalue_line(
        "markers", "numerical: mark test as checking numerical properties"
    )
    config.addinivalue_line(
        "markers", "scipy: mark test as delegating to scipy solvers"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
