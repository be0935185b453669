"""
Basic functionality tests for the oscillation simulator.

These tests verify that core functionality works correctly.
Run with: pytest test/test_basic.py
"""

import numpy as np
import pytest


def test_imports():
    """Test that all modules can be imported."""
    from sto_core import OscParameters, OscState, ForwardEuler, CrankNicolson
    from sto_core import simulate, Simulator, OscillationModel
    from sto_core.plotting import plot_results
    from sto_core.io import save_results, load_results

    # If we get here, all imports succeeded
    assert True


def test_model_creation():
    """Test model and state creation."""
    from sto_core import OscillationModel

    model = OscillationModel()
    params = model.get_params()
    assert params.rate_functions == 'Fransen'
    assert params.C_m == 1.0e-10

    state = model.initial_state()
    assert state.data.shape == (4,)

    model = OscillationModel(config='Rotstein')
    assert model.initial_state().data.shape == (3,)


def test_set_params():
    from sto_core import OscillationModel, ConfigurationError

    model = OscillationModel()
    model.set_params(I_app=1e-10, t_end=2.0)
    assert model.params.I_app == 1e-10
    assert model.params.t_end == 2.0

    with pytest.raises(ConfigurationError):
        model.set_params(g_Na=120.0)


def test_basic_simulation():
    """Test basic single run with default parameters."""
    from sto_core import Simulator, OscillationModel

    model = OscillationModel()
    model.set_params(t_end=0.05, seed=0)
    result = Simulator(model=model).run()

    assert len(result.time) == len(result.V)
    assert result.states.shape == (len(result.time), 4)
    assert result.currents.shape == (len(result.time), 2)
    assert result.V[0] == pytest.approx(-0.065)
    assert np.all(np.isfinite(result.states))


def test_result_unpacks_like_tuple(fransen_params):
    from sto_core import simulate

    time, states, currents, params = simulate(fransen_params)
    assert len(time) == states.shape[0] == currents.shape[0]
    assert params == fransen_params
    assert params is not fransen_params


@pytest.mark.parametrize("solver", ['euler', 'crank-nicolson', 'ode45'])
def test_different_solvers(solver, fransen_params):
    """Test different integrator types."""
    from sto_core import simulate

    fransen_params.solver = solver
    result = simulate(fransen_params)
    assert result.V is not None
    np.testing.assert_allclose(result.time, np.linspace(0.0, 0.01, 101))
