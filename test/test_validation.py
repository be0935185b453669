"""
Pytest-based validation tests for the oscillation model.

Run with: pytest test/
"""

import warnings

import numpy as np
import pytest

from sto_core import (
    FRANSEN, ROTSTEIN, default_params, simulate, derivatives,
    initial_state, resting_potential, total_current
)


class TestSteadyState:
    """The zero-input model started at its resting potential stays put."""

    @pytest.mark.physiological
    @pytest.mark.parametrize("rates,atol", [
        (FRANSEN, 1e-6),
        (ROTSTEIN, 1e-8),
    ])
    def test_zero_derivative_at_rest(self, rates, atol):
        params = default_params(rates.name)
        params.I_app = 0.0
        params.noise = False

        params.V_0 = resting_potential(params, rates)
        y0 = initial_state(params, rates).data
        dy = derivatives(0.0, y0, params, rates)

        np.testing.assert_allclose(dy, 0.0, atol=atol)

    def test_resting_potential_is_root(self):
        params = default_params('Fransen')
        V_rest = resting_potential(params)
        assert -0.1 < V_rest < 0.0
        assert total_current(V_rest, params, FRANSEN) == pytest.approx(0.0, abs=1e-20)

    def test_rotstein_resting_potential_uses_its_own_range(self):
        params = default_params('Rotstein')
        V_rest = resting_potential(params)
        low, high = ROTSTEIN.voltage_range
        assert low < V_rest < high
        assert V_rest < -1.0  # millivolts, not volts
        assert total_current(V_rest, params, ROTSTEIN) == pytest.approx(0.0, abs=1e-10)

    def test_explicit_bracket_overrides_range(self):
        params = default_params('Fransen')
        V_rest = resting_potential(params)
        narrow = (V_rest - 0.005, V_rest + 0.005)
        assert resting_potential(params, bracket=narrow) == pytest.approx(V_rest, abs=1e-12)


class TestNumericalProperties:
    """Tests for numerical behaviour of the integrators."""

    @pytest.mark.numerical
    def test_integrator_consistency(self):
        """Euler and the two-stage corrector approximate the same dynamics."""
        finals = {}
        for solver in ('euler', 'crank-nicolson'):
            params = default_params('Fransen')
            params.dt = 1e-5
            params.t_end = 0.05
            params.I_app = 0.0
            params.V_0 = -0.065
            params.noise = False
            params.solver = solver
            finals[solver] = simulate(params).V[-1]

        assert abs(finals['euler'] - finals['crank-nicolson']) < 1e-4

    @pytest.mark.numerical
    @pytest.mark.scipy
    def test_fixed_step_matches_adaptive(self):
        params = default_params('Fransen')
        params.dt = 1e-5
        params.t_end = 0.05
        params.noise = False
        params.I_app = 5e-11

        params.solver = 'crank-nicolson'
        cn = simulate(params)

        params.solver = 'RK45'
        params.solver_options = {'rtol': 1e-9, 'atol': 1e-12}
        rk = simulate(params)

        np.testing.assert_allclose(cn.V, rk.V, atol=1e-6)

    @pytest.mark.numerical
    def test_dt_convergence(self):
        """Halving dt roughly halves the Euler error."""
        def final_V(dt, solver='euler'):
            params = default_params('Fransen')
            params.dt = dt
            params.t_end = 0.02
            params.noise = False
            params.I_app = 5e-11
            params.solver = solver
            return simulate(params).V[-1]

        reference = final_V(1e-6, 'crank-nicolson')
        err_coarse = abs(final_V(4e-4) - reference)
        err_fine = abs(final_V(2e-4) - reference)
        assert err_fine < err_coarse

    @pytest.mark.numerical
    def test_unstable_step_diverges(self):
        """Too large a step produces non-finite values rather than an error."""
        params = default_params('Fransen')
        params.dt = 0.01
        params.t_end = 1.0
        params.noise = False

        with pytest.warns(UserWarning, match="Large dt"):
            with np.errstate(all='ignore'):
                result = simulate(params)

        assert len(result.time) == 101
        assert not np.all(np.isfinite(result.states))

    @pytest.mark.scipy
    def test_adaptive_solver_with_large_dt_does_not_warn(self):
        """For adaptive solvers dt only sets the output grid."""
        params = default_params('Fransen')
        params.dt = 0.01
        params.t_end = 0.1
        params.noise = False
        params.solver = 'RK45'

        with warnings.catch_warnings():
            warnings.simplefilter('error')
            result = simulate(params)

        assert len(result.time) == 11
        assert np.all(np.isfinite(result.states))

    def test_no_nans_or_infs(self):
        params = default_params('Fransen')
        params.t_end = 0.2
        params.seed = 3
        result = simulate(params)
        assert np.all(np.isfinite(result.states))
        assert np.all(np.isfinite(result.currents))


class TestGatingVariables:
    """Tests for gating variable behavior."""

    @pytest.mark.physiological
    @pytest.mark.parametrize("solver", ['euler', 'crank-nicolson'])
    def test_gating_variables_stay_in_bounds(self, solver):
        """All gating variables stay in [0, 1]."""
        params = default_params('Fransen')
        params.t_end = 0.2
        params.I_app = 2e-11
        params.I_app_t = (0.05, 0.15)
        params.solver = solver
        params.seed = 11
        result = simulate(params)

        gates = result.states[:, 1:]
        assert np.all(gates >= 0.0) and np.all(gates <= 1.0)

    @pytest.mark.physiological
    def test_depolarizing_current_raises_voltage(self):
        params = default_params('Rotstein')
        params.t_end = 50.0
        params.noise = False

        base = simulate(params).V[-1]
        params.I_app = 1.0
        stimulated = simulate(params).V[-1]
        assert stimulated > base

    @pytest.mark.physiological
    def test_current_step_response(self):
        """Voltage only departs from rest once the applied current turns on."""
        params = default_params('Fransen')
        params.noise = False
        params.t_end = 0.1
        params.V_0 = resting_potential(params)
        params.I_app = 5e-11
        params.I_app_t = (0.05, 0.1)
        result = simulate(params)

        before = result.V[result.time < 0.05]
        np.testing.assert_allclose(before, params.V_0, atol=1e-9)
        assert result.V[-1] > params.V_0 + 1e-3
