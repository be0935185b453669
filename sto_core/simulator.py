"""
High-level API for subthreshold oscillation simulations.

``simulate`` resolves parameters and the initial state, runs the selected
integrator, and recomputes the ionic currents over the whole trajectory.
"""

import copy
import warnings
from typing import Any, Dict, Mapping, Optional, Union

import numpy as np

from .defaults import default_params
from .exceptions import ConfigurationError
from .integrators import Solver, make_integrator, time_grid
from .models import (
    OscParameters, OscState, ChannelNoise,
    app_interval, compute_currents, derivatives, initial_state
)
from .rates import RateFunctionSet, get_rate_functions


def _resolve_params(params) -> OscParameters:
    if params is None:
        return default_params('Fransen')
    if isinstance(params, OscParameters):
        return copy.deepcopy(params)
    if isinstance(params, Mapping):
        return OscParameters.from_dict(dict(params))
    raise ConfigurationError(
        f"Expected OscParameters or a mapping of parameters, "
        f"got {type(params).__name__}"
    )


def _check_step_size(params: OscParameters, rates: RateFunctionSet,
                     state0: OscState):
    """Warn if dt is large compared to the fastest time constant at start."""
    V = state0.V
    taus = [params.C_m / params.G_L, rates.tau_rf(V), rates.tau_rs(V)]
    if rates.has_inactivation:
        taus.append(rates.tau_q(V))
    taus = [abs(float(tau)) for tau in taus if np.isfinite(tau)]
    if taus and params.dt > 0.5 * min(taus):
        warnings.warn(
            f"Large dt ({params.dt}) compared to the fastest time constant "
            f"({min(taus):.3g}) may cause numerical instability."
        )


def simulate(params: Optional[Union[OscParameters, Mapping[str, Any]]] = None,
             rng: Optional[np.random.Generator] = None) -> 'SimulationResult':
    """
    Run one simulation.

    Args:
        params: Model parameters, a mapping of parameter values, or None for
            the Fransen defaults. The caller's record is not modified.
        rng: Random generator for the leak noise (overrides ``params.seed``)

    Returns:
        SimulationResult, which unpacks to (time, states, currents, params)

    Raises:
        ConfigurationError: before integration, if the configuration is invalid
    """
    params = _resolve_params(params)
    rates = get_rate_functions(params.rate_functions)
    solver = Solver.from_name(params.solver)

    if params.t_end is None or not params.t_end > 0:
        raise ConfigurationError(f"t_end must be positive, got {params.t_end}")
    if not isinstance(params.solver_options, Mapping):
        raise ConfigurationError("solver_options must be a mapping")
    app_interval(params.I_app_t)

    state0 = initial_state(params, rates)

    has_dt = params.dt is not None and params.dt > 0
    if solver.fixed_step and not has_dt:
        raise ConfigurationError(
            f"Solver '{solver.value}' requires a positive dt, got {params.dt}"
        )
    if has_dt:
        tspan = time_grid(0.0, params.t_end, params.dt)
    else:
        tspan = np.array([0.0, params.t_end])
    if solver.fixed_step and tspan.size <= 2:
        raise ConfigurationError(
            f"Time span [0, {params.t_end}] with dt={params.dt} gives only "
            f"{tspan.size} points; fixed-step solvers need more than 2"
        )
    if solver.fixed_step:
        _check_step_size(params, rates, state0)

    noise = ChannelNoise.from_params(params, rng)

    def func(t, y):
        return derivatives(t, y, params, rates, noise)

    integrator = make_integrator(solver, func, **params.solver_options)
    time, states = integrator.integrate(tspan, state0.data)
    currents = compute_currents(states, params, rates)

    return SimulationResult(time, states, currents, params, rates)


class SimulationResult:
    """
    Container for simulation results.

    Iterating yields (time, states, currents, params), so a result can be
    unpacked like a tuple. State columns are ordered (V, rf, rs[, q]) and
    current columns (I_H, I_NaP).
    """

    def __init__(self, time: np.ndarray, states: np.ndarray,
                 currents: np.ndarray, params: OscParameters,
                 rates: RateFunctionSet):
        self.time = time
        self.states = states
        self.currents = currents
        self.params = params
        self.rates = rates

    def __iter__(self):
        return iter((self.time, self.states, self.currents, self.params))

    @property
    def V(self) -> np.ndarray:
        """Voltage trace."""
        return self.states[:, 0]

    @property
    def rf(self) -> np.ndarray:
        """Fast H-channel activation."""
        return self.states[:, 1]

    @property
    def rs(self) -> np.ndarray:
        """Slow H-channel activation."""
        return self.states[:, 2]

    @property
    def q(self) -> Optional[np.ndarray]:
        """NaP inactivation, or None for 3-state models."""
        if not self.rates.has_inactivation:
            return None
        return self.states[:, 3]

    @property
    def I_H(self) -> np.ndarray:
        return self.currents[:, 0]

    @property
    def I_NaP(self) -> np.ndarray:
        return self.currents[:, 1]

    def plot(self, **kwargs):
        """
        Plot simulation results.

        Returns:
            matplotlib figure and axes
        """
        from .plotting import plot_results
        return plot_results(self.time, self.states, self.currents, **kwargs)

    def save(self, path) -> str:
        """Write the results to a compressed archive; returns the file name."""
        from .io import save_results
        return save_results(path, self.time, self.states, self.currents,
                            self.params)

    def summary(self) -> str:
        """
        Get text summary of simulation results.

        Returns:
            Summary string
        """
        from .analysis import oscillation_amplitude, oscillation_frequency

        lines = ["Simulation Results Summary"]
        lines.append("=" * 40)
        lines.append(f"Rate functions: {self.rates.name}")
        lines.append(f"Solver: {self.params.solver}")
        lines.append(f"Duration: {self.time[-1]:.4g}")
        lines.append(f"Number of samples: {len(self.time)}")
        lines.append(f"V range: [{self.V.min():.4g}, {self.V.max():.4g}]")
        lines.append(f"Final V: {self.V[-1]:.4g}")

        if len(self.time) > 3:
            freq = oscillation_frequency(self.time, self.V)
            amp = oscillation_amplitude(self.time, self.V)
            lines.append(f"Oscillation frequency: {freq:.4g}")
            lines.append(f"Oscillation amplitude: {amp:.4g}")

        return "\n".join(lines)


class OscillationModel:
    """
    H-current / NaP oscillation model.

    Encapsulates model parameters and provides a clean interface.
    """

    def __init__(self, params: Optional[OscParameters] = None,
                 config: str = 'Fransen'):
        """
        Initialize model.

        Args:
            params: Model parameters (uses defaults for ``config`` if None)
            config: Name of the default configuration
        """
        self.params = params if params is not None else default_params(config)

    @property
    def rates(self) -> RateFunctionSet:
        return get_rate_functions(self.params.rate_functions)

    def get_params(self) -> OscParameters:
        """Get model parameters."""
        return self.params

    def set_params(self, **kwargs):
        """
        Update model parameters.

        Example:
            model.set_params(I_app=1e-10, t_end=2.0)
        """
        for key, value in kwargs.items():
            if hasattr(self.params, key):
                setattr(self.params, key, value)
            else:
                raise ConfigurationError(f"Unknown parameter: {key}")

    def initial_state(self) -> OscState:
        """Initial state resolved from y_0 or V_0."""
        return initial_state(self.params, self.rates)


class Simulator:
    """
    Main simulator class.

    Runs a model repeatedly, optionally sharing one random generator so a
    sequence of runs is reproducible from a single seed.
    """

    def __init__(self, model: Optional[OscillationModel] = None,
                 rng: Optional[np.random.Generator] = None):
        self.model = model if model is not None else OscillationModel()
        self.rng = rng

    def run(self, **overrides) -> SimulationResult:
        """
        Run simulation.

        Keyword arguments override model parameters for this run only,
        e.g. ``sim.run(solver='RK45', dt=None)``.
        """
        params: Dict[str, Any] = self.model.params.to_dict()
        params.update(overrides)
        return simulate(params, rng=self.rng)
