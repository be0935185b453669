"""
Membrane equations, ionic currents, and parameter definitions for the
H-current / persistent sodium oscillation model.
"""

import numpy as np
from typing import Dict, Optional, Sequence, Union, Any
from dataclasses import dataclass, field, fields, asdict
from scipy.optimize import brentq

from .exceptions import ConfigurationError
from .rates import RateFunctionSet, get_rate_functions


@dataclass
class OscParameters:
    """
    Parameters for a single-compartment subthreshold oscillation run.

    Units follow the selected rate function set: SI (V, s, A, S, F) for
    Fransen, (mV, ms, uA/cm^2, mS/cm^2, uF/cm^2) for Rotstein.
    Default values are the Fransen configuration; see ``defaults.py``.
    """
    # Initial condition: V_0 with steady-state gates, or an explicit state
    V_0: float = -0.065
    y_0: Optional[Sequence[float]] = None

    # Time span and solver
    t_end: float = 1.0
    dt: Optional[float] = 1e-4
    solver: str = 'euler'
    solver_options: Dict[str, Any] = field(default_factory=dict)

    # Leak
    G_L: float = 3.0e-9
    V_L: float = -0.065

    # Membrane capacitance
    C_m: float = 1.0e-10

    # H-current
    G_H_Fast_Max: float = 1.5e-9
    G_H_Slow_Max: float = 1.0e-9
    V_H: float = -0.020

    # Persistent sodium current
    G_NaP_Max: float = 5.0e-10
    V_NaP: float = 0.087

    # Applied current and optional activation interval
    I_app: float = 0.0
    I_app_t: Optional[Union[float, Sequence[float]]] = None

    rate_functions: str = 'Fransen'

    # Channel noise on the leak term
    noise: bool = True
    noise_probability: float = 0.03
    noise_scale: float = 0.98
    seed: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'OscParameters':
        """
        Create parameters from dictionary, rejecting unknown keys.

        List values of ``y_0`` and ``I_app_t`` become tuples, so parameters
        read back from JSON compare equal to the ones that were written.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ConfigurationError(f"Unknown parameter(s): {unknown}")
        d = dict(d)
        for key in ('y_0', 'I_app_t'):
            if isinstance(d.get(key), list):
                d[key] = tuple(d[key])
        return cls(**d)


@dataclass
class OscState:
    """
    State variables of the oscillation model.

    Shape conventions:
    - Single state: (3,) [V, rf, rs] or (4,) [V, rf, rs, q]
    - Trajectory: (n_samples, 3) or (n_samples, 4)

    The number of columns is set by the rate function set in use.
    """
    data: np.ndarray

    @property
    def V(self) -> np.ndarray:
        """Membrane potential."""
        return self.data[..., 0]

    @property
    def rf(self) -> np.ndarray:
        """Fast H-channel activation."""
        return self.data[..., 1]

    @property
    def rs(self) -> np.ndarray:
        """Slow H-channel activation."""
        return self.data[..., 2]

    @property
    def q(self) -> np.ndarray:
        """NaP inactivation (4-state model only)."""
        return self.data[..., 3]

    @V.setter
    def V(self, value):
        self.data[..., 0] = value

    @rf.setter
    def rf(self, value):
        self.data[..., 1] = value

    @rs.setter
    def rs(self, value):
        self.data[..., 2] = value

    @q.setter
    def q(self, value):
        self.data[..., 3] = value

    @staticmethod
    def steady_state(V: float, rates: RateFunctionSet) -> 'OscState':
        """
        State with every gate at its steady-state value for voltage V.
        """
        values = [V, rates.rf_inf(V), rates.rs_inf(V)]
        if rates.has_inactivation:
            values.append(rates.q_inf(V))
        return OscState(np.array(values, dtype=np.float64))


class ChannelNoise:
    """
    Stochastic scale factor applied to the leak conductance.

    Each call draws a fresh factor: ``scale`` with probability
    ``probability``, otherwise 1.0. Pass a seeded ``numpy.random.Generator``
    for reproducible runs, or ``enabled=False`` to always return 1.0.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None,
                 probability: float = 0.03, scale: float = 0.98,
                 enabled: bool = True):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.probability = probability
        self.scale = scale
        self.enabled = enabled

    @classmethod
    def from_params(cls, params: OscParameters,
                    rng: Optional[np.random.Generator] = None) -> 'ChannelNoise':
        if rng is None:
            rng = np.random.default_rng(params.seed)
        return cls(rng, params.noise_probability, params.noise_scale,
                   enabled=params.noise)

    def __call__(self) -> float:
        if not self.enabled:
            return 1.0
        if self.rng.random() < self.probability:
            return self.scale
        return 1.0


def compute_currents(states: np.ndarray, params: OscParameters,
                     rates: RateFunctionSet) -> np.ndarray:
    """
    Compute H and NaP currents for one state or a batch of states.

    Args:
        states: Array of shape (n_states,) or (N, n_states)
        params: Model parameters
        rates: Rate function set the states were produced with

    Returns:
        Array of shape (2,) or (N, 2) with columns (I_H, I_NaP)
    """
    state = OscState(np.asarray(states, dtype=np.float64))
    V = state.V

    I_H = (params.G_H_Fast_Max * state.rf
           + params.G_H_Slow_Max * state.rs) * (V - params.V_H)

    p = rates.p_inf(V)
    if rates.has_inactivation:
        p = p * state.q
    I_NaP = params.G_NaP_Max * p * (V - params.V_NaP)

    return np.stack([I_H, I_NaP], axis=-1)


def app_interval(I_app_t):
    """Normalize I_app_t to (start, end), or None if always on."""
    if I_app_t is None:
        return None
    try:
        interval = np.atleast_1d(np.asarray(I_app_t, dtype=np.float64))
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"I_app_t must be numeric, got {I_app_t!r}"
        ) from None
    if interval.size == 0:
        return None
    if interval.size == 1:
        return 0.0, float(interval[0])
    if interval.size == 2:
        return float(interval[0]), float(interval[1])
    raise ConfigurationError(
        f"I_app_t must be a scalar or a (start, end) pair, got {I_app_t!r}"
    )


def injected_current(t: float, params: OscParameters) -> float:
    """
    Applied current at time t.

    With no activation interval, I_app is returned unconditionally; otherwise
    I_app inside the half-open interval [start, end) and zero outside.
    """
    interval = app_interval(params.I_app_t)
    if interval is None:
        return params.I_app
    start, end = interval
    if start <= t < end:
        return params.I_app
    return 0.0


def total_current(V: float, params: OscParameters, rates: RateFunctionSet,
                  noise_factor: float = 1.0) -> float:
    """Total ionic current with all gates at steady state for voltage V."""
    state = OscState.steady_state(V, rates)
    I_H, I_NaP = compute_currents(state.data, params, rates)
    return I_H + I_NaP + noise_factor * params.G_L * (V - params.V_L)


def derivatives(t: float, y: np.ndarray, params: OscParameters,
                rates: RateFunctionSet,
                noise: Optional[ChannelNoise] = None) -> np.ndarray:
    """
    Compute time derivatives of the state vector.

    Args:
        t: Time
        y: State vector (V, rf, rs[, q])
        params: Model parameters
        rates: Rate function set
        noise: Leak noise source; a fresh factor is drawn on every call.
            None disables the noise.

    Returns:
        Array of derivatives with the same shape as y
    """
    state = OscState(np.asarray(y, dtype=np.float64))
    V = state.V

    N = noise() if noise is not None else 1.0
    I_H, I_NaP = compute_currents(state.data, params, rates)
    I_ion = I_H + I_NaP + N * params.G_L * (V - params.V_L)

    dV = (injected_current(t, params) - I_ion) / params.C_m
    drf = (rates.rf_inf(V) - state.rf) / rates.tau_rf(V)
    drs = (rates.rs_inf(V) - state.rs) / rates.tau_rs(V)

    if rates.has_inactivation:
        dq = (rates.q_inf(V) - state.q) / rates.tau_q(V)
        return np.array([dV, drf, drs, dq])
    return np.array([dV, drf, drs])


def initial_state(params: OscParameters, rates: RateFunctionSet) -> OscState:
    """
    Resolve the initial state of a run.

    An explicit ``y_0`` is used verbatim and must match the rate function
    set's state length; otherwise the gates start at steady state for V_0.
    """
    if params.y_0 is None:
        return OscState.steady_state(params.V_0, rates)

    y_0 = np.asarray(params.y_0, dtype=np.float64).reshape(-1)
    if y_0.shape[0] != rates.n_states:
        raise ConfigurationError(
            f"Initial state has {y_0.shape[0]} components but rate function "
            f"set '{rates.name}' requires {rates.n_states} "
            f"({', '.join(rates.state_names)})"
        )
    return OscState(y_0.copy())


def resting_potential(params: OscParameters,
                      rates: Optional[RateFunctionSet] = None,
                      bracket: Optional[Sequence[float]] = None,
                      xtol: float = 1e-15) -> float:
    """
    Voltage at which the zero-input, noise-free model is at equilibrium.

    Uses Brent's method on the steady-state total current within ``bracket``
    (in the units of the rate function set). The default bracket is the
    set's ``voltage_range``.
    """
    if rates is None:
        rates = get_rate_functions(params.rate_functions)
    if bracket is None:
        bracket = rates.voltage_range

    def F(V):
        return total_current(V, params, rates)

    return float(brentq(F, bracket[0], bracket[1], xtol=xtol, maxiter=500))
