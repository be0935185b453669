"""
Numerical integration methods for the oscillation model.

Two fixed-step explicit schemes are implemented here; every other method is
delegated to ``scipy.integrate.solve_ivp``.
"""

import warnings
from enum import Enum
from typing import Callable, Dict, Optional, Tuple, Type

import numpy as np
from scipy.integrate import solve_ivp

from .exceptions import ConfigurationError


DerivativeFunc = Callable[[float, np.ndarray], np.ndarray]


class Solver(str, Enum):
    """Integrator selector."""
    EULER = 'euler'
    CRANK_NICOLSON = 'crank-nicolson'
    RK45 = 'RK45'
    RK23 = 'RK23'
    DOP853 = 'DOP853'
    RADAU = 'Radau'
    BDF = 'BDF'
    LSODA = 'LSODA'

    @property
    def fixed_step(self) -> bool:
        return self in (Solver.EULER, Solver.CRANK_NICOLSON)

    @classmethod
    def from_name(cls, name) -> 'Solver':
        """
        Resolve a solver name (case-insensitive).

        MATLAB-style names are accepted as aliases of the matching
        scipy methods.
        """
        if isinstance(name, Solver):
            return name
        key = str(name).strip().lower().replace('_', '-')
        if key in _ALIASES:
            return _ALIASES[key]
        for solver in cls:
            if solver.value.lower() == key:
                return solver
        raise ConfigurationError(
            f"Unknown solver: '{name}'. Valid options are "
            f"{[s.value for s in cls] + sorted(_ALIASES)}."
        )


_ALIASES = {
    'cn': Solver.CRANK_NICOLSON,
    'cranknicolson': Solver.CRANK_NICOLSON,
    'forward-euler': Solver.EULER,
    'ode45': Solver.RK45,
    'ode23': Solver.RK23,
    'ode113': Solver.LSODA,
    'ode15s': Solver.BDF,
    'ode23s': Solver.RADAU,
}


def time_grid(t_start: float, t_end: float, dt: float) -> np.ndarray:
    """
    Uniform grid t_start, t_start + dt, ... up to and including t_end
    when t_end lies on the grid, within a relative tolerance of 1e-9 on
    the step count.
    """
    if dt is None or not dt > 0:
        raise ConfigurationError(f"dt must be positive, got {dt}")
    n = (t_end - t_start) / dt
    n_steps = int(np.floor(n + 1e-9 * max(1.0, abs(n))))
    return t_start + dt * np.arange(n_steps + 1)


class IntegratorBase:
    """Base class for ODE integrators."""

    def __init__(self, func: DerivativeFunc):
        self.func = func

    def integrate(self, tspan, y0: np.ndarray,
                  dt: Optional[float] = None) -> Tuple[np.ndarray, np.ndarray]:
        """
        Integrate from y0 over tspan.

        Args:
            tspan: Explicit increasing sample times, or [start, end]
            y0: Initial state vector
            dt: Step used to expand a 2-element [start, end] span

        Returns:
            (time, trajectory) with trajectory of shape (len(time), len(y0))
        """
        raise NotImplementedError


class FixedStepIntegrator(IntegratorBase):
    """Explicit one-step scheme on a prescribed time grid."""

    def step(self, t: float, y: np.ndarray, dt: float) -> np.ndarray:
        """
        Advance state by one time step.

        Args:
            t: Current time
            y: Current state
            dt: Time step

        Returns:
            New state
        """
        raise NotImplementedError

    def resolve_times(self, tspan, dt: Optional[float]) -> np.ndarray:
        tspan = np.asarray(tspan, dtype=np.float64).reshape(-1)
        if tspan.size == 2:
            if dt is None or not dt > 0:
                raise ConfigurationError(
                    f"{type(self).__name__} needs a positive dt to expand the "
                    f"time span [{tspan[0]}, {tspan[1]}], got dt={dt}"
                )
            tspan = time_grid(tspan[0], tspan[1], dt)
        if tspan.size <= 2:
            raise ConfigurationError(
                f"{type(self).__name__} needs more than 2 time points, "
                f"got {tspan.size}"
            )
        if np.any(np.diff(tspan) <= 0):
            raise ConfigurationError("Time points must be strictly increasing")
        return tspan

    def integrate(self, tspan, y0: np.ndarray,
                  dt: Optional[float] = None) -> Tuple[np.ndarray, np.ndarray]:
        time = self.resolve_times(tspan, dt)
        y0 = np.asarray(y0, dtype=np.float64).reshape(-1)

        trajectory = np.empty((time.size, y0.size), dtype=np.float64)
        trajectory[0] = y0

        # Steps follow the grid spacing; uniform grids give a constant dt
        for i in range(time.size - 1):
            h = time[i + 1] - time[i]
            trajectory[i + 1] = self.step(time[i], trajectory[i], h)

        return time, trajectory


class ForwardEuler(FixedStepIntegrator):
    """
    Forward Euler integration (first-order).

    Simple but can be unstable for large dt.
    """

    def step(self, t: float, y: np.ndarray, dt: float) -> np.ndarray:
        """Forward Euler step: y(t+dt) = y(t) + dt * f(t, y(t))"""
        return y + dt * self.func(t, y)


class CrankNicolson(FixedStepIntegrator):
    """
    Two-stage explicit predictor-corrector, historically labelled
    "Crank-Nicolson".

    The predictor takes half an Euler step and the corrector evaluates the
    derivative there, at the start time t:

        y_half = y + dt/2 * f(t, y)
        y(t+dt) = y + dt * f(t, y_half)

    This is a midpoint-style scheme, not the implicit trapezoidal method
    usually called Crank-Nicolson.
    """

    def step(self, t: float, y: np.ndarray, dt: float) -> np.ndarray:
        predictor = y + 0.5 * dt * self.func(t, y)
        return y + dt * self.func(t, predictor)


class ScipyAdaptive(IntegratorBase):
    """
    Delegation to ``scipy.integrate.solve_ivp``.

    If sample times beyond [start, end] are requested, the solver's dense
    output is evaluated at exactly those times; otherwise the solver's own
    (possibly non-uniform) step times are returned.
    """

    def __init__(self, func: DerivativeFunc, method: str = 'RK45', **options):
        super().__init__(func)
        self.method = method
        self.options = options

    def integrate(self, tspan, y0: np.ndarray,
                  dt: Optional[float] = None) -> Tuple[np.ndarray, np.ndarray]:
        tspan = np.asarray(tspan, dtype=np.float64).reshape(-1)
        if tspan.size < 2:
            raise ConfigurationError(
                f"Time span needs at least start and end, got {tspan.size} points"
            )
        if tspan.size == 2 and dt is not None and dt > 0:
            tspan = time_grid(tspan[0], tspan[1], dt)
        y0 = np.asarray(y0, dtype=np.float64).reshape(-1)

        dense = tspan.size > 2
        options = dict(self.options)
        requested = options.pop('dense_output', None)
        if dense and requested is False:
            warnings.warn(
                "dense_output=False ignored: dense output is required to "
                "sample the solution on a fixed grid"
            )

        sol = solve_ivp(
            self.func,
            (tspan[0], tspan[-1]),
            y0,
            method=self.method,
            dense_output=dense or bool(requested),
            **options
        )
        if not sol.success:
            raise RuntimeError(f"{self.method} solver failed: {sol.message}")

        if dense:
            return tspan, sol.sol(tspan).T
        return np.asarray(sol.t, dtype=np.float64), np.asarray(sol.y, dtype=np.float64).T


_FIXED_STEP: Dict[Solver, Type[FixedStepIntegrator]] = {
    Solver.EULER: ForwardEuler,
    Solver.CRANK_NICOLSON: CrankNicolson,
}


def make_integrator(solver, func: DerivativeFunc,
                    **options) -> IntegratorBase:
    """
    Create the integrator named by ``solver``.

    Options are only meaningful for the scipy methods and are passed through
    to ``solve_ivp`` (e.g. ``rtol``, ``atol``, ``max_step``).
    """
    solver = Solver.from_name(solver)
    if solver.fixed_step:
        if options:
            warnings.warn(
                f"Solver options {sorted(options)} are ignored by "
                f"the fixed-step '{solver.value}' integrator"
            )
        return _FIXED_STEP[solver](func)
    return ScipyAdaptive(func, method=solver.value, **options)
