"""
Voltage-dependent rate functions for the H-current / NaP oscillation model.

Two published kinetic families are provided:

- Fransen: entorhinal stellate cell kinetics in SI units (volts, seconds),
  including slow inactivation of the persistent sodium current (4-state model).
- Rotstein: the reduced stellate cell model in mV and ms, without NaP
  inactivation (3-state model).

Each family is an immutable RateFunctionSet. Whether a set defines
``q_inf``/``tau_q`` is the only thing that decides the state vector shape.
"""

import numpy as np
from dataclasses import dataclass
from typing import Callable, Optional, Dict, Tuple

from .exceptions import ConfigurationError


RateFunction = Callable[[np.ndarray], np.ndarray]


@dataclass(frozen=True)
class RateFunctionSet:
    """
    Bundle of steady-state and time-constant functions of membrane voltage.

    All functions accept a scalar or an array of voltages.
    ``voltage_range`` is the physiological voltage window in the units of the
    set, used as the default search range for the resting potential.
    """
    name: str
    rf_inf: RateFunction
    tau_rf: RateFunction
    rs_inf: RateFunction
    tau_rs: RateFunction
    p_inf: RateFunction
    q_inf: Optional[RateFunction] = None
    tau_q: Optional[RateFunction] = None
    voltage_range: Tuple[float, float] = (-0.1, 0.0)

    def __post_init__(self):
        if (self.q_inf is None) != (self.tau_q is None):
            raise ValueError(
                f"Rate function set '{self.name}' must define both q_inf and "
                f"tau_q or neither"
            )

    @property
    def has_inactivation(self) -> bool:
        """True if the set models NaP inactivation (4-state model)."""
        return self.q_inf is not None

    @property
    def n_states(self) -> int:
        """Length of the state vector: (V, rf, rs) or (V, rf, rs, q)."""
        return 4 if self.has_inactivation else 3

    @property
    def state_names(self):
        names = ['V', 'rf', 'rs']
        if self.has_inactivation:
            names.append('q')
        return names


# Fransen et al. kinetics (volts)

def _fransen_p_inf(V):
    return 1.0 / (1.0 + np.exp(-(V + 0.0487) / 0.0044))


def _fransen_alpha_q(V):
    return (-2.88 * V - 0.0491) / (1.0 - np.exp((V - 0.0491) / 0.00463))


def _fransen_beta_q(V):
    return (6.94 * V + 0.447) / (1.0 - np.exp(-(V + 0.447) / 0.00263))


def _fransen_q_inf(V):
    return 1.0 / (1.0 + np.exp((V + 0.0488) / 0.00998))


def _fransen_tau_q(V):
    """
    NaP inactivation time constant.

    Only positive for V above roughly -0.097 V; below that alpha_q + beta_q
    changes sign.
    """
    return 1.0 / (_fransen_alpha_q(V) + _fransen_beta_q(V))


def _fransen_rf_inf(V):
    return 1.0 / (1.0 + np.exp((V + 0.100) / 0.003))


def _fransen_tau_rf(V):
    return 0.00051 / (np.exp((V - 0.0017) / 0.01) + np.exp(-(V + 0.34) / 0.52))


def _fransen_rs_inf(V):
    return (1.0 + np.exp((V + 0.00283) / 0.0159)) ** (-58.5)


def _fransen_tau_rs(V):
    return 0.0056 / (np.exp((V - 0.017) / 0.014) + np.exp(-(V + 0.260) / 0.043))


# Rotstein et al. kinetics (mV, ms)

def _rotstein_e(V):
    return np.exp(-(V + 38.0) / 6.5)


def _rotstein_p_inf(V):
    return 1.0 / (1.0 + _rotstein_e(V))


def _rotstein_rf_inf(V):
    return 1.0 / (1.0 + np.exp((V + 79.2) / 9.78))


def _rotstein_tau_rf(V):
    return 1.0 + 0.51 / (np.exp((V - 1.7) / 10.0) + np.exp(-(V + 340.0) / 52.0))


def _rotstein_rs_inf(V):
    return (1.0 + np.exp((V + 2.83) / 15.9)) ** (-58.0)


def _rotstein_tau_rs(V):
    return 1.0 + 5.6 / (np.exp((V - 1.7) / 14.0) + np.exp(-(V + 260.0) / 43.0))


FRANSEN = RateFunctionSet(
    name='Fransen',
    rf_inf=_fransen_rf_inf,
    tau_rf=_fransen_tau_rf,
    rs_inf=_fransen_rs_inf,
    tau_rs=_fransen_tau_rs,
    p_inf=_fransen_p_inf,
    q_inf=_fransen_q_inf,
    tau_q=_fransen_tau_q,
    voltage_range=(-0.1, 0.0),
)

ROTSTEIN = RateFunctionSet(
    name='Rotstein',
    rf_inf=_rotstein_rf_inf,
    tau_rf=_rotstein_tau_rf,
    rs_inf=_rotstein_rs_inf,
    tau_rs=_rotstein_tau_rs,
    p_inf=_rotstein_p_inf,
    voltage_range=(-100.0, 0.0),
)

RATE_FUNCTIONS: Dict[str, RateFunctionSet] = {
    'fransen': FRANSEN,
    'rotstein': ROTSTEIN,
}


def get_rate_functions(name) -> RateFunctionSet:
    """
    Look up a rate function set by name (case-insensitive).

    A RateFunctionSet instance is returned unchanged, None selects Fransen.
    """
    if name is None:
        return FRANSEN
    if isinstance(name, RateFunctionSet):
        return name
    try:
        return RATE_FUNCTIONS[str(name).lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown rate function set: '{name}'. "
            f"Valid options are {[r.name for r in RATE_FUNCTIONS.values()]}."
        ) from None
