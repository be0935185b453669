"""
Default parameter sets for the supported rate function families.
"""

from .exceptions import ConfigurationError
from .models import OscParameters


def _fransen() -> OscParameters:
    # SI units: V, s, A, S, F
    return OscParameters(
        V_0=-0.065,
        t_end=1.0,
        dt=1e-4,
        solver='euler',
        G_L=3.0e-9,
        V_L=-0.065,
        C_m=1.0e-10,
        G_H_Fast_Max=1.5e-9,
        G_H_Slow_Max=1.0e-9,
        V_H=-0.020,
        G_NaP_Max=5.0e-10,
        V_NaP=0.087,
        I_app=0.0,
        rate_functions='Fransen',
    )


def _rotstein() -> OscParameters:
    # mV, ms, uA/cm^2, mS/cm^2, uF/cm^2
    return OscParameters(
        V_0=-65.0,
        t_end=1000.0,
        dt=0.01,
        solver='euler',
        G_L=0.5,
        V_L=-65.0,
        C_m=1.0,
        G_H_Fast_Max=0.975,
        G_H_Slow_Max=0.525,
        V_H=-20.0,
        G_NaP_Max=0.5,
        V_NaP=55.0,
        I_app=0.0,
        rate_functions='Rotstein',
    )


_DEFAULTS = {
    'fransen': _fransen,
    'rotstein': _rotstein,
}


def default_params(name: str = 'Fransen') -> OscParameters:
    """
    Fully populated parameters for a named configuration.

    A new record is returned on every call.
    """
    try:
        factory = _DEFAULTS[str(name).lower()]
    except KeyError:
        raise ConfigurationError(
            f"No default parameters for '{name}'. "
            f"Valid options are {sorted(_DEFAULTS)}."
        ) from None
    return factory()
