"""
STO Core - Subthreshold oscillations driven by H-current and persistent sodium.
"""

from .exceptions import ConfigurationError

from .rates import (
    RateFunctionSet,
    FRANSEN,
    ROTSTEIN,
    RATE_FUNCTIONS,
    get_rate_functions
)

from .models import (
    OscParameters,
    OscState,
    ChannelNoise,
    compute_currents,
    injected_current,
    derivatives,
    initial_state,
    total_current,
    resting_potential
)

from .integrators import (
    Solver,
    IntegratorBase,
    FixedStepIntegrator,
    ForwardEuler,
    CrankNicolson,
    ScipyAdaptive,
    make_integrator,
    time_grid
)

from .defaults import default_params

from .simulator import (
    simulate,
    SimulationResult,
    OscillationModel,
    Simulator
)

from .io import save_results, load_results

from .analysis import (
    detect_crossings,
    oscillation_frequency,
    oscillation_amplitude
)

__all__ = [
    'ConfigurationError',

    # Rate functions
    'RateFunctionSet',
    'FRANSEN',
    'ROTSTEIN',
    'RATE_FUNCTIONS',
    'get_rate_functions',

    # Models
    'OscParameters',
    'OscState',
    'ChannelNoise',
    'compute_currents',
    'injected_current',
    'derivatives',
    'initial_state',
    'total_current',
    'resting_potential',

    # Integrators
    'Solver',
    'IntegratorBase',
    'FixedStepIntegrator',
    'ForwardEuler',
    'CrankNicolson',
    'ScipyAdaptive',
    'make_integrator',
    'time_grid',

    # Simulation
    'default_params',
    'simulate',
    'SimulationResult',
    'OscillationModel',
    'Simulator',

    # Persistence and analysis
    'save_results',
    'load_results',
    'detect_crossings',
    'oscillation_frequency',
    'oscillation_amplitude',
]
