"""
Exceptions raised by the oscillation model.
"""


class ConfigurationError(ValueError):
    """
    Invalid simulation configuration.

    Raised before integration starts, so no partial results are produced.
    """
