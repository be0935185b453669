"""
Persistence of simulation results as a single compressed NumPy archive.
"""

import json
import os
from typing import Dict, Any

import numpy as np

from .models import OscParameters


def _jsonable(value):
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, (np.floating, np.integer)):
        return value.item()
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    return value


def save_results(path, time: np.ndarray, states: np.ndarray,
                 currents: np.ndarray, params: OscParameters) -> str:
    """
    Write time, states, currents and parameters to ``path``.

    Parameters are stored as JSON in the ``params`` entry. A ``.npz``
    extension is appended if missing.

    Returns:
        Name of the written file
    """
    path = os.fspath(path)
    if not path.endswith('.npz'):
        path += '.npz'
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    meta = _jsonable(params.to_dict())
    np.savez_compressed(
        path,
        time=np.asarray(time),
        states=np.asarray(states),
        currents=np.asarray(currents),
        params=json.dumps(meta),
    )
    return path


def load_results(path) -> Dict[str, Any]:
    """
    Read an archive written by ``save_results``.

    Returns:
        Dictionary with keys 'time', 'states', 'currents' (arrays) and
        'params' (OscParameters)
    """
    with np.load(os.fspath(path)) as data:
        params = OscParameters.from_dict(json.loads(str(data['params'])))
        return {
            'time': data['time'],
            'states': data['states'],
            'currents': data['currents'],
            'params': params,
        }
