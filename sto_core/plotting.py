"""
Multi-panel figure of an oscillation run.
"""

import numpy as np


def plot_results(time: np.ndarray, states: np.ndarray, currents: np.ndarray,
                 figsize=(12, 10), title: str = 'Subthreshold Oscillation'):
    """
    Plot voltage, gating variables and currents.

    Panels:
        1. V vs time
        2. rf, rs vs time (left axis) and q vs time (right axis, 4-state only)
        3. I_H, I_NaP vs time
        4. I_H, I_NaP vs V

    Args:
        time: Sample times, shape (N,)
        states: Columns (V, rf, rs[, q]), shape (N, 3) or (N, 4)
        currents: Columns (I_H, I_NaP), shape (N, 2)
        figsize: Figure size

    Returns:
        matplotlib figure and axes
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError("Matplotlib required for plotting. Install with: pip install matplotlib")

    states = np.asarray(states)
    currents = np.asarray(currents)
    V = states[:, 0]

    fig, axes = plt.subplots(4, 1, figsize=figsize)

    ax = axes[0]
    ax.plot(time, V, 'k')
    ax.set_ylabel('V')
    ax.set_xlabel('Time')
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.plot(time, states[:, 1], label='rf')
    ax.plot(time, states[:, 2], label='rs')
    ax.set_ylabel('H activation')
    ax.set_xlabel('Time')
    ax.grid(True, alpha=0.3)
    lines, labels = ax.get_legend_handles_labels()
    if states.shape[1] > 3:
        ax_q = ax.twinx()
        ax_q.plot(time, states[:, 3], 'r--', label='q')
        ax_q.set_ylabel('NaP inactivation')
        q_lines, q_labels = ax_q.get_legend_handles_labels()
        lines += q_lines
        labels += q_labels
    ax.legend(lines, labels, loc='best')

    ax = axes[2]
    ax.plot(time, currents[:, 0], label='I_H')
    ax.plot(time, currents[:, 1], label='I_NaP')
    ax.set_ylabel('Current')
    ax.set_xlabel('Time')
    ax.legend(loc='best')
    ax.grid(True, alpha=0.3)

    ax = axes[3]
    ax.plot(V, currents[:, 0], label='I_H')
    ax.plot(V, currents[:, 1], label='I_NaP')
    ax.set_ylabel('Current')
    ax.set_xlabel('V')
    ax.legend(loc='best')
    ax.grid(True, alpha=0.3)

    fig.suptitle(title)
    plt.tight_layout()

    return fig, axes
