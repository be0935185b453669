"""
Example: Basic subthreshold oscillation simulation

This script demonstrates how to simulate a single stellate-like cell with
the Fransen kinetics, a step of applied current, and channel noise.
"""

import os

import numpy as np
import matplotlib.pyplot as plt

from sto_core import OscillationModel, Simulator, resting_potential


def basic_demo():
    """Run basic oscillation demo."""

    print("=" * 60)
    print("Subthreshold Oscillation Simulation - Basic Demo")
    print("=" * 60)
    print()

    # Create model with default Fransen parameters
    model = OscillationModel(config='Fransen')
    params = model.get_params()

    V_rest = resting_potential(params)
    model.set_params(
        V_0=V_rest,
        t_end=2.0,         # s
        dt=1e-4,           # s
        I_app=4e-11,       # A
        I_app_t=(0.5, 2.0),
        solver='crank-nicolson',
        seed=1,
    )

    print("Model parameters:")
    print(f"  C_m = {params.C_m} F")
    print(f"  G_L = {params.G_L} S, V_L = {params.V_L} V")
    print(f"  G_H = {params.G_H_Fast_Max} / {params.G_H_Slow_Max} S (fast / slow)")
    print(f"  G_NaP = {params.G_NaP_Max} S")
    print(f"  Resting potential: {V_rest * 1000:.2f} mV")
    print()

    print(f"Running simulation ({params.solver}, dt = {params.dt} s)...")
    simulator = Simulator(model=model)
    result = simulator.run()
    print("Simulation complete!")
    print()

    print(result.summary())
    print()

    print("Generating plots...")
    fig, axes = result.plot(figsize=(12, 12))
    axes[0].axvspan(0.5, 2.0, color='r', alpha=0.05, label='I_app on')
    axes[0].legend()

    os.makedirs('plots', exist_ok=True)
    plt.savefig('plots/sto_simulation_basic.png', dpi=150, bbox_inches='tight')
    print("Plot saved as: plots/sto_simulation_basic.png")

    path = result.save('results/sto_simulation_basic')
    print(f"Results saved as: {path}")
    print()

    print("Voltage statistics:")
    print(f"  Min: {result.V.min() * 1000:.2f} mV")
    print(f"  Max: {result.V.max() * 1000:.2f} mV")
    print(f"  Final: {result.V[-1] * 1000:.2f} mV")
    print(f"  Mean I_H: {np.mean(result.I_H):.3g} A")
    print()

    print("Demo complete!")


if __name__ == "__main__":
    basic_demo()
