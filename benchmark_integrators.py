"""
Benchmark script: fixed-step vs scipy integrator comparison.

Compares run time and accuracy of the Euler and two-stage "Crank-Nicolson"
integrators against scipy's adaptive methods on the noise-free Fransen model.
"""

import os
import sys
import time

import numpy as np
import matplotlib.pyplot as plt

from sto_core import default_params, simulate


def make_params(solver, dt, t_end):
    params = default_params('Fransen')
    params.solver = solver
    params.dt = dt
    params.t_end = t_end
    params.noise = False
    params.I_app = 5e-11
    params.I_app_t = (0.0, t_end / 2)
    return params


def benchmark_solver(solver, dt, t_end, reference, n_runs=3):
    """
    Benchmark a specific solver.

    Args:
        solver: Solver name
        dt: Output/time step (s)
        t_end: Simulation time (s)
        reference: Reference voltage trace on the same grid
        n_runs: Number of runs for averaging

    Returns:
        Dictionary with timing and error statistics
    """
    params = make_params(solver, dt, t_end)

    times = []
    for _ in range(n_runs):
        start = time.perf_counter()
        result = simulate(params)
        times.append(time.perf_counter() - start)

    times = np.array(times)
    return {
        'mean': np.mean(times),
        'std': np.std(times),
        'max_error': np.max(np.abs(result.V - reference)),
    }


def run_comprehensive_benchmark(t_end=0.2, dts=None, n_runs=3):
    """
    Run integrator comparison benchmark.

    Args:
        t_end: Simulation time (s)
        dts: List of time steps to test
        n_runs: Number of runs per benchmark
    """
    if dts is None:
        dts = [4e-4, 2e-4, 1e-4, 5e-5, 2.5e-5]
    solvers = ['euler', 'crank-nicolson', 'RK45', 'LSODA']

    print("=" * 80)
    print("Subthreshold Oscillations: Integrator Benchmark")
    print("=" * 80)
    print(f"\nSimulation parameters:")
    print(f"  Duration: {t_end} s")
    print(f"  Time steps: {dts}")
    print(f"  Runs per test: {n_runs}")
    print(f"\n{'='*80}\n")

    results = {solver: [] for solver in solvers}

    for dt in dts:
        print(f"dt = {dt:.1e} s", end=" ... ")
        sys.stdout.flush()

        # Reference: tight-tolerance adaptive solve sampled on the same grid
        ref_params = make_params('DOP853', dt, t_end)
        ref_params.solver_options = {'rtol': 1e-11, 'atol': 1e-14}
        reference = simulate(ref_params).V

        cells = []
        for solver in solvers:
            r = benchmark_solver(solver, dt, t_end, reference, n_runs)
            results[solver].append(r)
            cells.append(f"{solver}: {r['mean']:.3f}s / {r['max_error']:.1e} V")
        print(" | ".join(cells))

    print(f"\n{'='*80}")

    fig, (ax_time, ax_err) = plt.subplots(1, 2, figsize=(14, 5))
    for solver in solvers:
        ax_time.loglog(dts, [r['mean'] for r in results[solver]], 'o-', label=solver)
        ax_err.loglog(dts, [r['max_error'] for r in results[solver]], 'o-', label=solver)

    ax_time.set_xlabel('dt (s)')
    ax_time.set_ylabel('Run time (s)')
    ax_time.set_title('Run time')
    ax_time.legend()
    ax_time.grid(True, which='both', alpha=0.3)

    ax_err.set_xlabel('dt (s)')
    ax_err.set_ylabel('Max |V - V_ref| (V)')
    ax_err.set_title('Accuracy')
    ax_err.legend()
    ax_err.grid(True, which='both', alpha=0.3)

    plt.tight_layout()
    os.makedirs('plots', exist_ok=True)
    plt.savefig('plots/benchmark_integrators.png', dpi=150, bbox_inches='tight')
    print("Plot saved as: plots/benchmark_integrators.png")

    return results


if __name__ == "__main__":
    run_comprehensive_benchmark()
