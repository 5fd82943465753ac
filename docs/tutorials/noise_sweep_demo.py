"""
Sweep the depolarizing noise and compare the parity before and after the TQQC optimisation.

Usage:
- Do pip install -e . on top level of the repository.
- Run the script with path on top level of the repository.

Note:
- The plot is saved in the output folder configured in configuration/settings.py.
"""

import logging
import os

import numpy as np
import matplotlib.pyplot as plt

from tqqc_sim.tqqc import TqqcConfig, TqqcEngine
from tqqc_sim.simulators import SimulatorBackend
from tqqc_sim.utilities import threshold_for_qubits
from configuration.settings import OUTPUT_DIR

logging.basicConfig(level=logging.WARNING)


qubits = 5
noise_levels = np.linspace(0.0, 0.05, 6)
config = TqqcConfig.default_5q().with_points(10).with_shots(4096).with_seed(42)

baseline, final = [], []
for noise in noise_levels:
    backend = SimulatorBackend.from_depol(qubits, noise).with_seed(42)
    result = TqqcEngine(config.with_noise(noise), backend).optimize()
    baseline.append(result.parity_baseline)
    final.append(result.parity_final)
    print(f"noise={noise:.3f}: {result.parity_baseline:.4f} -> {result.parity_final:.4f} "
          f"({result.iterations} iterations)")

plt.figure(figsize=(6, 4))
plt.plot(noise_levels, baseline, "o-", label="Baseline")
plt.plot(noise_levels, final, "s-", label="After TQQC")
plt.axvline(threshold_for_qubits(qubits), color="grey", linestyle="--", label="Threshold")
plt.xlabel("Depolarizing noise")
plt.ylabel("Parity")
plt.legend()
plt.tight_layout()

if not os.path.exists(OUTPUT_DIR[:-1]):
    os.makedirs(OUTPUT_DIR[:-1])
plt.savefig(OUTPUT_DIR + "noise_sweep.png")
