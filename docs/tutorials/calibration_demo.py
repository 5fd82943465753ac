"""
Read the calibration of a qiskit backend, save it as json and use it for the simulator and the scheduler.

Usage:
- Do pip install -e . on top level of the repository.
- Run the script with path on top level of the repository.

Note:
- The files are saved in the output folder configured in configuration/settings.py.
"""

import os

from qiskit.providers.fake_provider import GenericBackendV2

from tqqc_sim.utilities import CalibrationInfo
from tqqc_sim.simulators import SimulatorBackend
from tqqc_sim.schedules import compute_asap
from tqqc_sim.quantum_algorithms import ghz_circ
from configuration.settings import OUTPUT_DIR


# Load calibration from a qiskit backend
qiskit_backend = GenericBackendV2(num_qubits=7, seed=42)
calibration = CalibrationInfo.from_backend(qiskit_backend, qubits_layout=[0, 1, 2, 3, 4])
print(calibration)

location = OUTPUT_DIR + "calibration/"
if not os.path.exists(location[:-1]):
    os.makedirs(location[:-1])

# Save calibration as json and load it again
calibration.save_to_json(location)
calibration_from_json = CalibrationInfo.load_from_json(location)
print(f"Loaded calibration is equal: {calibration == calibration_from_json}.")

# Select qubits
print(f"Best qubits: {calibration.best_qubits(3)}.")
print(f"Linear chain of length 3: {calibration.best_linear_chain(3)}.")

# Simulate and schedule a GHZ circuit with the calibrated noise and gate times
circ = ghz_circ(5)
backend = SimulatorBackend(5, calibration.to_noise_model(), seed=42).with_calibration(calibration)
result = backend.execute(circ, shots=4096)
print(f"GHZ parity: {result.parity_expectation():.4f}, most frequent: {result.most_frequent()}.")

schedule = compute_asap(circ, calibration.to_gate_times())
print(schedule)
print(f"Idle times in ns: {schedule.idle_times()}.")
print(f"Estimated decoherence: {schedule.estimate_decoherence(calibration.to_noise_vectors()):.5f}.")
