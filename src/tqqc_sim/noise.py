""" Noise parameters of the simulator and the scheduler.

The NoiseModel holds device averages and drives the simulator. NoiseVector and NoiseVectorSet hold per-qubit values
and are used for qubit selection and decoherence estimates, GateTimes holds the gate durations in ns.
"""

from ._noise.noise_model import NoiseModel
from ._noise.noise_vector import NoiseVector, NoiseVectorSet
from ._noise.gate_times import GateTimes
