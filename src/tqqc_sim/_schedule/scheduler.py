"""
ASAP scheduling of circuits and schedule based scores.

Every gate starts as soon as all of its qubits are free. Gates without qubits (MeasureAll) act as a global barrier
and wait for every qubit.
"""

import logging
import math

from .circuit_schedule import CircuitSchedule
from .scheduled_gate import ScheduledGate
from .._circuit.circuit import Circuit
from .._noise.gate_times import GateTimes


logger = logging.getLogger(__name__)


def compute_asap(circuit: Circuit, gate_times: GateTimes=None) -> CircuitSchedule:
    """ Computes the as soon as possible schedule of the circuit.

    Args:
        circuit (Circuit): Circuit to schedule.
        gate_times (GateTimes): Durations of the gates, GateTimes.default() if None.

    Returns:
        The CircuitSchedule with one ScheduledGate per gate of the circuit.
    """
    if gate_times is None:
        gate_times = GateTimes.default()
    num_qubits = circuit.num_qubits
    if circuit.is_empty():
        return CircuitSchedule.empty(num_qubits)

    qubit_available = [0.0] * num_qubits
    scheduled_gates = []
    for gate_idx, gate in enumerate(circuit.gates):
        qubits = [q for q in gate.qubits() if q < num_qubits]
        duration = gate_times.gate_duration(gate)

        if not gate.qubits():
            start_time = max(qubit_available, default=0.0)
        else:
            start_time = max((qubit_available[q] for q in qubits), default=0.0)
        end_time = start_time + duration
        scheduled_gates.append(ScheduledGate(gate_idx, gate, start_time, end_time))

        if not gate.qubits():
            qubit_available = [end_time] * num_qubits
        else:
            for q in qubits:
                qubit_available[q] = end_time

    total_duration = max(qubit_available, default=0.0)
    schedule = CircuitSchedule(scheduled_gates, total_duration, num_qubits, qubit_available)
    logger.debug(f"Scheduled {len(scheduled_gates)} gates, total duration {total_duration:.1f} ns.")
    return schedule


def estimate_decoherence(schedule: CircuitSchedule, noise_vectors) -> float:
    return schedule.estimate_decoherence(noise_vectors)


def compute_idle_error(idle_ns: float, t2_us: float) -> float:
    """ Dephasing probability of a qubit idling for idle_ns with the given T2. Zero for non-positive or infinite T2. """
    if t2_us <= 0.0 or math.isinf(t2_us):
        return 0.0
    return 1.0 - math.exp(-(idle_ns / 1000.0) / t2_us)


def score_circuit(circuit: Circuit, noise_vectors, gate_times: GateTimes=None) -> float:
    """ Expected fidelity of the circuit, higher is better.

    It is the product of the gate fidelity (using the worst qubit of each gate), the coherence fidelity of the ASAP
    schedule and the readout fidelity of the measured qubits.
    """
    noise_vectors = list(noise_vectors)
    schedule = compute_asap(circuit, gate_times)

    gate_fidelity = 1.0
    for gate in circuit.gates:
        qubits = gate.qubits()
        if not qubits:
            continue
        errors = [
            noise_vectors[q].gate_error_2q if gate.is_two_qubit else noise_vectors[q].gate_error_1q
            for q in qubits if q < len(noise_vectors)
        ]
        gate_fidelity *= 1.0 - max(errors, default=0.0)

    coherence_fidelity = 1.0 - schedule.estimate_decoherence(noise_vectors)

    readout_fidelity = 1.0
    for nv in noise_vectors[:circuit.num_qubits]:
        readout_fidelity *= 1.0 - nv.readout_error

    return gate_fidelity * coherence_fidelity * readout_fidelity


def find_bottleneck_qubit(schedule: CircuitSchedule):
    """ Qubit with the most idle time, None for a schedule without qubits. """
    idle_times = schedule.idle_times()
    if not idle_times:
        return None
    return max(range(len(idle_times)), key=lambda q: idle_times[q])


def potential_speedup(schedule: CircuitSchedule) -> float:
    return schedule.parallelism_factor()


def scheduling_efficiency(schedule: CircuitSchedule) -> float:
    """ Fraction of the qubit time spent in gates, 1.0 means no idle time at all. """
    total_active = sum(g.duration() for g in schedule.gates)
    total_time = schedule.total_duration_ns * schedule.num_qubits
    return total_active / total_time if total_time > 0.0 else 1.0
