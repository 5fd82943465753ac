"""
Timing of a scheduled circuit with idle time, parallelism and decoherence analysis.
"""

import numpy as np

from .scheduled_gate import ScheduledGate


class CircuitSchedule(object):
    """ Scheduled gates of a circuit in circuit order, plus the time at which each qubit becomes free.

    Args:
        gates (list[ScheduledGate]): Gates with their start and end times.
        total_duration_ns (float): Duration of the whole circuit.
        num_qubits (int): Number of qubits.
        qubit_end_times (list[float]): Time at which each qubit finishes its last operation.

    Note:
        The idle time of a qubit is its end time minus the time spent in gates acting on it. Gates without qubits
        (MeasureAll) synchronise all qubits but are not counted as active time of any qubit.

    Example:
        .. code:: python

            schedule = compute_asap(circuit, GateTimes.default())
            print(schedule.total_duration_us(), schedule.idle_times())
    """

    def __init__(self, gates: list, total_duration_ns: float, num_qubits: int, qubit_end_times: list):
        self.gates = list(gates)
        self.total_duration_ns = total_duration_ns
        self.num_qubits = num_qubits
        self.qubit_end_times = list(qubit_end_times)

    @classmethod
    def empty(cls, num_qubits: int):
        return cls([], 0.0, num_qubits, [0.0] * num_qubits)

    def total_duration_us(self) -> float:
        return self.total_duration_ns / 1000.0

    def num_gates(self) -> int:
        return len(self.gates)

    # Critical path

    def critical_path_depth(self) -> int:
        """ Number of distinct start times, up to 1e-6 ns. """
        layers = []
        for start in sorted(g.start_time_ns for g in self.gates):
            if not layers or abs(start - layers[-1]) >= 1e-6:
                layers.append(start)
        return len(layers)

    def critical_path(self) -> list:
        """ Indices of the gates acting on the qubit that finishes last. """
        if not self.qubit_end_times:
            return []
        critical_qubit = int(np.argmax(self.qubit_end_times))
        return [g.gate_idx for g in self.gates if g.affects_qubit(critical_qubit)]

    # Idle time

    def idle_times(self) -> list:
        active_times = [0.0] * self.num_qubits
        for g in self.gates:
            duration = g.duration()
            for q in g.qubits():
                if q < self.num_qubits:
                    active_times[q] += duration
        return [max(end - active, 0.0) for end, active in zip(self.qubit_end_times, active_times)]

    def total_idle_time(self) -> float:
        return sum(self.idle_times())

    def weighted_idle_time(self, noise_vectors) -> float:
        """ Sum over the qubits of the idle time in units of T2. Qubits without noise vector use T2 = 60 µs. """
        noise_vectors = list(noise_vectors)
        total = 0.0
        for q, idle_ns in enumerate(self.idle_times()):
            t2_ns = noise_vectors[q].t2 * 1000.0 if q < len(noise_vectors) else 60_000.0
            if t2_ns > 0.0:
                total += idle_ns / t2_ns
        return total

    # Parallelism

    def parallelism_factor(self) -> float:
        if self.total_duration_ns <= 0.0 or not self.gates:
            return 1.0
        return sum(g.duration() for g in self.gates) / self.total_duration_ns

    def concurrent_gates_at(self, time_ns: float) -> int:
        return sum(1 for g in self.gates if g.start_time_ns <= time_ns < g.end_time_ns)

    def max_concurrent_gates(self) -> int:
        return max((self.concurrent_gates_at(g.start_time_ns) for g in self.gates), default=0)

    # Decoherence

    def estimate_decoherence(self, noise_vectors) -> float:
        """ Mean over the qubits of the dephasing probability accumulated while idling. """
        return self._mean_idle_error(noise_vectors, lambda nv, idle_us: nv.estimate_decoherence(idle_us))

    def estimate_t1_error(self, noise_vectors) -> float:
        """ Mean over the qubits of the relaxation probability accumulated while idling. """
        return self._mean_idle_error(noise_vectors, lambda nv, idle_us: nv.estimate_t1_error(idle_us))

    def _mean_idle_error(self, noise_vectors, error) -> float:
        if self.num_qubits == 0:
            return 0.0
        noise_vectors = list(noise_vectors)
        total = 0.0
        for q, idle_ns in enumerate(self.idle_times()):
            if q < len(noise_vectors):
                total += error(noise_vectors[q], idle_ns / 1000.0)
        return total / self.num_qubits

    # Gate statistics

    def count_1q(self) -> int:
        return sum(1 for g in self.gates if g.is_single_qubit)

    def count_2q(self) -> int:
        return sum(1 for g in self.gates if g.is_two_qubit)

    def count_measurements(self) -> int:
        return sum(1 for g in self.gates if g.is_measurement)

    def gates_on_qubit(self, qubit: int) -> list:
        return [g for g in self.gates if g.affects_qubit(qubit)]

    def gates_in_range(self, start_ns: float, end_ns: float) -> list:
        return [g for g in self.gates if g.overlaps(start_ns, end_ns)]

    def __len__(self):
        return len(self.gates)

    def __iter__(self):
        return iter(self.gates)

    def __eq__(self, other):
        if not isinstance(other, CircuitSchedule):
            return NotImplemented
        return (
            self.gates == other.gates
            and self.total_duration_ns == other.total_duration_ns
            and self.num_qubits == other.num_qubits
            and self.qubit_end_times == other.qubit_end_times
        )

    def __str__(self):
        return (
            f"CircuitSchedule:\n"
            f"  Qubits: {self.num_qubits}\n"
            f"  Gates: {len(self.gates)}\n"
            f"  Duration: {self.total_duration_us():.2f} μs\n"
            f"  Parallelism: {self.parallelism_factor():.2f}x\n"
            f"  Critical depth: {self.critical_path_depth()}\n"
            f"  Total idle: {self.total_idle_time() / 1000.0:.2f} μs"
        )
