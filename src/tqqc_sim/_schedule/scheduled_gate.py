"""
Gates placed on a time axis.
"""

from .._circuit.gate import Gate


class ScheduledGate(object):
    """ A gate of a circuit together with its start and end time in ns.

    Args:
        gate_idx (int): Position of the gate in the circuit.
        gate (Gate): The gate.
        start_time_ns (float): Start of the gate.
        end_time_ns (float): End of the gate.
    """

    def __init__(self, gate_idx: int, gate: Gate, start_time_ns: float, end_time_ns: float):
        self.gate_idx = gate_idx
        self.gate = gate
        self.start_time_ns = start_time_ns
        self.end_time_ns = end_time_ns

    def duration(self) -> float:
        return self.end_time_ns - self.start_time_ns

    def duration_us(self) -> float:
        return self.duration() / 1000.0

    def qubits(self) -> list:
        return self.gate.qubits()

    def overlaps(self, start: float, end: float) -> bool:
        """ Whether the gate runs during the open interval (start, end). Touching intervals do not overlap. """
        return self.start_time_ns < end and self.end_time_ns > start

    def affects_qubit(self, qubit: int) -> bool:
        return qubit in self.qubits()

    @property
    def is_single_qubit(self) -> bool:
        return self.gate.is_single_qubit

    @property
    def is_two_qubit(self) -> bool:
        return self.gate.is_two_qubit

    @property
    def is_measurement(self) -> bool:
        return self.gate.is_measurement

    def __eq__(self, other):
        if not isinstance(other, ScheduledGate):
            return NotImplemented
        return (self.gate_idx, self.gate, self.start_time_ns, self.end_time_ns) == \
            (other.gate_idx, other.gate, other.start_time_ns, other.end_time_ns)

    def __str__(self):
        return f"[{self.start_time_ns:.1f}-{self.end_time_ns:.1f}ns] {self.gate.name} on {self.qubits()}"

    def __repr__(self):
        return f"ScheduledGate({self.gate_idx}, {self.gate!r}, {self.start_time_ns}, {self.end_time_ns})"


class TimeSlot(object):
    """ Interval in which a qubit is busy. """

    def __init__(self, qubit: int, start_ns: float, end_ns: float):
        self.qubit = qubit
        self.start_ns = start_ns
        self.end_ns = end_ns

    def overlaps(self, other) -> bool:
        return self.qubit == other.qubit and self.start_ns < other.end_ns and self.end_ns > other.start_ns

    def duration(self) -> float:
        return self.end_ns - self.start_ns

    def __eq__(self, other):
        if not isinstance(other, TimeSlot):
            return NotImplemented
        return (self.qubit, self.start_ns, self.end_ns) == (other.qubit, other.start_ns, other.end_ns)
