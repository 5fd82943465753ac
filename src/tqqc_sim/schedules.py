""" ASAP scheduling of circuits and the timing metrics derived from a schedule. """

from ._schedule.scheduled_gate import ScheduledGate, TimeSlot
from ._schedule.circuit_schedule import CircuitSchedule
from ._schedule.scheduler import (
    compute_asap,
    estimate_decoherence,
    compute_idle_error,
    score_circuit,
    find_bottleneck_qubit,
    potential_speedup,
    scheduling_efficiency,
)
