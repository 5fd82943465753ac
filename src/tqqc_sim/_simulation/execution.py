"""
Result of executing a circuit and the interface every execution backend provides.
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from .._circuit.circuit import Circuit
from .._tqqc import parity


class ExecutionMetadata(object):
    """ Information about how a result was produced.

    Attributes:
        backend (str): Name of the backend.
        job_id (str): Identifier of the job, None for local runs.
        execution_time_ms (int): Wall time of the execution.
        simulated (bool): Whether the result comes from a simulator.
        seed (int): Seed of the random number generator, None if unseeded.
        extra (dict[str, str]): Backend specific information.
    """

    def __init__(self,
                 backend: str,
                 job_id: Optional[str]=None,
                 execution_time_ms: Optional[int]=None,
                 simulated: bool=True,
                 seed: Optional[int]=None,
                 extra: Optional[Dict[str, str]]=None):
        self.backend = backend
        self.job_id = job_id
        self.execution_time_ms = execution_time_ms
        self.simulated = simulated
        self.seed = seed
        self.extra = dict(extra or {})

    def to_dict(self) -> dict:
        return {
            "backend": self.backend,
            "job_id": self.job_id,
            "execution_time_ms": self.execution_time_ms,
            "simulated": self.simulated,
            "seed": self.seed,
            "extra": dict(self.extra),
        }


class ExecutionResult(object):
    """ Measurement counts of a circuit execution.

    Args:
        counts (dict[str, int]): Map from MSB-first bitstring to number of occurrences.
        shots (int): Number of shots.
        metadata (ExecutionMetadata): Information about the execution.

    Example:
        .. code:: python

            result = ExecutionResult({"00": 480, "11": 520}, 1000, ExecutionMetadata("test"))
            result.probability("11")         # 0.52
            result.parity_expectation()      # 1.0
    """

    def __init__(self, counts: Dict[str, int], shots: int, metadata: ExecutionMetadata=None):
        self.counts = dict(counts)
        self.shots = shots
        self.metadata = metadata if metadata is not None else ExecutionMetadata("unknown")

    def total_counts(self) -> int:
        return sum(self.counts.values())

    def probability(self, bitstring: str) -> float:
        return self.counts.get(bitstring, 0) / self.shots

    def most_frequent(self):
        """ Tuple of the most frequent bitstring and its count, None if there are no counts. """
        if not self.counts:
            return None
        return max(self.counts.items(), key=lambda item: item[1])

    def parity_expectation(self) -> float:
        """ Expectation value of the parity operator Z...Z, i.e. P(even) - P(odd). """
        return parity.expectation(self.counts)

    def p_even(self) -> float:
        return parity.p_even(self.counts)

    def p_odd(self) -> float:
        return parity.p_odd(self.counts)

    def to_dict(self) -> dict:
        return {"counts": dict(self.counts), "shots": self.shots, "metadata": self.metadata.to_dict()}

    def __str__(self):
        return (
            f"ExecutionResult(shots={self.shots}, unique={len(self.counts)}, "
            f"parity={self.parity_expectation():.4f})"
        )


@runtime_checkable
class Backend(Protocol):
    """ Anything that executes circuits and returns counts.

    The simulator in this package implements the protocol, other backends (e.g. a wrapper around a hardware
    provider) only need to provide the same methods.
    """

    @property
    def name(self) -> str:
        ...

    @property
    def num_qubits(self) -> int:
        ...

    def execute(self, circuit: Circuit, shots: int) -> ExecutionResult:
        ...

    def execute_batch(self, circuits: List[Circuit], shots: int) -> List[ExecutionResult]:
        ...

    def calibration(self):
        ...

    def is_simulator(self) -> bool:
        ...

    def max_shots(self) -> int:
        ...
