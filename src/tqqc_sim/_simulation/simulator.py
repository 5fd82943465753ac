"""Sample measurement counts of noisy circuits with a state-vector simulation.

Each shot starts in |0...0>. Before every gate a uniform number decides whether the gate fails. A failing gate is
replaced by a random Pauli X, Y or Z on its first qubit, with error probability given by the noise model (two qubit
error for two qubit gates, single qubit error for single qubit gates, none otherwise). After the last gate the
outcome is sampled from |amplitude|**2 and every bit is flipped with the readout error probability.

Shots that share the same sequence of errors evolve the same state. The simulator therefore follows groups of shots
through the circuit and only splits a group when some of its shots see an error or a reset outcome, which yields
the same distribution as simulating each shot on its own.
"""

import copy
import logging
import time
import uuid
import numpy as np
from collections import Counter

from .execution import ExecutionResult, ExecutionMetadata
from .statevector import StateVector
from .._circuit.circuit import Circuit
from .._noise.noise_model import NoiseModel
from .._utility.errors import QubitOutOfRange, ShotsOutOfRange


logger = logging.getLogger(__name__)


class SimulatorBackend(object):
    """ Local noisy simulator implementing the Backend protocol.

    Args:
        num_qubits (int): Maximal number of qubits of the circuits.
        noise_model (NoiseModel): Noise of the simulated device, ideal if None.
        seed (int): Seed for reproducible counts. Every call to execute starts a new generator from this seed.
        parallel (bool): Whether execute_batch distributes the circuits on a process pool (default: False).

    Example:
        .. code:: python

            backend = SimulatorBackend.from_depol(5, 0.02).with_seed(42)
            circuit = CircuitBuilder(5).h(0).cx_chain().measure_all().build()

            result = backend.execute(circuit, shots=1000)
            print(result.parity_expectation())

    Attributes:
        name (str): Name reported in the execution metadata.
        num_qubits (int): Maximal number of qubits.
        noise_model (NoiseModel): Noise of the simulated device.
        seed (int): Seed of the random number generator, or None.
        parallel (bool): Whether batches run in parallel.
    """

    MAX_SHOTS = 100_000

    def __init__(self, num_qubits: int, noise_model: NoiseModel=None, seed: int=None, parallel: bool=False):
        self.name = "tqqc_simulator"
        self.num_qubits = num_qubits
        self.noise_model = noise_model if noise_model is not None else NoiseModel.ideal()
        self.seed = seed
        self.parallel = parallel
        self._calibration = None

    @classmethod
    def ideal(cls, num_qubits: int):
        return cls(num_qubits, NoiseModel.ideal())

    @classmethod
    def ibm_typical(cls, num_qubits: int):
        return cls(num_qubits, NoiseModel.ibm_typical())

    @classmethod
    def from_depol(cls, num_qubits: int, p_depol: float):
        return cls(num_qubits, NoiseModel.from_depol(p_depol))

    def with_seed(self, seed: int):
        backend = copy.copy(self)
        backend.seed = seed
        return backend

    def with_calibration(self, calibration):
        backend = copy.copy(self)
        backend._calibration = calibration
        return backend

    def with_name(self, name: str):
        backend = copy.copy(self)
        backend.name = name
        return backend

    def calibration(self):
        return self._calibration

    def is_simulator(self) -> bool:
        return True

    def max_shots(self) -> int:
        return self.MAX_SHOTS

    def execute(self, circuit: Circuit, shots: int, seed: int=None) -> ExecutionResult:
        """ Runs the circuit for the given number of shots.

        Args:
            circuit (Circuit): Circuit with at most num_qubits qubits.
            shots (int): Number of shots in [1, max_shots()].
            seed (int): Overrides the seed of the backend for this call.

        Returns:
            The ExecutionResult with counts keyed by MSB-first bitstrings of length circuit.num_qubits.
        """
        seed = self.seed if seed is None else seed
        self._validate_input_of_execute(circuit, shots)
        return self._execute(circuit, shots, np.random.default_rng(seed), seed)

    def execute_batch(self, circuits: list, shots: int) -> list:
        """ Executes all circuits, each with its own generator spawned from the seed of the backend.

        The results do not depend on whether the batch runs in parallel.
        """
        for circuit in circuits:
            self._validate_input_of_execute(circuit, shots)
        seed_sequences = np.random.SeedSequence(self.seed).spawn(len(circuits))

        arg_list = [
            {
                "backend": self,
                "circuit": circuit,
                "shots": shots,
                "seed_sequence": seed_sequence,
                "index": i,
            } for i, (circuit, seed_sequence) in enumerate(zip(circuits, seed_sequences))
        ]

        if self.parallel and len(circuits) > 1:
            import multiprocessing

            cpu_count = multiprocessing.cpu_count()
            n_processes = max(int(0.8 * cpu_count), 2)
            chunksize = max(1, len(arg_list) // n_processes + (1 if len(arg_list) % n_processes > 0 else 0))
            logger.debug(f"Execute {len(circuits)} circuits on {n_processes} processes with chunksize {chunksize}.")

            with multiprocessing.Pool(n_processes) as p:
                results = list(p.imap(func=_execute_single, iterable=arg_list, chunksize=chunksize))
        else:
            results = [_execute_single(arg) for arg in arg_list]

        return results

    def _execute(self, circuit: Circuit, shots: int, rng: np.random.Generator, seed) -> ExecutionResult:
        start = time.perf_counter()
        counts = _simulate_counts(circuit, self.noise_model, shots, rng)
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.debug(f"Simulated {circuit.gate_count()} gates on {circuit.num_qubits} qubits for {shots} shots "
                     f"in {elapsed_ms} ms.")

        metadata = ExecutionMetadata(
            backend=self.name,
            job_id=f"sim-{uuid.uuid4().hex[:12]}",
            execution_time_ms=elapsed_ms,
            simulated=True,
            seed=seed,
        )
        return ExecutionResult(dict(counts), shots, metadata)

    def _validate_input_of_execute(self, circuit: Circuit, shots: int):
        if circuit.num_qubits > self.num_qubits:
            raise QubitOutOfRange(circuit.num_qubits, self.num_qubits)
        if not 1 <= shots <= self.max_shots():
            raise ShotsOutOfRange(shots, 1, self.max_shots())

    def __str__(self):
        return f"SimulatorBackend({self.name}, {self.num_qubits} qubits, {self.noise_model})"


def _execute_single(args: dict) -> ExecutionResult:
    """ Worker executing one circuit of a batch. Module level, so that it can be pickled. """
    backend = args["backend"]
    rng = np.random.default_rng(args["seed_sequence"])
    result = backend._execute(args["circuit"], args["shots"], rng, backend.seed)
    result.metadata.extra["batch_index"] = str(args["index"])
    return result


def _error_rate(gate, noise_model: NoiseModel) -> float:
    if gate.is_two_qubit:
        return noise_model.gate_error_2q
    if gate.is_single_qubit:
        return noise_model.gate_error_1q
    return 0.0


def _simulate_counts(circuit: Circuit, noise_model: NoiseModel, shots: int, rng: np.random.Generator) -> Counter:
    """ Samples the counts of the circuit by following groups of shots with identical trajectories.

    A group is a tuple (index of the next gate, state, number of shots). Groups are processed depth first in a
    fixed order, so a seeded generator always yields the same counts.
    """
    gates = circuit.gates
    counts = Counter()
    pending = [(0, StateVector(circuit.num_qubits), shots)]

    while pending:
        start, state, group = pending.pop()
        for k in range(start, len(gates)):
            gate = gates[k]

            # Gate errors replace the gate by a Pauli on its first qubit
            rate = _error_rate(gate, noise_model)
            if rate > 0.0:
                hits = int(np.count_nonzero(rng.random(group) < rate))
                if hits > 0:
                    paulis = np.bincount(rng.integers(0, 3, size=hits), minlength=3)
                    for pauli, size in zip("XYZ", paulis):
                        if size > 0:
                            branch = state.copy()
                            branch.apply_pauli(pauli, gate.qubits()[0])
                            pending.append((k + 1, branch, int(size)))
                    group -= hits
                    if group == 0:
                        break

            if gate.kind == "reset":
                q = gate.qubits()[0]
                p_one = min(max(state.probability_of_one(q), 0.0), 1.0)
                ones = int(rng.binomial(group, p_one))
                if ones > 0:
                    branch = state.copy()
                    branch.project(q, 1)
                    branch.apply_pauli("X", q)
                    pending.append((k + 1, branch, ones))
                group -= ones
                if group == 0:
                    break
                state.project(q, 0)
                continue

            state.apply(gate)
        else:
            _sample_outcomes(state, group, noise_model.readout_error, rng, counts)

    return counts


def _sample_outcomes(state: StateVector, shots: int, readout_error: float, rng: np.random.Generator,
                     counts: Counter):
    """ Samples basis states by inverting the cumulative distribution and applies readout bit flips. """
    n = state.nqubit
    cdf = np.cumsum(state.probabilities())
    outcomes = np.searchsorted(cdf, rng.random(shots), side="right")
    outcomes = np.minimum(outcomes, cdf.size - 1)

    if readout_error > 0.0:
        flips = rng.random((shots, n)) < readout_error
        flip_masks = (flips.astype(np.int64) << np.arange(n, dtype=np.int64)).sum(axis=1)
        outcomes = outcomes ^ flip_masks

    values, frequencies = np.unique(outcomes, return_counts=True)
    for value, frequency in zip(values, frequencies):
        counts[format(int(value), f"0{n}b")] += int(frequency)
