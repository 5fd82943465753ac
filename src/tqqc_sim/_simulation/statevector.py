"""Apply gates to dense state vectors.

The amplitude of basis state i is stored at index i, where bit q of i (i.e. 1 << q) is the value of qubit q. The
common gates are applied with bit-masked amplitude updates, which touch every amplitude once:

- Time complexity per gate: O(2**n)
- Space complexity: O(2**n)

The remaining multi-qubit gates are applied as tensor contractions of the gate matrix with the state reshaped to
n axes of dimension 2.
"""

import functools as ft
import string
import numpy as np
import opt_einsum as oe

from .._circuit.gate import Gate


@ft.lru_cache(maxsize=None)
def _indices(nqubit: int) -> np.ndarray:
    return np.arange(2**nqubit)


@ft.lru_cache(maxsize=None)
def _indices_with_clear(nqubit: int, mask: int) -> np.ndarray:
    """ Indices of the basis states in which all bits of the mask are zero. """
    idx = _indices(nqubit)
    return idx[(idx & mask) == 0]


@ft.lru_cache(maxsize=None)
def _indices_with(nqubit: int, set_mask: int, clear_mask: int) -> np.ndarray:
    """ Indices in which all bits of set_mask are one and all bits of clear_mask are zero. """
    idx = _indices(nqubit)
    return idx[((idx & set_mask) == set_mask) & ((idx & clear_mask) == 0)]


class StateVector(object):
    """ Dense state vector of nqubit qubits, initialised to |0...0>.

    Args:
        nqubit (int): Number of qubits.
        psi (np.array): Optional amplitudes to start from instead of |0...0>. They are copied.

    Example:
        .. code:: python

            sv = StateVector(2)
            sv.apply(Gate.h(0))
            sv.apply(Gate.cnot(0, 1))
            sv.probabilities()    # [0.5, 0, 0, 0.5]
    """

    def __init__(self, nqubit: int, psi: np.array=None):
        self.nqubit = nqubit
        if psi is None:
            self.psi = np.zeros(2**nqubit, dtype=complex)
            self.psi[0] = 1.0
        else:
            self.psi = np.array(psi, dtype=complex)
            if self.psi.size != 2**nqubit:
                raise ValueError(f"State has {self.psi.size} amplitudes but {nqubit} qubits need {2**nqubit}.")

    def copy(self):
        return StateVector(self.nqubit, self.psi)

    def probabilities(self) -> np.ndarray:
        return np.abs(self.psi)**2

    def apply(self, gate: Gate):
        """ Applies a unitary gate in place. Measurement, barrier and reset leave the state unchanged here. """
        kind = gate.kind
        qubits = gate.qubits()
        if not gate.is_unitary or kind == "id":
            return
        if kind == "x":
            self._apply_x(qubits[0])
        elif kind == "z":
            self._apply_phase(qubits[0], -1.0)
        elif kind == "cx":
            self._apply_cnot(*qubits)
        elif kind == "cz":
            self._apply_cz(*qubits)
        elif kind == "swap":
            self._apply_swap(*qubits)
        elif gate.is_single_qubit:
            self.apply_single_qubit_matrix(gate.matrix(), qubits[0])
        else:
            self.apply_matrix(gate.matrix(), qubits)

    def apply_pauli(self, pauli: str, qubit: int):
        """ Applies "X", "Y" or "Z" on the qubit. """
        if pauli == "X":
            self._apply_x(qubit)
        elif pauli == "Y":
            self.apply_single_qubit_matrix(np.array([[0, -1j], [1j, 0]]), qubit)
        elif pauli == "Z":
            self._apply_phase(qubit, -1.0)
        else:
            raise ValueError(f"Unknown Pauli '{pauli}'.")

    def apply_single_qubit_matrix(self, m: np.ndarray, qubit: int):
        idx0 = _indices_with_clear(self.nqubit, 1 << qubit)
        idx1 = idx0 | (1 << qubit)
        a = self.psi[idx0]
        b = self.psi[idx1]
        self.psi[idx0] = m[0, 0] * a + m[0, 1] * b
        self.psi[idx1] = m[1, 0] * a + m[1, 1] * b

    def apply_matrix(self, m: np.ndarray, qubits: list):
        """ Contracts the 2**k x 2**k matrix m with the state, the first qubit being the most significant index. """
        n, k = self.nqubit, len(qubits)
        letters = string.ascii_letters
        if n + k > len(letters):
            raise ValueError(f"Cannot contract a {k} qubit gate on {n} qubits.")

        # Axis j of the reshaped state belongs to qubit n - 1 - j
        state_in = list(letters[:n])
        state_out = list(state_in)
        new = letters[n:n + k]
        for i, q in enumerate(qubits):
            state_out[n - 1 - q] = new[i]
        gate_out = new
        gate_in = "".join(state_in[n - 1 - q] for q in qubits)
        subscripts = f"{gate_out}{gate_in},{''.join(state_in)}->{''.join(state_out)}"

        tensor = oe.contract(subscripts, m.reshape((2,) * (2 * k)), self.psi.reshape((2,) * n))
        self.psi = np.ascontiguousarray(tensor).reshape(2**n)

    def project(self, qubit: int, outcome: int) -> float:
        """ Projects the qubit onto the outcome and renormalises. Returns the probability of the outcome. """
        mask = 1 << qubit
        idx = _indices(self.nqubit)
        keep = ((idx & mask) != 0) == bool(outcome)
        prob = float(np.sum(np.abs(self.psi[keep])**2))
        self.psi[~keep] = 0.0
        if prob > 0.0:
            self.psi /= np.sqrt(prob)
        return prob

    def probability_of_one(self, qubit: int) -> float:
        idx = _indices(self.nqubit)
        return float(np.sum(np.abs(self.psi[(idx & (1 << qubit)) != 0])**2))

    def _apply_x(self, qubit: int):
        idx0 = _indices_with_clear(self.nqubit, 1 << qubit)
        idx1 = idx0 | (1 << qubit)
        self.psi[idx0], self.psi[idx1] = self.psi[idx1], self.psi[idx0].copy()

    def _apply_phase(self, qubit: int, phase: complex):
        idx1 = _indices_with(self.nqubit, 1 << qubit, 0)
        self.psi[idx1] *= phase

    def _apply_cnot(self, control: int, target: int):
        idx = _indices_with(self.nqubit, 1 << control, 1 << target)
        partner = idx | (1 << target)
        self.psi[idx], self.psi[partner] = self.psi[partner], self.psi[idx].copy()

    def _apply_cz(self, q1: int, q2: int):
        idx = _indices_with(self.nqubit, (1 << q1) | (1 << q2), 0)
        self.psi[idx] *= -1.0

    def _apply_swap(self, q1: int, q2: int):
        idx = _indices_with(self.nqubit, 1 << q1, 1 << q2)
        partner = idx ^ (1 << q1) ^ (1 << q2)
        self.psi[idx], self.psi[partner] = self.psi[partner], self.psi[idx].copy()
