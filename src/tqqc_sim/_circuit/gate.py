"""
Immutable gate instructions.

A Gate is identified by its kind (e.g. "cx", "rz", "measure_all"), the qubits it acts on and its real parameters.
The set of kinds is closed and described by the table _SPECS. Gates are created with the factory class methods,
for example ``Gate.h(0)``, ``Gate.cnot(0, 1)`` or ``Gate.rz(2, np.pi / 4)``.

Note:
    Multi-qubit matrices are written with the first listed qubit as the most significant index, i.e. control
    qubits come first. The simulator takes care of mapping them to the state vector.
"""

import math
import numpy as np

from .._utility.constants import Physics
from .._utility.errors import InvalidAngle, InvalidGateParameter
from .._utility.types import Basis


# kind: (qasm name, number of qubits or None if variable, number of parameters, category)
_SPECS = {
    "h": ("h", 1, 0, "1q"),
    "x": ("x", 1, 0, "1q"),
    "y": ("y", 1, 0, "1q"),
    "z": ("z", 1, 0, "1q"),
    "s": ("s", 1, 0, "1q"),
    "sdg": ("sdg", 1, 0, "1q"),
    "t": ("t", 1, 0, "1q"),
    "tdg": ("tdg", 1, 0, "1q"),
    "sx": ("sx", 1, 0, "1q"),
    "sxdg": ("sxdg", 1, 0, "1q"),
    "id": ("id", 1, 0, "1q"),
    "rx": ("rx", 1, 1, "1q"),
    "ry": ("ry", 1, 1, "1q"),
    "rz": ("rz", 1, 1, "1q"),
    "u": ("u", 1, 3, "1q"),
    "p": ("p", 1, 1, "1q"),
    "cx": ("cx", 2, 0, "2q"),
    "cz": ("cz", 2, 0, "2q"),
    "cy": ("cy", 2, 0, "2q"),
    "swap": ("swap", 2, 0, "2q"),
    "iswap": ("iswap", 2, 0, "2q"),
    "ecr": ("ecr", 2, 0, "2q"),
    "crz": ("crz", 2, 1, "2q"),
    "crx": ("crx", 2, 1, "2q"),
    "cry": ("cry", 2, 1, "2q"),
    "ccx": ("ccx", 3, 0, "3q"),
    "cswap": ("cswap", 3, 0, "3q"),
    "measure": ("measure", 1, 0, "measure"),
    "measure_all": ("measure", 0, 0, "measure"),
    "barrier": ("barrier", None, 0, "barrier"),
    "reset": ("reset", 1, 0, "reset"),
}

_SQRT1_2 = 1.0 / math.sqrt(2.0)


def _gate_time_s(kind: str) -> float:
    """ Duration of the gate in seconds on the reference superconducting device. """
    t = Physics.GATE_TIMES_S
    if kind in t:
        return t[kind]
    return {
        "sxdg": t["sx"],
        "id": 0.0,
        "u": 3.0 * t["rx"],
        "p": t["rz"],
        "cy": t["cx"],
        "iswap": t["swap"],
        "ecr": t["cx"],
        "crz": 2.0 * t["cx"],
        "crx": 2.0 * t["cx"],
        "cry": 2.0 * t["cx"],
        "ccx": 6.0 * t["cx"],
        "cswap": 8.0 * t["cx"],
        "measure": Physics.MEASUREMENT_NS * 1e-9,
        "measure_all": Physics.MEASUREMENT_NS * 1e-9,
        "barrier": 0.0,
        "reset": Physics.RESET_NS * 1e-9,
    }[kind]


class Gate(object):
    """ Quantum gate or control instruction acting on specific qubits.

    Args:
        kind (str): Key of the gate, one of the kinds listed in _SPECS.
        qubits (tuple[int]): Qubits the gate acts on, controls first.
        params (tuple[float]): Real parameters (angles in radians).

    Raises:
        InvalidGateParameter: If the number of qubits or parameters does not match the kind, or a qubit repeats.
        InvalidAngle: If a parameter is not finite.

    Example:
        .. code:: python

            g = Gate.crz(0, 1, np.pi / 2)
            g.name            # "crz"
            g.qubits()        # [0, 1]
            g.to_qasm()       # "crz(1.5707963267948966) q[0],q[1];"
    """

    __slots__ = ("_kind", "_qubits", "_params")

    def __init__(self, kind: str, qubits=(), params=()):
        if kind not in _SPECS:
            raise InvalidGateParameter(f"unknown gate kind '{kind}'")
        _, n_qubits, n_params, _ = _SPECS[kind]
        qubits = tuple(int(q) for q in qubits)
        params = tuple(float(p) for p in params)
        if n_qubits is not None and len(qubits) != n_qubits:
            raise InvalidGateParameter(f"gate '{kind}' acts on {n_qubits} qubit(s) but got {len(qubits)}")
        if len(params) != n_params:
            raise InvalidGateParameter(f"gate '{kind}' takes {n_params} parameter(s) but got {len(params)}")
        if any(q < 0 for q in qubits):
            raise InvalidGateParameter(f"negative qubit index in {qubits}")
        if kind != "barrier" and len(set(qubits)) != len(qubits):
            raise InvalidGateParameter(f"gate '{kind}' got repeated qubits {qubits}")
        for p in params:
            if not math.isfinite(p):
                raise InvalidAngle(p)
        self._kind = kind
        self._qubits = qubits
        self._params = params

    # Factories

    @classmethod
    def h(cls, q: int):
        return cls("h", (q,))

    @classmethod
    def x(cls, q: int):
        return cls("x", (q,))

    @classmethod
    def y(cls, q: int):
        return cls("y", (q,))

    @classmethod
    def z(cls, q: int):
        return cls("z", (q,))

    @classmethod
    def s(cls, q: int):
        return cls("s", (q,))

    @classmethod
    def sdg(cls, q: int):
        return cls("sdg", (q,))

    @classmethod
    def t(cls, q: int):
        return cls("t", (q,))

    @classmethod
    def tdg(cls, q: int):
        return cls("tdg", (q,))

    @classmethod
    def sx(cls, q: int):
        return cls("sx", (q,))

    @classmethod
    def sxdg(cls, q: int):
        return cls("sxdg", (q,))

    @classmethod
    def id(cls, q: int):
        return cls("id", (q,))

    @classmethod
    def rx(cls, q: int, theta: float):
        return cls("rx", (q,), (theta,))

    @classmethod
    def ry(cls, q: int, theta: float):
        return cls("ry", (q,), (theta,))

    @classmethod
    def rz(cls, q: int, theta: float):
        return cls("rz", (q,), (theta,))

    @classmethod
    def u(cls, q: int, theta: float, phi: float, lam: float):
        return cls("u", (q,), (theta, phi, lam))

    @classmethod
    def p(cls, q: int, lam: float):
        return cls("p", (q,), (lam,))

    @classmethod
    def cnot(cls, control: int, target: int):
        return cls("cx", (control, target))

    cx = cnot

    @classmethod
    def cz(cls, control: int, target: int):
        return cls("cz", (control, target))

    @classmethod
    def cy(cls, control: int, target: int):
        return cls("cy", (control, target))

    @classmethod
    def swap(cls, q1: int, q2: int):
        return cls("swap", (q1, q2))

    @classmethod
    def iswap(cls, q1: int, q2: int):
        return cls("iswap", (q1, q2))

    @classmethod
    def ecr(cls, control: int, target: int):
        return cls("ecr", (control, target))

    @classmethod
    def crz(cls, control: int, target: int, theta: float):
        return cls("crz", (control, target), (theta,))

    @classmethod
    def crx(cls, control: int, target: int, theta: float):
        return cls("crx", (control, target), (theta,))

    @classmethod
    def cry(cls, control: int, target: int, theta: float):
        return cls("cry", (control, target), (theta,))

    @classmethod
    def ccx(cls, c1: int, c2: int, target: int):
        return cls("ccx", (c1, c2, target))

    @classmethod
    def cswap(cls, control: int, q1: int, q2: int):
        return cls("cswap", (control, q1, q2))

    @classmethod
    def measure(cls, q: int):
        return cls("measure", (q,))

    @classmethod
    def measure_all(cls):
        return cls("measure_all")

    @classmethod
    def barrier(cls, qubits=()):
        return cls("barrier", tuple(qubits))

    @classmethod
    def reset(cls, q: int):
        return cls("reset", (q,))

    # Properties

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def name(self) -> str:
        """ OpenQASM name of the gate. MeasureAll is reported as "measure". """
        return _SPECS[self._kind][0]

    @property
    def params(self) -> tuple:
        return self._params

    def qubits(self) -> list:
        """ Qubits the gate acts on. Empty for MeasureAll, which applies to every qubit. """
        return list(self._qubits)

    @property
    def is_single_qubit(self) -> bool:
        return _SPECS[self._kind][3] == "1q"

    @property
    def is_two_qubit(self) -> bool:
        return _SPECS[self._kind][3] == "2q"

    @property
    def is_three_qubit(self) -> bool:
        return _SPECS[self._kind][3] == "3q"

    @property
    def is_parameterized(self) -> bool:
        return _SPECS[self._kind][2] > 0

    @property
    def is_measurement(self) -> bool:
        return _SPECS[self._kind][3] == "measure"

    @property
    def is_barrier(self) -> bool:
        return self._kind == "barrier"

    @property
    def is_unitary(self) -> bool:
        return _SPECS[self._kind][3] in ("1q", "2q", "3q")

    def gate_time_ns(self) -> float:
        return _gate_time_s(self._kind) * 1e9

    def to_qasm(self) -> str:
        qs = ",".join(f"q[{q}]" for q in self._qubits)
        if self._kind == "measure":
            q = self._qubits[0]
            return f"measure q[{q}] -> c[{q}];"
        if self._kind == "measure_all":
            return "measure q -> c;"
        if self._kind == "barrier":
            return f"barrier {qs};" if self._qubits else "barrier q;"
        if self._params:
            ps = ",".join(repr(p) for p in self._params)
            return f"{self.name}({ps}) {qs};"
        return f"{self.name} {qs};"

    def matrix(self) -> np.ndarray:
        """ Unitary of the gate with the first listed qubit as the most significant index.

        Raises:
            ValueError: For measurement, reset and barrier instructions.
        """
        if not self.is_unitary:
            raise ValueError(f"Gate '{self._kind}' has no unitary matrix.")
        return _matrix(self._kind, self._params)

    # Helpers

    @staticmethod
    def basis_transform(qubit: int, basis: Basis) -> list:
        """ Gates rotating the measurement basis of the qubit into the computational basis. """
        if basis == Basis.X:
            return [Gate.h(qubit)]
        if basis == Basis.Y:
            return [Gate.sdg(qubit), Gate.h(qubit)]
        return []

    def __eq__(self, other):
        if isinstance(other, Gate):
            return (self._kind, self._qubits, self._params) == (other._kind, other._qubits, other._params)
        return NotImplemented

    def __hash__(self):
        return hash((self._kind, self._qubits, self._params))

    def __str__(self):
        return self.to_qasm()

    def __repr__(self):
        args = ", ".join([str(q) for q in self._qubits] + [repr(p) for p in self._params])
        return f"Gate.{self._kind}({args})"


def _controlled(u: np.ndarray) -> np.ndarray:
    """ Adds one control qubit in front of the unitary u. """
    d = u.shape[0]
    m = np.eye(2 * d, dtype=complex)
    m[d:, d:] = u
    return m


def _rx(theta: float) -> np.ndarray:
    c, s = math.cos(theta / 2), math.sin(theta / 2)
    return np.array([[c, -1j * s], [-1j * s, c]], dtype=complex)


def _ry(theta: float) -> np.ndarray:
    c, s = math.cos(theta / 2), math.sin(theta / 2)
    return np.array([[c, -s], [s, c]], dtype=complex)


def _rz(theta: float) -> np.ndarray:
    return np.array([[np.exp(-0.5j * theta), 0], [0, np.exp(0.5j * theta)]], dtype=complex)


_X = np.array([[0, 1], [1, 0]], dtype=complex)
_Y = np.array([[0, -1j], [1j, 0]], dtype=complex)
_Z = np.array([[1, 0], [0, -1]], dtype=complex)
_SX = 0.5 * np.array([[1 + 1j, 1 - 1j], [1 - 1j, 1 + 1j]], dtype=complex)
_SWAP = np.array([[1, 0, 0, 0], [0, 0, 1, 0], [0, 1, 0, 0], [0, 0, 0, 1]], dtype=complex)

_FIXED = {
    "h": _SQRT1_2 * np.array([[1, 1], [1, -1]], dtype=complex),
    "x": _X,
    "y": _Y,
    "z": _Z,
    "s": np.diag([1, 1j]).astype(complex),
    "sdg": np.diag([1, -1j]).astype(complex),
    "t": np.diag([1, np.exp(0.25j * np.pi)]),
    "tdg": np.diag([1, np.exp(-0.25j * np.pi)]),
    "sx": _SX,
    "sxdg": _SX.conj().T,
    "id": np.eye(2, dtype=complex),
    "cx": _controlled(_X),
    "cz": _controlled(_Z),
    "cy": _controlled(_Y),
    "swap": _SWAP,
    "iswap": np.array([[1, 0, 0, 0], [0, 0, 1j, 0], [0, 1j, 0, 0], [0, 0, 0, 1]], dtype=complex),
    "ecr": _SQRT1_2 * np.array([[0, 0, 1, 1j], [0, 0, 1j, 1], [1, -1j, 0, 0], [-1j, 1, 0, 0]], dtype=complex),
    "ccx": _controlled(_controlled(_X)),
    "cswap": _controlled(_SWAP),
}


def _matrix(kind: str, params: tuple) -> np.ndarray:
    if kind in _FIXED:
        return _FIXED[kind].copy()
    if kind == "rx":
        return _rx(params[0])
    if kind == "ry":
        return _ry(params[0])
    if kind == "rz":
        return _rz(params[0])
    if kind == "p":
        return np.diag([1, np.exp(1j * params[0])]).astype(complex)
    if kind == "u":
        theta, phi, lam = params
        c, s = math.cos(theta / 2), math.sin(theta / 2)
        return np.array([
            [c, -np.exp(1j * lam) * s],
            [np.exp(1j * phi) * s, np.exp(1j * (phi + lam)) * c]
        ], dtype=complex)
    if kind == "crx":
        return _controlled(_rx(params[0]))
    if kind == "cry":
        return _controlled(_ry(params[0]))
    if kind == "crz":
        return _controlled(_rz(params[0]))
    raise ValueError(f"Gate '{kind}' has no unitary matrix.")


class EntanglerType(object):
    """ Two-qubit gate used to chain the qubits of the parity circuit. Either CX or CZ. """

    __slots__ = ("_name",)

    def __init__(self, name: str):
        if name not in ("cx", "cz"):
            raise InvalidGateParameter(f"unknown entangler '{name}'")
        self._name = name

    @classmethod
    def parse(cls, s: str):
        """ Parses "cx", "cnot" or "cz" ignoring case. Returns None for anything else. """
        key = s.lower()
        if key in ("cx", "cnot"):
            return cls.CX
        if key == "cz":
            return cls.CZ
        return None

    def gate(self, control: int, target: int) -> Gate:
        if self._name == "cx":
            return Gate.cnot(control, target)
        return Gate.cz(control, target)

    def __eq__(self, other):
        if isinstance(other, EntanglerType):
            return self._name == other._name
        return NotImplemented

    def __hash__(self):
        return hash(self._name)

    def __str__(self):
        return self._name

    def __repr__(self):
        return f"EntanglerType.{self._name.upper()}"


EntanglerType.CX = EntanglerType("cx")
EntanglerType.CZ = EntanglerType("cz")
